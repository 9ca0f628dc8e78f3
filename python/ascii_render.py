"""
ASCII rendering for cascade boards.

Provides two rendering approaches:
1. Plain state map - one symbol per cell, no colors (debugging and tests)
2. Board rendering - the board's characters colored by cell state
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping

import simple_chalk as chalk  # type: ignore[import-untyped]

from board import Board
from grid_types import CellIndex, CellState, Grid

logger = logging.getLogger(__name__)

STATE_SYMBOLS: dict[CellState, str] = {
    CellState.IDLE: ".",
    CellState.EXPLODING: "*",
    CellState.HIDDEN: "_",
    CellState.FADING_IN: "+",
}

# Resting colors, picked per cell from its index
PALETTE: list[Callable[[str], str]] = [
    chalk.red,
    chalk.green,
    chalk.yellow,
    chalk.blue,
    chalk.magenta,
    chalk.cyan,
    chalk.redBright,
    chalk.greenBright,
    chalk.yellowBright,
    chalk.blueBright,
]


# =============================================================================
# Plain State Map
# =============================================================================


def render_states(grid: Grid, states: Mapping[CellIndex, CellState]) -> str:
    """
    Render one symbol per cell, rows separated by newlines.

    Cells absent from states are IDLE. A partial last row is rendered short.
    """
    if grid.columns <= 0:
        return ""

    lines: list[str] = []
    for row_start in range(0, grid.total_cells, grid.columns):
        row_end = min(row_start + grid.columns, grid.total_cells)
        lines.append(
            "".join(
                STATE_SYMBOLS[states.get(index, CellState.IDLE)]
                for index in range(row_start, row_end)
            )
        )
    return "\n".join(lines)


# =============================================================================
# Board Rendering
# =============================================================================


def render_cell(board: Board, index: CellIndex, state: CellState, cell_width: int = 3) -> str:
    """Render a single cell of the board in its current state."""
    match state:
        case CellState.IDLE:
            char = board.char_at(index)
            colorize = PALETTE[index % len(PALETTE)]
        case CellState.EXPLODING:
            char = "*"
            colorize = chalk.bgRed.white
        case CellState.HIDDEN:
            # Hidden cells keep their footprint so the grid does not shift
            return " " * cell_width
        case CellState.FADING_IN:
            char = board.char_at(index)
            colorize = chalk.white
        case _:
            raise ValueError(f"Unknown cell state: {state}")

    content = char if cell_width == 1 else char.center(cell_width)
    return colorize(content)


def render_board(
    board: Board,
    states: Mapping[CellIndex, CellState],
    cursor: CellIndex | None = None,
    cell_width: int = 3,
) -> str:
    """
    Render the board with each cell colored by its state.

    Args:
        board: Characters and grid
        states: Live state store (absent cells are IDLE)
        cursor: Optional cell to highlight in white
        cell_width: Characters per cell (default 3)

    Returns:
        Rendered string with ANSI color codes
    """
    lines: list[str] = []
    columns = board.grid.columns

    for row_idx, row in enumerate(board.rows()):
        line_parts: list[str] = []
        for col_idx in range(len(row)):
            index = row_idx * columns + col_idx
            state = states.get(index, CellState.IDLE)

            if index == cursor and state is CellState.IDLE:
                char = board.char_at(index)
                content = char if cell_width == 1 else char.center(cell_width)
                line_parts.append(chalk.bgWhite.black(content))
            else:
                line_parts.append(render_cell(board, index, state, cell_width))

        lines.append("".join(line_parts))

    logger.debug(
        "render_board: %d rows, %d animating cells", len(lines), len(states)
    )
    return "\n".join(lines)
