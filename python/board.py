"""
Character boards laid out on a cascade grid.

A board is the content side of the decoration grid: one character per
cell, row-major, with a possibly partial last row.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from grid_types import CellIndex, Grid

__all__ = [
    "BLANK",
    "Board",
    "board_from_chars",
    "columns_for_viewport",
    "parse_board",
    "shuffle_chars",
]

BLANK = " "

# Column policy of the decoration grid
WIDE_COLUMNS = 28
NARROW_COLUMNS = 10
WIDE_BREAKPOINT = 768  # px, the md breakpoint


@dataclass(frozen=True)
class Board:
    """Characters for each cell plus the grid they are laid out on."""

    chars: tuple[str, ...]
    grid: Grid

    def char_at(self, index: CellIndex) -> str:
        return self.chars[index]

    def rows(self) -> list[tuple[str, ...]]:
        """Characters split into display rows (last row may be shorter)."""
        columns = self.grid.columns
        if columns <= 0:
            return []
        return [self.chars[i : i + columns] for i in range(0, len(self.chars), columns)]


def columns_for_viewport(width: int, interactive: bool = True) -> int:
    """
    Number of columns for a viewport width in pixels.

    Non-interactive decorations always use the wide layout; interactive ones
    narrow to fewer columns below the breakpoint.
    """
    if not interactive:
        return WIDE_COLUMNS
    return WIDE_COLUMNS if width >= WIDE_BREAKPOINT else NARROW_COLUMNS


def shuffle_chars(chars: Sequence[str], rng: random.Random | None = None) -> list[str]:
    """Return a shuffled copy of chars."""
    result = list(chars)
    (rng or random.Random()).shuffle(result)
    return result


def board_from_chars(chars: Sequence[str], columns: int) -> Board:
    """Lay chars out row-major on a grid of the given width."""
    if columns <= 0:
        raise ValueError(
            f"Invalid column count: {columns}\n"
            f"  A board needs at least one column"
        )
    for position, char in enumerate(chars):
        if len(char) != 1:
            raise ValueError(
                f"Invalid board cell: '{char}'\n"
                f"  Position: {position}\n"
                f"  Each cell must be exactly one character"
            )
    return Board(tuple(chars), Grid(columns, len(chars)))


def parse_board(definition: str) -> Board:
    """
    Parse a board from a compact string format.

    Format:
    - Rows separated by | or newlines (surrounding blank lines are ignored)
    - Every character is one cell
    - Underscore (_) is a blank cell
    - All rows but the last must have the same length; the last row may be
      shorter (partial row)

    Example:
        "日月火|水木金|土"
        Creates a 3-column board of 7 cells with a single cell in the last row.

    Args:
        definition: Board text

    Returns:
        Board with one character per cell

    Raises:
        ValueError: If the board is empty or the row lengths are inconsistent
    """
    row_strings = [
        row.strip()
        for line in definition.strip().split("\n")
        for row in line.split("|")
    ]
    row_strings = [row for row in row_strings if row]

    if not row_strings:
        raise ValueError("Empty board definition\n  Expected at least one row of cells")

    columns = len(row_strings[0])
    mismatched = [
        (i, len(row))
        for i, row in enumerate(row_strings)
        if len(row) != columns and not (i == len(row_strings) - 1 and len(row) < columns)
    ]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths in board\n"
            f"  Expected: {columns} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
        error_msg += "  Only the last row may be shorter"
        raise ValueError(error_msg)

    chars = [BLANK if char == "_" else char for row in row_strings for char in row]
    return board_from_chars(chars, columns)
