"""
Shared type definitions for the cascade grid.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

CellIndex = int


class CellState(Enum):
    """Visual state of a single cell."""

    IDLE = "idle"  # Initial and resting state (implicit when absent from the store)
    EXPLODING = "exploding"
    HIDDEN = "hidden"
    FADING_IN = "fading-in"


class TransitionKind(Enum):
    """What a scheduled queue item does when it fires."""

    SET_STATE = "set_state"  # Write a state for the cell
    PROPAGATE = "propagate"  # Look up neighbors and stagger their triggers
    TRIGGER = "trigger"  # Chain-reaction trigger on the cell


# =============================================================================
# Grid Definition
# =============================================================================


@dataclass(frozen=True)
class Grid:
    """
    Shape of a flat, row-major grid of cells.

    Only defines adjacency; holds no per-cell data. The last row may be
    partial when total_cells is not a multiple of columns.
    """

    columns: int
    total_cells: int

    def __post_init__(self) -> None:
        if self.total_cells < 0:
            raise ValueError(
                f"Invalid grid size\n"
                f"  total_cells: {self.total_cells}\n"
                f"  A grid must have zero or more cells"
            )

    @property
    def rows(self) -> int:
        if self.columns <= 0:
            return 0
        return -(-self.total_cells // self.columns)

    def contains(self, index: CellIndex) -> bool:
        return 0 <= index < self.total_cells

    def position(self, index: CellIndex) -> tuple[int, int]:
        """Return (row, col) for a linear index."""
        return divmod(index, self.columns)


# =============================================================================
# Timing
# =============================================================================


@dataclass(frozen=True)
class CascadeTimings:
    """Durations in milliseconds for one cell's sequence and for propagation."""

    explode_duration: float = 300
    hidden_duration: float = 1500
    fade_in_duration: float = 500
    propagation_delay: float = 50
    neighbor_stagger: float = 30

    def __post_init__(self) -> None:
        negative = [
            (name, value)
            for name, value in (
                ("explode_duration", self.explode_duration),
                ("hidden_duration", self.hidden_duration),
                ("fade_in_duration", self.fade_in_duration),
                ("propagation_delay", self.propagation_delay),
                ("neighbor_stagger", self.neighbor_stagger),
            )
            if value < 0
        ]
        if negative:
            error_msg = "Invalid cascade timings\n  Negative durations:\n"
            for name, value in negative:
                error_msg += f"    {name}: {value}\n"
            error_msg += "  All durations must be zero or more milliseconds"
            raise ValueError(error_msg)

    @property
    def hidden_at(self) -> float:
        return self.explode_duration

    @property
    def fading_in_at(self) -> float:
        return self.explode_duration + self.hidden_duration

    @property
    def idle_at(self) -> float:
        return self.explode_duration + self.hidden_duration + self.fade_in_duration

    @property
    def max_hop_delay(self) -> float:
        """Longest delay between a cell's trigger and one of its neighbors' (4th neighbor)."""
        return self.propagation_delay + 3 * self.neighbor_stagger

    def scaled(self, factor: float) -> CascadeTimings:
        """Return a copy with every duration multiplied by factor."""
        if factor <= 0:
            raise ValueError(
                f"Invalid timing scale factor: {factor}\n"
                f"  The factor must be greater than zero"
            )
        return replace(
            self,
            explode_duration=self.explode_duration * factor,
            hidden_duration=self.hidden_duration * factor,
            fade_in_duration=self.fade_in_duration * factor,
            propagation_delay=self.propagation_delay * factor,
            neighbor_stagger=self.neighbor_stagger * factor,
        )


DEFAULT_TIMINGS = CascadeTimings()


def cell_sequence(timings: CascadeTimings = DEFAULT_TIMINGS) -> tuple[tuple[float, CellState], ...]:
    """
    The fixed sequence every triggered cell passes through.

    Offsets are relative to the instant the cell was triggered and are
    strictly increasing; the final entry returns the cell to IDLE.
    """
    return (
        (0, CellState.EXPLODING),
        (timings.hidden_at, CellState.HIDDEN),
        (timings.fading_in_at, CellState.FADING_IN),
        (timings.idle_at, CellState.IDLE),
    )
