"""
Cascading grid-explosion scheduler.

A single user trigger on one cell starts a wave: the cell runs through its
timed state sequence and, after a short delay, triggers its unvisited
neighbors one after another, each of which does the same. The wave stops
once every reachable cell has been visited once.

All timing runs on a virtual clock (see timeline.Timeline); the owner moves
time forward with advance()/advance_to(), either from a real-time loop or
directly in tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping

from grid_types import (
    DEFAULT_TIMINGS,
    CascadeTimings,
    CellIndex,
    CellState,
    Grid,
    TransitionKind,
    cell_sequence,
)
from timeline import ScheduledTransition, Timeline
from topology import eccentricity, grid_neighbors

__all__ = [
    "CascadeScheduler",
    "CascadeSession",
    "CascadeTimings",
    "CellIndex",
    "CellState",
    "DEFAULT_TIMINGS",
    "Grid",
    "StateListener",
    "cascade_span_bound",
]

logger = logging.getLogger(__name__)

# Called with (index, new_state) on every write to the live store
StateListener = Callable[[CellIndex, CellState], None]


# =============================================================================
# Session Guard
# =============================================================================


@dataclass
class CascadeSession:
    """
    Per-mount guard state.

    has_triggered flips to True on the first accepted user trigger and never
    reverts. visited holds every cell that has entered the current cascade.
    """

    has_triggered: bool = False
    visited: set[CellIndex] = field(default_factory=set)

    def begin(self, origin: CellIndex) -> bool:
        """Start a user-initiated cascade at origin. False if the session is locked."""
        if self.has_triggered:
            return False
        self.has_triggered = True
        # Fresh chain tracking for the new cascade
        self.visited = {origin}
        return True

    def enter(self, index: CellIndex) -> bool:
        """Add a chain-reaction cell to the cascade. False if already visited."""
        if index in self.visited:
            return False
        self.visited.add(index)
        return True


# =============================================================================
# Scheduler
# =============================================================================


class CascadeScheduler:
    """
    Propagation engine for one mounted grid.

    Owns the live state store (only animating cells have an entry), the
    session guard and the queue of pending transitions. Nothing outside the
    scheduler mutates them.

    Usage:
        scheduler = CascadeScheduler(Grid(columns=5, total_cells=25), on_acknowledge=play_click)
        scheduler.trigger_explosion(12)
        scheduler.advance(100)
        scheduler.state_of(13)  # CellState.EXPLODING
        scheduler.teardown()
    """

    def __init__(
        self,
        grid: Grid,
        timings: CascadeTimings = DEFAULT_TIMINGS,
        on_acknowledge: Callable[[], None] | None = None,
        start_time: float = 0,
    ) -> None:
        self.grid = grid
        self.timings = timings
        self.session = CascadeSession()
        self.timeline = Timeline(start_time)
        self._on_acknowledge = on_acknowledge
        self._states: dict[CellIndex, CellState] = {}
        self._listeners: list[StateListener] = []
        self._sequence = cell_sequence(timings)
        # Bumped on teardown; queue items from an older epoch are never applied
        self._epoch = 0
        self._torn_down = False

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def now(self) -> float:
        return self.timeline.now

    @property
    def states(self) -> Mapping[CellIndex, CellState]:
        """Read-only view of the live store. Absent cells are IDLE."""
        return MappingProxyType(self._states)

    def state_of(self, index: CellIndex) -> CellState:
        return self._states.get(index, CellState.IDLE)

    def snapshot(self) -> dict[CellIndex, CellState]:
        return dict(self._states)

    @property
    def is_idle(self) -> bool:
        """True when nothing is animating and nothing is pending."""
        return not self._states and len(self.timeline) == 0

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a renderer callback; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------------

    def trigger_explosion(self, index: CellIndex) -> bool:
        """User-facing entry point. Returns True if a cascade was started."""
        return self.trigger(index, is_chain_reaction=False)

    def trigger(self, index: CellIndex, is_chain_reaction: bool = False) -> bool:
        """
        Trigger a cell, starting its state sequence and its neighbors' triggers.

        Returns False (and does nothing) when the session is torn down, the
        index is outside the grid, the cell was already visited in this
        cascade, or a user trigger arrives after the single permitted one.
        """
        if self._torn_down:
            logger.debug("trigger(%d): session torn down", index)
            return False

        if not self.grid.contains(index):
            logger.debug("trigger(%d): outside grid of %d cells", index, self.grid.total_cells)
            return False

        if index in self.session.visited:
            logger.debug("trigger(%d): already visited", index)
            return False

        if not is_chain_reaction:
            if not self.session.begin(index):
                logger.debug("trigger(%d): cascade already triggered this session", index)
                return False
            logger.info(
                "Cascade started at cell %d (%d columns, %d cells)",
                index,
                self.grid.columns,
                self.grid.total_cells,
            )
        else:
            self.session.enter(index)

        self._start_sequence(index)
        self.timeline.schedule(
            self.timings.propagation_delay, index, TransitionKind.PROPAGATE, epoch=self._epoch
        )

        # The cue fires after the whole cascade is queued
        if not is_chain_reaction and self._on_acknowledge is not None:
            self._on_acknowledge()
        return True

    def _start_sequence(self, index: CellIndex) -> None:
        """Write the first state now and queue the rest relative to now."""
        for offset, state in self._sequence:
            if offset == 0:
                self._set_state(index, state)
            else:
                self.timeline.schedule(offset, index, TransitionKind.SET_STATE, state, self._epoch)

    # -------------------------------------------------------------------------
    # Time
    # -------------------------------------------------------------------------

    def advance(self, delta: float) -> None:
        """Move the clock forward by delta milliseconds, firing everything due."""
        self.advance_to(self.timeline.now + delta)

    def advance_to(self, until: float) -> None:
        """Move the clock to until, firing everything due on the way."""
        if self._torn_down:
            return
        for item in self.timeline.drain_until(until):
            self._dispatch(item)
            if self._torn_down:
                break

    def run_until_idle(self) -> float:
        """
        Fire every pending transition, including ones scheduled along the way.

        Terminates because each cell is visited at most once. Returns the
        clock time of the last transition.
        """
        while not self._torn_down:
            next_at = self.timeline.next_fire_time()
            if next_at is None:
                break
            self.advance_to(next_at)
        return self.timeline.now

    def _dispatch(self, item: ScheduledTransition) -> None:
        if item.epoch != self._epoch:
            logger.debug("Suppressed stale %s for cell %d", item.kind.value, item.index)
            return

        match item.kind:
            case TransitionKind.SET_STATE:
                if item.state is None:
                    raise ValueError(f"State transition for cell {item.index} has no target state")
                self._set_state(item.index, item.state)
            case TransitionKind.PROPAGATE:
                for i, neighbor in enumerate(grid_neighbors(self.grid, item.index)):
                    self.timeline.schedule(
                        i * self.timings.neighbor_stagger,
                        neighbor,
                        TransitionKind.TRIGGER,
                        epoch=self._epoch,
                    )
            case TransitionKind.TRIGGER:
                self.trigger(item.index, is_chain_reaction=True)
            case _:
                raise ValueError(f"Unknown transition kind: {item.kind}")

    def _set_state(self, index: CellIndex, state: CellState) -> None:
        if state is CellState.IDLE:
            self._states.pop(index, None)
        else:
            self._states[index] = state
        for listener in list(self._listeners):
            listener(index, state)

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------

    def teardown(self) -> int:
        """
        Cancel everything pending and discard the live store.

        After teardown no callback writes state and further triggers are
        ignored. Returns the number of cancelled transitions.
        """
        if self._torn_down:
            return 0
        self._torn_down = True
        self._epoch += 1
        cancelled = self.timeline.cancel_all()
        self._states.clear()
        self._listeners.clear()
        logger.info("Cascade session torn down (%d pending transitions cancelled)", cancelled)
        return cancelled


def cascade_span_bound(
    grid: Grid, origin: CellIndex, timings: CascadeTimings = DEFAULT_TIMINGS
) -> float:
    """
    Upper bound on how long a cascade from origin takes to settle.

    The last cell is triggered at most max_hop_delay per ring after the
    origin and then needs the full sequence to return to IDLE.
    """
    return timings.idle_at + timings.max_hop_delay * eccentricity(grid, origin)
