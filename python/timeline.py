"""
Virtual-clock work queue for scheduled cell transitions.

Items are drained in (fire_at, seq) order by a single loop owned by the
caller, so same-instant items fire in the order they were scheduled.
Time only moves when the owner advances it.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Iterator

from grid_types import CellIndex, CellState, TransitionKind


@dataclass(frozen=True, order=True)
class ScheduledTransition:
    """A pending queue item. Only fire_at and seq take part in ordering."""

    fire_at: float
    seq: int
    index: CellIndex = field(compare=False)
    kind: TransitionKind = field(compare=False)
    state: CellState | None = field(default=None, compare=False)
    epoch: int = field(default=0, compare=False)


class Timeline:
    """
    Min-heap of ScheduledTransition items plus the current virtual time.

    Usage:
        timeline = Timeline()
        timeline.schedule(50, index=3, kind=TransitionKind.TRIGGER)
        for item in timeline.drain_until(100):
            handle(item)
    """

    def __init__(self, start: float = 0) -> None:
        self.now: float = start
        self._queue: list[ScheduledTransition] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._queue)

    def schedule(
        self,
        delay: float,
        index: CellIndex,
        kind: TransitionKind,
        state: CellState | None = None,
        epoch: int = 0,
    ) -> ScheduledTransition:
        """Queue an item to fire delay milliseconds after the current time."""
        if delay < 0:
            raise ValueError(f"Cannot schedule into the past (delay={delay})")
        item = ScheduledTransition(self.now + delay, self._seq, index, kind, state, epoch)
        self._seq += 1
        heapq.heappush(self._queue, item)
        return item

    def next_fire_time(self) -> float | None:
        return self._queue[0].fire_at if self._queue else None

    def drain_until(self, until: float) -> Iterator[ScheduledTransition]:
        """
        Yield every item due at or before until, in firing order.

        The clock is moved to each item's fire time before it is yielded, so
        items scheduled while handling it are relative to that instant and
        are drained too if they fall due before until. The clock ends at
        until unless the consumer stops early.
        """
        if until < self.now:
            raise ValueError(f"Cannot move time backwards ({self.now} -> {until})")
        while self._queue and self._queue[0].fire_at <= until:
            item = heapq.heappop(self._queue)
            self.now = item.fire_at
            yield item
        self.now = until

    def cancel_all(self) -> int:
        """Drop every pending item; return how many were dropped."""
        dropped = len(self._queue)
        self._queue.clear()
        return dropped

    def pending(self) -> list[ScheduledTransition]:
        """Pending items in firing order (copy)."""
        return sorted(self._queue)
