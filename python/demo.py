"""
Demonstration scripts for the cascade scheduler.

Every demo runs on the virtual clock and prints the state map at a few
fixed instants, so the output is the same on every run.
"""

import logging
import sys

from ascii_render import render_board, render_states
from board import parse_board
from cascadegrid import CascadeScheduler, Grid, cascade_span_bound
from topology import eccentricity, wave_rings


def print_frames(scheduler: CascadeScheduler, instants: list[float]) -> None:
    """Advance to each instant and print the plain state map."""
    for instant in instants:
        scheduler.advance_to(instant)
        print(f"t = {instant:>6.0f} ms   ({len(scheduler.states)} animating)")
        print(render_states(scheduler.grid, scheduler.states))
        print()


def wave_demo() -> None:
    """A cascade from the center of a 5x5 grid."""
    grid = Grid(columns=5, total_cells=25)
    origin = 12

    print("=" * 40)
    print("Wave from the center of a 5x5 grid")
    print("=" * 40)
    print("Legend: . idle   * exploding   _ hidden   + fading in")
    print()

    rings = wave_rings(grid, origin)
    for distance, ring in enumerate(rings):
        print(f"  ring {distance}: {ring}")
    print()

    acknowledged: list[int] = []
    scheduler = CascadeScheduler(grid, on_acknowledge=lambda: acknowledged.append(origin))
    scheduler.trigger_explosion(origin)
    print_frames(scheduler, [0, 60, 150, 300, 400, 1000, 1900, 2400])

    finished_at = scheduler.run_until_idle()
    print(f"Settled at t = {finished_at:.0f} ms "
          f"(bound {cascade_span_bound(grid, origin):.0f} ms, eccentricity {eccentricity(grid, origin)})")
    print(f"Acknowledge cues: {len(acknowledged)}")


def single_shot_demo() -> None:
    """Only the first user trigger of a session starts a cascade."""
    grid = Grid(columns=4, total_cells=12)
    scheduler = CascadeScheduler(grid, on_acknowledge=lambda: print("  *click*"))

    print("=" * 40)
    print("Single-shot lock")
    print("=" * 40)
    print(f"trigger_explosion(0)  -> {scheduler.trigger_explosion(0)}")
    print(f"trigger_explosion(11) -> {scheduler.trigger_explosion(11)}")
    scheduler.run_until_idle()
    print(f"trigger_explosion(11) after settling -> {scheduler.trigger_explosion(11)}")
    print(render_states(grid, scheduler.states))


def teardown_demo() -> None:
    """Tearing down mid-flight cancels the rest of the cascade."""
    grid = Grid(columns=6, total_cells=18)
    scheduler = CascadeScheduler(grid)

    print("=" * 40)
    print("Teardown mid-flight")
    print("=" * 40)
    scheduler.trigger_explosion(0)
    scheduler.advance(200)
    print(render_states(grid, scheduler.states))
    print(f"Cancelled {scheduler.teardown()} pending transitions")
    scheduler.advance(5000)
    print(f"Live store after teardown: {dict(scheduler.states)}")


def board_demo() -> None:
    """A character board with a partial last row, rendered in color."""
    board = parse_board("日月火水木|金土山川田|人口")
    scheduler = CascadeScheduler(board.grid)

    print("=" * 40)
    print("Board with a partial last row")
    print("=" * 40)
    scheduler.trigger_explosion(11)
    for instant in [0, 200, 400, 2000]:
        scheduler.advance_to(instant)
        print(f"t = {instant} ms")
        print(render_board(board, scheduler.states))
        print()
    scheduler.teardown()


DEMOS = dict(
    wave=wave_demo,
    single_shot=single_shot_demo,
    teardown=teardown_demo,
    board=board_demo,
)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    names = sys.argv[1:] or list(DEMOS)
    for name in names:
        if name not in DEMOS:
            raise ValueError(
                f"Unknown demo: '{name}'\n"
                f"  Available demos: {', '.join(DEMOS)}"
            )
        DEMOS[name]()
        print()
