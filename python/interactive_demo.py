"""
Interactive demo for the cascade scheduler.
Display a character board, move a cursor and set off the single explosion.
"""

import logging
import queue
import sys
import threading
import time

import readchar
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_board
from board import Board, board_from_chars, columns_for_viewport, parse_board, shuffle_chars
from cascadegrid import CascadeScheduler, CellIndex, CellState

FRAME_INTERVAL = 1 / 30  # seconds between redraws


class InteractiveDemo:
    """Interactive demo driving the scheduler from a real-time clock."""

    def __init__(self, board: Board, time_scale: float = 1.0) -> None:
        self.board = board
        self.time_scale = time_scale
        self.console = Console()
        self.cursor: CellIndex = 0
        self.status_message = "Ready"
        self.scheduler = CascadeScheduler(board.grid, on_acknowledge=self.acknowledge)
        self._keys: queue.Queue[str] = queue.Queue()

    def acknowledge(self) -> None:
        """Sound cue for the accepted trigger: the terminal bell."""
        self.console.bell()

    def generate_display(self) -> Panel:
        """Generate the current display with board and status."""
        status = Text()
        status.append("Cursor: ", style="bold")
        status.append(f"cell {self.cursor} ({self.scheduler.state_of(self.cursor).value})\n")
        status.append("Clock: ", style="bold")
        status.append(f"{self.scheduler.now:.0f} ms, {len(self.scheduler.states)} animating\n\n")

        board_text = render_board(self.board, self.scheduler.states, cursor=self.cursor)
        status.append(Text.from_ansi(board_text))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  W/A/S/D - Move cursor\n")
        status.append("  Space/Enter - Explode\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Cascade Grid Interactive Demo", border_style="green")

    def move_cursor(self, d_row: int, d_col: int) -> None:
        grid = self.board.grid
        row, col = grid.position(self.cursor)
        target = (row + d_row) * grid.columns + (col + d_col)
        if 0 <= col + d_col < grid.columns and grid.contains(target):
            self.cursor = target

    def click(self) -> None:
        """Explode the cell under the cursor; only idle cells respond."""
        if self.scheduler.state_of(self.cursor) is not CellState.IDLE:
            self.status_message = "That cell is still animating"
            return
        if self.scheduler.trigger_explosion(self.cursor):
            self.status_message = f"✓ Cascade started at cell {self.cursor}"
        else:
            self.status_message = "✗ The grid has already exploded this session"

    def handle_key(self, key: str) -> bool:
        """Apply a key press; returns False when the demo should stop."""
        match key.lower():
            case "q":
                self.status_message = "Quitting..."
                self.scheduler.teardown()
                return False
            case "w":
                self.move_cursor(-1, 0)
            case "s":
                self.move_cursor(1, 0)
            case "a":
                self.move_cursor(0, -1)
            case "d":
                self.move_cursor(0, 1)
            case " " | readchar.key.ENTER:
                self.click()
            case _:
                self.status_message = f"Unknown key: {repr(key)}"
        return True

    def _read_keys(self) -> None:
        # Key reads block, so they happen off the main loop; only the main loop touches the scheduler
        while True:
            key = readchar.readkey()
            self._keys.put(key)
            if key.lower() == "q":
                return

    def run(self) -> None:
        """Run until Q is pressed, advancing the scheduler in real time."""
        threading.Thread(target=self._read_keys, daemon=True).start()
        started = time.monotonic()

        with Live(self.generate_display(), console=self.console, refresh_per_second=30) as live:
            try:
                running = True
                while running:
                    while running and not self._keys.empty():
                        running = self.handle_key(self._keys.get_nowait())

                    elapsed_ms = (time.monotonic() - started) * 1000 * self.time_scale
                    self.scheduler.advance_to(elapsed_ms)
                    live.update(self.generate_display())
                    time.sleep(FRAME_INTERVAL)

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())
            finally:
                self.scheduler.teardown()


LAYOUTS = dict(
    days="日月火水木金土|山川田人口目耳|手足力王玉石竹|糸貝車金雨天気|花草虫犬子女男|上下左右中大小",
    small="一二三|四五六|七八九|十",
)

KANA = "あいうえおかきくけこさしすせそたちつてとなにぬねのはひふへほまみむめもやゆよらりるれろわをん"


def configure_logging(console: Console) -> RichHandler:
    """Send log records through the Live console so they print above the panel."""
    handler = RichHandler(console=console, show_path=False)
    logging.basicConfig(level=logging.INFO, format="%(message)s", handlers=[handler], force=True)
    return handler


def main(board: Board) -> None:
    """Run the interactive demo on a board."""
    demo = InteractiveDemo(board)
    configure_logging(demo.console)
    demo.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "kana":
        # Shuffled kana laid out for a given viewport width (default: narrow)
        width = int(sys.argv[2]) if len(sys.argv) > 2 else 480
        board = board_from_chars(shuffle_chars(KANA), columns_for_viewport(width))
    else:
        name = sys.argv[1] if len(sys.argv) > 1 else "days"
        if name not in LAYOUTS:
            raise ValueError(
                f"Unknown layout: '{name}'\n"
                f"  Available layouts: kana, {', '.join(LAYOUTS)}"
            )
        board = parse_board(LAYOUTS[name])
    main(board)
