# visualization.py
"""
Handles the visualization of the fireworks show in an ANSI terminal.
"""
import logging
import sys
from typing import List, NamedTuple, Optional, Sequence, TextIO

import colorama
import numpy as np
from colorama import Cursor, ansi

from constants import (
    BELL, BLANK_GLYPH, CLOSING_BANNER, FRAME_MARGIN, HIDE_CURSOR, INTRO_BANNER,
    RESET, ROCKET_GLYPH, SHOW_CURSOR, STARTING_MESSAGE, STATUS_TEMPLATE,
    TITLE_BANNER
)

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Firework


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, width: int, height: int, stream: Optional[TextIO] = None):
#     - Inputs:
#       - width, height: int, size of the playing field in cells.
#       - stream: Text stream frames are written to (stdout by default).
#     - Side Effects: Enables ANSI handling on Windows consoles.
#
#   - render(self, fireworks) -> List[List[Cell]]:
#     - Inputs: Active fireworks in drawing order.
#     - Outputs: A height x width grid of Cells.
#     - Invariants: Pure. Never indexes outside the grid; entities whose
#       floored position is outside [0, width) x [0, height) are skipped.
#       Later entities overwrite earlier ones.
#
#   - draw(self, fireworks) -> None:
#     - Side Effects: Replaces the previous frame on the terminal with a
#       full fixed-size frame, in a single write.


class Cell(NamedTuple):
    glyph: str
    color: Optional[str]


BLANK_CELL = Cell(BLANK_GLYPH, None)


class Visualizer:
    """
    Renders the show state into a character grid and paints it on the terminal.
    """
    def __init__(self, width: int, height: int, stream: Optional[TextIO] = None):
        self.width = width
        self.height = height
        self.stream = stream if stream is not None else sys.stdout
        self.frames_drawn = 0

        colorama.just_fix_windows_console()

        logging.info(f"Visualizer initialized for a {width}x{height} terminal field.")

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def _plot(self, grid: List[List[Cell]], x: int, y: int, cell: Cell) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            grid[y][x] = cell

    def render(self, fireworks: Sequence["Firework"]) -> List[List[Cell]]:
        """
        Builds the character grid for the current set of fireworks.
        """
        grid = [[BLANK_CELL] * self.width for _ in range(self.height)]

        for fw in fireworks:
            if not fw.exploded:
                self._plot(grid, int(np.floor(fw.x)), int(np.floor(fw.y)), Cell(ROCKET_GLYPH, fw.color))
                continue

            burst = fw.burst
            cells = np.floor(burst.positions).astype(np.int64)
            for (x, y), glyph in zip(cells, burst.glyphs):
                self._plot(grid, int(x), int(y), Cell(str(glyph), burst.color))

        return grid

    def compose_frame(self, grid: List[List[Cell]], active_count: int) -> str:
        """
        Turns a grid into the full frame text, banner and status line included.
        """
        rows = []
        for row in grid:
            line = ''.join(
                cell.glyph if cell.color is None else f"{cell.color}{cell.glyph}{RESET}"
                for cell in row
            )
            rows.append(FRAME_MARGIN + line)

        # The frame ends without a newline so a full-height frame never scrolls.
        return (
            ansi.clear_screen() + Cursor.POS(1, 1)
            + '\n' + TITLE_BANNER + '\n\n'
            + '\n'.join(rows)
            + '\n\n' + STATUS_TEMPLATE.format(count=active_count)
        )

    def draw(self, fireworks: Sequence["Firework"]) -> None:
        """
        Paints one full frame, replacing whatever was on screen.
        """
        grid = self.render(fireworks)
        self._write(self.compose_frame(grid, len(fireworks)))
        self.frames_drawn += 1

    def bell(self) -> None:
        self._write(BELL)

    def hide_cursor(self) -> None:
        self._write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._write(SHOW_CURSOR)

    def show_intro(self, duration: int) -> None:
        """Prints the pre-show banner announcing the duration."""
        self._write(f"\n{INTRO_BANNER}\n  Duration: {duration} seconds\n\n")

    def show_starting(self) -> None:
        self._write(ansi.clear_screen() + Cursor.POS(1, 1) + f"\n{STARTING_MESSAGE}\n\n")

    def close(self) -> None:
        """
        Restores the terminal and prints the closing banner.
        """
        self._write(
            RESET + ansi.clear_screen() + Cursor.POS(1, 1) + SHOW_CURSOR
            + f"\n{CLOSING_BANNER}\n\n"
        )
        logging.info(f"Visualizer closed after {self.frames_drawn} frames.")
