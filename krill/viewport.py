"""
Viewport for Krill text editor.

Tracks which part of the document is visible and converts cursor columns
from byte positions to on-screen (render) positions.
"""
from krill.buffer import TAB_STOP


def column_to_render(row, x: int, tab_stop: int = TAB_STOP) -> int:
    """Render column of byte column `x` in `row`, with tabs expanded."""
    rx = 0
    for c in row.chars[:x]:
        if c == 9:  # tab
            rx += tab_stop - (rx % tab_stop)
        else:
            rx += 1
    return rx


class Viewport:
    """The visible window onto the document, in render coordinates."""
    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self.row_offset = 0
        self.col_offset = 0

    def scroll_to_cursor(self, cy: int, rx: int):
        """Move the window the least amount needed to show (cy, rx)."""
        if cy < self.row_offset:
            self.row_offset = cy
        if cy >= self.row_offset + self.rows:
            self.row_offset = cy - self.rows + 1
        if rx < self.col_offset:
            self.col_offset = rx
        if rx >= self.col_offset + self.cols:
            self.col_offset = rx - self.cols + 1

    def screen_position(self, cy: int, rx: int):
        """Cursor position relative to the top-left of the window."""
        return cy - self.row_offset, rx - self.col_offset
