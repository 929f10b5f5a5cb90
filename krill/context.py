"""
Editor context for the Krill text editor.

EditorContext is the one session object threaded through the
render, read-key, dispatch loop. It owns the buffer, cursor, viewport,
status message and quit guard.
"""
import time

from krill import buffer, logger
from krill.config import Settings
from krill.viewport import Viewport, column_to_render

# Status line and message line
RESERVED_ROWS = 2


class EditorContext:
    """
    Holds the state of the editor.
    `terminal` must provide read_byte(), write_bytes(data) and get_window_size().
    """
    def __init__(self, terminal, settings: Settings = None):
        self.terminal = terminal
        self.settings = settings or Settings()

        rows, cols = terminal.get_window_size()
        self.screen_rows = max(1, rows - RESERVED_ROWS)
        self.screen_cols = max(1, cols)
        self.viewport = Viewport(self.screen_rows, self.screen_cols)

        self.current_buffer = buffer.Buffer(tab_stop=self.settings.tab_stop)

        # Cursor: cx indexes the row's bytes, rx is the matching render column
        self.cx = 0
        self.cy = 0
        self.rx = 0

        self.status_message = ""
        self.status_time = 0.0

        self.quit_times = self.settings.quit_times

        # Running flag
        self.exit_flag = False

    def open_file(self, filename: str):
        """Load `filename` into the buffer. Raises OSError if it cannot be read."""
        self.current_buffer.open_file(filename)
        self.cx = self.cy = self.rx = 0
        logger.log(f"opened {filename} ({len(self.current_buffer)} lines)")

    def current_row(self):
        """The row under the cursor, or None past the last row."""
        if self.cy < len(self.current_buffer):
            return self.current_buffer.rows[self.cy]
        return None

    def set_status_message(self, msg: str):
        self.status_message = msg
        self.status_time = time.time()

    def visible_status_message(self, now: float = None) -> str:
        """The status message, or "" once it has been shown long enough."""
        if now is None:
            now = time.time()
        if self.status_message and now - self.status_time < self.settings.message_timeout:
            return self.status_message
        return ""

    def reset_quit_guard(self):
        self.quit_times = self.settings.quit_times

    def scroll(self):
        """Recompute rx and bring the cursor into view."""
        row = self.current_row()
        self.rx = column_to_render(row, self.cx, self.settings.tab_stop) if row is not None else 0
        self.viewport.scroll_to_cursor(self.cy, self.rx)

    def graceful_exit(self):
        """Stop the main loop; the terminal is restored by its owner."""
        logger.log("Editor exited.")
        self.exit_flag = True
