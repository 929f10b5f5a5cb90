"""
krill/ui/screen.py

Builds each screen frame for the Krill text editor: the visible text rows,
an inverse-video status bar and a message bar, followed by the cursor
placement. A whole frame is assembled in memory and written at once so a
half-drawn screen is never visible.
"""
from wcwidth import wcwidth

from krill import __version__

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
CLEAR_LINE = b"\x1b[K"
INVERT = b"\x1b[7m"
RESET_ATTRS = b"\x1b[m"
NEWLINE = b"\r\n"

WELCOME = f"Krill editor -- version {__version__}"
NO_NAME = "[No Name]"
FILENAME_WIDTH = 20


def char_width(ch: str) -> int:
    """Display width of a character; unprintable characters count as one cell."""
    width = wcwidth(ch)
    return width if width >= 0 else 1


def display_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def fit_width(text: str, width: int) -> str:
    """Trim a string so it takes at most `width` display columns."""
    used = 0
    for i, ch in enumerate(text):
        used += char_width(ch)
        if used > width:
            return text[:i]
    return text


def pad_line(text, width):
    """Pad or trim a string to match the visual width."""
    text = fit_width(text, width)
    return text + " " * (width - display_width(text))


def encode(text: str) -> bytes:
    """Terminal bytes for `text`; undecodable filename bytes show as '?'."""
    return text.encode("utf-8", errors="replace")


def draw_rows(context, out: bytearray):
    """Append every visible text row (or filler line) to `out`."""
    buf = context.current_buffer
    vp = context.viewport
    for y in range(vp.rows):
        filerow = y + vp.row_offset
        if filerow >= len(buf):
            if len(buf) == 0 and y == vp.rows // 3:
                welcome = fit_width(WELCOME, vp.cols)
                padding = (vp.cols - display_width(welcome)) // 2
                if padding:
                    out += b"~"
                    padding -= 1
                out += b" " * padding
                out += encode(welcome)
            else:
                out += b"~"
        else:
            render = buf.rows[filerow].render
            out += render[vp.col_offset:vp.col_offset + vp.cols]
        out += CLEAR_LINE
        out += NEWLINE


def display_name(filename) -> str:
    """Filename as shown on screen; bytes that are not UTF-8 become '?'."""
    if not filename:
        return NO_NAME
    return encode(filename).decode("utf-8")


def status_text(context) -> str:
    """The status bar line, exactly as wide as the screen."""
    buf = context.current_buffer
    name = fit_width(display_name(buf.filename), FILENAME_WIDTH)
    modified = " (modified)" if buf.dirty else ""
    left = f"{name} - {len(buf)} lines{modified}"
    right = f"{context.cy + 1}/{len(buf)}"

    cols = context.viewport.cols
    left = fit_width(left, cols)
    if cols - display_width(left) >= len(right):
        return pad_line(left, cols - len(right)) + right
    return pad_line(left, cols)


def draw_status_bar(context, out: bytearray):
    out += INVERT
    out += encode(status_text(context))
    out += RESET_ATTRS
    out += NEWLINE


def draw_message_bar(context, out: bytearray, now: float = None):
    out += CLEAR_LINE
    msg = context.visible_status_message(now)
    if msg:
        out += encode(fit_width(msg, context.viewport.cols))


def compose_frame(context, now: float = None) -> bytes:
    """Build one complete frame from the current editor state."""
    out = bytearray()
    out += HIDE_CURSOR
    out += CURSOR_HOME
    draw_rows(context, out)
    draw_status_bar(context, out)
    draw_message_bar(context, out, now)
    y, x = context.viewport.screen_position(context.cy, context.rx)
    out += f"\x1b[{y + 1};{x + 1}H".encode("ascii")
    out += SHOW_CURSOR
    return bytes(out)


def display(context):
    """
    Re-draw the entire screen: scroll the cursor into view, then write the
    text area, status bar and message bar in one go.
    """
    context.scroll()
    context.terminal.write_bytes(compose_frame(context))
