"""
Input handling for Krill text editor.

Processes decoded keys in the normal editing state and updates the
context accordingly: cursor motion, text insertion and deletion, and the
save/quit accelerators.
"""
from krill import commands
from krill.ui.keys import CTRL_H, CTRL_L, CTRL_Q, CTRL_S, ENTER, TAB, Key, is_control


def move_cursor(context, key: int):
    """Move the cursor one cell, wrapping across line ends."""
    buf = context.current_buffer
    last = len(buf) - 1
    row = context.current_row()

    if key == Key.ARROW_LEFT:
        if context.cx > 0:
            context.cx -= 1
        elif context.cy > 0:
            context.cy -= 1
            context.cx = buf.row_len(context.cy)
    elif key == Key.ARROW_RIGHT:
        if row is not None and context.cx < len(row):
            context.cx += 1
        elif row is not None and context.cy < last:
            context.cy += 1
            context.cx = 0
    elif key == Key.ARROW_UP:
        if context.cy > 0:
            context.cy -= 1
    elif key == Key.ARROW_DOWN:
        if context.cy < last:
            context.cy += 1

    # Snap to the end of a shorter line
    context.cx = min(context.cx, buf.row_len(context.cy))


def page_move(context, key: int):
    """Jump to the top/bottom edge of the screen, then scroll a screen further."""
    vp = context.viewport
    if key == Key.PAGE_UP:
        context.cy = vp.row_offset
        direction = Key.ARROW_UP
    else:
        context.cy = max(0, min(vp.row_offset + vp.rows - 1, len(context.current_buffer) - 1))
        direction = Key.ARROW_DOWN
    for _ in range(vp.rows):
        move_cursor(context, direction)


def insert_char(context, c: int):
    buf = context.current_buffer
    if context.cy == len(buf):
        buf.insert_row(len(buf), b"")
    buf.insert_char(context.cy, context.cx, c)
    context.cx += 1


def insert_newline(context):
    buf = context.current_buffer
    if context.cx == 0:
        buf.insert_row(context.cy, b"")
    else:
        buf.split_row(context.cy, context.cx)
    context.cy += 1
    context.cx = 0


def delete_char(context):
    """Delete the character left of the cursor, joining lines at column 0."""
    buf = context.current_buffer
    if context.cy == len(buf):
        return
    if context.cx == 0 and context.cy == 0:
        return
    if context.cx > 0:
        buf.delete_char(context.cy, context.cx - 1)
        context.cx -= 1
    else:
        join_point = buf.row_len(context.cy - 1)
        buf.join_row(context.cy)
        context.cy -= 1
        context.cx = join_point


def handle_normal_mode(context, key: int):
    """Handle a key press while editing."""
    if key == CTRL_Q:
        commands.request_quit(context)
        return

    if key == ENTER:
        insert_newline(context)
    elif key == CTRL_S:
        commands.save_file(context)
    elif key == Key.HOME:
        context.cx = 0
    elif key == Key.END:
        context.cx = context.current_buffer.row_len(context.cy)
    elif key in (Key.BACKSPACE, CTRL_H):
        delete_char(context)
    elif key == Key.DEL:
        # Forward delete: step over the next character and erase it
        before = (context.cx, context.cy)
        move_cursor(context, Key.ARROW_RIGHT)
        if (context.cx, context.cy) != before:
            delete_char(context)
    elif key in (Key.PAGE_UP, Key.PAGE_DOWN):
        page_move(context, key)
    elif key in (Key.ARROW_UP, Key.ARROW_DOWN, Key.ARROW_LEFT, Key.ARROW_RIGHT):
        move_cursor(context, key)
    elif key in (CTRL_L, Key.ESCAPE):
        pass
    elif key == TAB or (key < 128 and not is_control(key)):
        insert_char(context, key)

    context.reset_quit_guard()
    context.scroll()
