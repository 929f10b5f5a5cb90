"""
Key decoding for Krill text editor.

Turns the raw byte stream coming from the terminal into logical keys: either
a literal byte (an int) or a member of `Key` for the multi-byte escape
sequences terminals send for arrows, paging and editing keys.
"""
from enum import IntEnum

ESC = 0x1b


class Key(IntEnum):
    BACKSPACE = 127
    ESCAPE = 27
    ARROW_LEFT = 1000
    ARROW_RIGHT = 1001
    ARROW_UP = 1002
    ARROW_DOWN = 1003
    DEL = 1004
    HOME = 1005
    END = 1006
    PAGE_UP = 1007
    PAGE_DOWN = 1008


def ctrl_key(ch: str) -> int:
    """Byte produced by holding Ctrl with `ch`."""
    return ord(ch) & 0x1f


ENTER = ord('\r')
TAB = ord('\t')
CTRL_H = ctrl_key('h')
CTRL_L = ctrl_key('l')
CTRL_Q = ctrl_key('q')
CTRL_S = ctrl_key('s')

# ESC [ <digit> ~
TILDE_KEYS = {
    ord('1'): Key.HOME,
    ord('3'): Key.DEL,
    ord('4'): Key.END,
    ord('5'): Key.PAGE_UP,
    ord('6'): Key.PAGE_DOWN,
    ord('7'): Key.HOME,
    ord('8'): Key.END,
}

# ESC [ <letter>
CSI_KEYS = {
    ord('A'): Key.ARROW_UP,
    ord('B'): Key.ARROW_DOWN,
    ord('C'): Key.ARROW_RIGHT,
    ord('D'): Key.ARROW_LEFT,
    ord('H'): Key.HOME,
    ord('F'): Key.END,
}

# ESC O <letter>
SS3_KEYS = {
    ord('H'): Key.HOME,
    ord('F'): Key.END,
}


def is_control(key: int) -> bool:
    return key < 32 or key == 127


def _read_escape(read_byte):
    """Decode whatever follows an ESC byte; anything unexpected is a bare Escape."""
    first = read_byte()
    if first is None:
        return Key.ESCAPE
    second = read_byte()
    if second is None:
        return Key.ESCAPE

    if first == ord('['):
        if ord('0') <= second <= ord('9'):
            third = read_byte()
            if third == ord('~'):
                return TILDE_KEYS.get(second, Key.ESCAPE)
            return Key.ESCAPE
        return CSI_KEYS.get(second, Key.ESCAPE)
    if first == ord('O'):
        return SS3_KEYS.get(second, Key.ESCAPE)
    return Key.ESCAPE


def read_key(read_byte):
    """
    Read one logical key using `read_byte`, a callable returning an int
    or None when nothing arrived within its timeout.
    Returns None if no key was pressed.
    """
    c = read_byte()
    if c is None:
        return None
    if c == ESC:
        return _read_escape(read_byte)
    if c == Key.BACKSPACE:
        return Key.BACKSPACE
    return c


def wait_key(read_byte):
    """Block (one read timeout at a time) until a key arrives."""
    while True:
        key = read_key(read_byte)
        if key is not None:
            return key
