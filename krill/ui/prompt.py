"""
Single-line prompt for Krill text editor.

While a prompt is open it owns the keyboard: the normal key handlers are
not consulted until it returns.
"""
from krill.ui import keys, screen


def prompt_input(context, template: str):
    """
    Ask the user for a line of text on the message bar.
    `template` holds one %s where the typed text goes.
    Returns the entered string, or None if cancelled with Escape.
    """
    text = ""
    while True:
        context.set_status_message(template % text)
        screen.display(context)
        key = keys.wait_key(context.terminal.read_byte)
        if key in (keys.Key.DEL, keys.CTRL_H, keys.Key.BACKSPACE):
            text = text[:-1]
        elif key == keys.Key.ESCAPE:
            context.set_status_message("")
            return None
        elif key == keys.ENTER:
            if text:
                context.set_status_message("")
                return text
        elif key < 128 and not keys.is_control(key):
            text += chr(key)
