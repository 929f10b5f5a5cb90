"""
Save and quit commands for Krill text editor.
"""
from krill import logger
from krill.ui.prompt import prompt_input

SAVE_PROMPT = "Save as: %s (ESC to cancel)"


def save_file(context):
    """Write the buffer to disk, asking for a filename first if it has none."""
    buf = context.current_buffer
    if buf.filename is None:
        name = prompt_input(context, SAVE_PROMPT)
        if name is None:
            context.set_status_message("Save aborted")
            return
        buf.filename = name

    ok, result = buf.save_to_file(unsafe_truncate=not context.settings.safe_save)
    if ok:
        context.set_status_message(f"{result} bytes written to disk")
        logger.log(f"saved {buf.filename} ({result} bytes)")
    else:
        context.set_status_message(f"Can't save! I/O error: {result}")
        logger.log(f"save failed for {buf.filename}: {result}")


def request_quit(context):
    """
    Quit, unless there are unsaved changes: then each request only counts
    down the quit guard, and the editor exits once it runs out.
    """
    if context.current_buffer.dirty:
        context.quit_times -= 1
        if context.quit_times > 0:
            context.set_status_message(
                "WARNING!!! File has unsaved changes. "
                f"Press Ctrl-Q {context.quit_times} more times to quit."
            )
            return
    context.graceful_exit()
