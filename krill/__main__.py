"""
Main entry point for the Krill text editor.

    krill [FILE]
"""
import sys

from krill import config, logger
from krill.context import EditorContext
from krill.terminal import Terminal, TerminalError
from krill.ui import keys, screen
from krill.ui.input import handle_normal_mode

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"


def editor_loop(context):
    """Render, wait for a key, dispatch; until the user quits."""
    while not context.exit_flag:
        screen.display(context)
        key = keys.wait_key(context.terminal.read_byte)
        handle_normal_mode(context, key)


def main(argv=None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    # Settings problems are held back until the configured log file is in use
    problems = []
    settings = config.load_settings(report=problems.append)
    logger.set_log_file(settings.log_file)
    for problem in problems:
        logger.log(problem)

    filename = argv[0] if argv else None
    try:
        with Terminal() as term:
            context = EditorContext(term, settings)
            if filename:
                context.open_file(filename)
            context.set_status_message(HELP_MESSAGE)
            editor_loop(context)
    except (TerminalError, OSError) as e:
        logger.log(f"fatal: {e}")
        sys.stderr.write(f"krill: {e}\n")
        return 1
    return 0


def run():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
