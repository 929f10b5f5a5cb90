"""
Terminal access for Krill text editor.

Puts the controlling terminal into raw mode for the lifetime of a
`with Terminal() as term:` block and provides the byte-level read/write
and window-size primitives the editor runs on.
"""
import os
import re
import sys
import termios

CLEAR_SCREEN = b"\x1b[2J\x1b[H"
_CURSOR_REPORT = re.compile(rb"\x1b\[(\d+);(\d+)R")


class TerminalError(Exception):
    """The terminal could not be configured, queried or written to."""


def raw_mode_attributes(attrs):
    """Return a copy of tcgetattr() output adjusted for raw input and output."""
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
    iflag &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    oflag &= ~termios.OPOST
    cflag |= termios.CS8
    lflag &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(cc)
    # read() returns after 100ms even with no input
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = 1
    return [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]


class Terminal:
    """Raw-mode terminal on a pair of file descriptors."""
    def __init__(self, fd_in: int = None, fd_out: int = None):
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self._saved_attrs = None

    def __enter__(self):
        self.enable_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            self.write_bytes(CLEAR_SCREEN)
        except TerminalError:
            pass
        finally:
            self.disable_raw_mode()
        return False

    def enable_raw_mode(self):
        try:
            self._saved_attrs = termios.tcgetattr(self.fd_in)
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH,
                              raw_mode_attributes(self._saved_attrs))
        except termios.error as e:
            self._saved_attrs = None
            raise TerminalError(f"cannot enter raw mode: {e}") from e

    def disable_raw_mode(self):
        if self._saved_attrs is None:
            return
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, self._saved_attrs)
        except termios.error:
            pass
        self._saved_attrs = None

    def read_byte(self):
        """Return one input byte, or None if nothing arrived before the timeout."""
        try:
            data = os.read(self.fd_in, 1)
        except (BlockingIOError, InterruptedError):
            return None
        except OSError as e:
            raise TerminalError(f"read failed: {e}") from e
        if not data:
            return None
        return data[0]

    def write_bytes(self, data: bytes):
        view = memoryview(data)
        try:
            while view:
                written = os.write(self.fd_out, view)
                view = view[written:]
        except OSError as e:
            raise TerminalError(f"write failed: {e}") from e

    def get_window_size(self):
        """Return (rows, cols) of the terminal window."""
        try:
            size = os.get_terminal_size(self.fd_out)
        except OSError:
            size = None
        if size is not None and size.columns > 0:
            return size.lines, size.columns
        return self._window_size_from_cursor()

    def _window_size_from_cursor(self):
        # Push the cursor to the bottom-right corner and ask where it ended up
        self.write_bytes(b"\x1b[999C\x1b[999B")
        self.write_bytes(b"\x1b[6n")
        reply = bytearray()
        while len(reply) < 32:
            c = self.read_byte()
            if c is None or c == ord('R'):
                if c is not None:
                    reply.append(c)
                break
            reply.append(c)
        match = _CURSOR_REPORT.match(bytes(reply))
        if not match:
            raise TerminalError("cannot determine window size")
        return int(match.group(1)), int(match.group(2))
