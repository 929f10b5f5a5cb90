"""
Buffer module for Krill text editor.

Defines the Row and Buffer classes that hold the document being edited.
A Buffer is an ordered list of rows; each Row keeps its raw bytes and the
tab-expanded form used for drawing, rebuilt after every change.
"""
import os
import tempfile

TAB_STOP = 8


class Row:
    """One line of text, without its trailing newline."""
    def __init__(self, content: bytes = b"", tab_stop: int = TAB_STOP):
        self.tab_stop = tab_stop
        self.chars = bytearray(content)
        self.render = b""
        self.update()

    def __len__(self):
        return len(self.chars)

    def __repr__(self):
        return f"Row({bytes(self.chars)!r})"

    def update(self):
        """Rebuild the render form, expanding each tab to the next tab stop."""
        out = bytearray()
        for c in self.chars:
            if c == 9:  # tab
                out.append(ord(' '))
                while len(out) % self.tab_stop != 0:
                    out.append(ord(' '))
            else:
                out.append(c)
        self.render = bytes(out)

    def insert_char(self, at: int, c: int) -> bool:
        if at < 0 or at > len(self.chars):
            return False
        self.chars.insert(at, c)
        self.update()
        return True

    def delete_char(self, at: int) -> bool:
        if at < 0 or at >= len(self.chars):
            return False
        del self.chars[at]
        self.update()
        return True

    def append(self, text: bytes):
        self.chars.extend(text)
        self.update()

    def truncate(self, at: int):
        del self.chars[at:]
        self.update()


class Buffer:
    """Represents the document: rows of text plus filename and modification state."""
    def __init__(self, filename: str = None, lines=None, tab_stop: int = TAB_STOP):
        self.filename = filename  # Path to file or None for new/unsaved
        self.tab_stop = tab_stop
        self.rows = [Row(line, tab_stop) for line in (lines or [])]
        # Count of changes since the last load/save; truthy means unsaved edits
        self.dirty = 0

    def __len__(self):
        return len(self.rows)

    @property
    def lines(self):
        """Row contents as a list of bytes."""
        return [bytes(row.chars) for row in self.rows]

    def row_len(self, at: int) -> int:
        """Length of row `at`, or 0 for the position past the last row."""
        if 0 <= at < len(self.rows):
            return len(self.rows[at])
        return 0

    def insert_row(self, at: int, text: bytes = b"") -> bool:
        """Insert a new row holding `text` before index `at`."""
        if at < 0 or at > len(self.rows):
            return False
        self.rows.insert(at, Row(text, self.tab_stop))
        self.dirty += 1
        return True

    def delete_row(self, at: int) -> bool:
        if at < 0 or at >= len(self.rows):
            return False
        del self.rows[at]
        self.dirty += 1
        return True

    def insert_char(self, row: int, at: int, c: int) -> bool:
        if row < 0 or row >= len(self.rows):
            return False
        if not self.rows[row].insert_char(at, c):
            return False
        self.dirty += 1
        return True

    def delete_char(self, row: int, at: int) -> bool:
        if row < 0 or row >= len(self.rows):
            return False
        if not self.rows[row].delete_char(at):
            return False
        self.dirty += 1
        return True

    def append_text(self, row: int, text: bytes) -> bool:
        if row < 0 or row >= len(self.rows):
            return False
        self.rows[row].append(text)
        self.dirty += 1
        return True

    def split_row(self, row: int, at: int) -> bool:
        """Cut row `row` at column `at`, moving the remainder to a new row below."""
        if row < 0 or row >= len(self.rows):
            return False
        current = self.rows[row]
        if at < 0 or at > len(current):
            return False
        remainder = bytes(current.chars[at:])
        current.truncate(at)
        self.rows.insert(row + 1, Row(remainder, self.tab_stop))
        self.dirty += 1
        return True

    def join_row(self, row: int) -> bool:
        """Append row `row` onto the previous row and remove it."""
        if row <= 0 or row >= len(self.rows):
            return False
        self.rows[row - 1].append(bytes(self.rows[row].chars))
        del self.rows[row]
        self.dirty += 1
        return True

    def rows_to_text(self) -> bytes:
        """Serialize the rows, each followed by a newline."""
        return b"".join(bytes(row.chars) + b"\n" for row in self.rows)

    def open_file(self, filename: str):
        """
        Replace the contents with the lines of `filename`.
        Trailing CR/LF are stripped from each line. Raises OSError on failure.
        """
        with open(filename, 'rb') as f:
            data = f.read()
        lines = data.split(b"\n")
        if lines and lines[-1] == b"":
            lines.pop()
        self.rows = [Row(line.rstrip(b"\r\n"), self.tab_stop) for line in lines]
        self.filename = filename
        self.dirty = 0

    def save_to_file(self, unsafe_truncate: bool = False):
        """
        Write the buffer contents to self.filename.
        Returns (True, bytes_written) on success and (False, error_text) on
        failure; the rows and dirty count are only touched on success.
        """
        if not self.filename:
            return False, "no filename"
        data = self.rows_to_text()
        try:
            if unsafe_truncate:
                self._write_in_place(data)
            else:
                self._write_replace(data)
        except OSError as e:
            return False, e.strerror or str(e)
        self.dirty = 0
        return True, len(data)

    def _write_in_place(self, data: bytes):
        # Truncates before writing: a failed write can leave a short file.
        fd = os.open(self.filename, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            os.ftruncate(fd, len(data))
            written = os.write(fd, data)
            if written != len(data):
                raise OSError(f"short write ({written} of {len(data)} bytes)")
        finally:
            os.close(fd)

    def _write_replace(self, data: bytes):
        directory = os.path.dirname(os.path.abspath(self.filename))
        fd, tmp_path = tempfile.mkstemp(prefix=".krill-", dir=directory)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            if os.path.exists(self.filename):
                os.chmod(tmp_path, os.stat(self.filename).st_mode & 0o7777)
            else:
                os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self.filename)
        except OSError:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
