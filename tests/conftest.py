"""Shared fixtures: a scripted terminal and an isolated log file."""

import pytest

from krill import logger
from krill.config import Settings
from krill.context import EditorContext


class FakeTerminal:
    """Terminal stand-in: replays scripted input bytes, records output."""

    def __init__(self, data: bytes = b"", rows: int = 24, cols: int = 80):
        self.input = bytearray(data)
        self.output = bytearray()
        self.writes = []
        self.rows = rows
        self.cols = cols

    def feed(self, data: bytes):
        self.input.extend(data)

    def read_byte(self):
        if not self.input:
            return None
        return self.input.pop(0)

    def write_bytes(self, data: bytes):
        self.writes.append(bytes(data))
        self.output.extend(data)

    def get_window_size(self):
        return self.rows, self.cols


class ExhaustedTerminal(FakeTerminal):
    """Times out like a real terminal, but gives up after a run of empty
    reads so a loop waiting for more input cannot spin forever."""

    max_idle_reads = 10

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.idle_reads = 0

    def read_byte(self):
        if self.input:
            self.idle_reads = 0
            return self.input.pop(0)
        self.idle_reads += 1
        if self.idle_reads > self.max_idle_reads:
            raise EOFError("scripted input exhausted")
        return None


@pytest.fixture(autouse=True)
def isolated_log(tmp_path_factory, monkeypatch):
    path = tmp_path_factory.mktemp("log") / "krill.log"
    monkeypatch.setattr(logger, "LOG_FILE_PATH", str(path))
    return path


@pytest.fixture
def terminal():
    return FakeTerminal()


@pytest.fixture
def make_context():
    def _make(lines=None, rows=24, cols=80, data=b"", **settings):
        term = ExhaustedTerminal(data, rows=rows, cols=cols)
        context = EditorContext(term, Settings(**settings))
        for i, line in enumerate(lines or []):
            context.current_buffer.insert_row(i, line)
        context.current_buffer.dirty = 0
        return context
    return _make
