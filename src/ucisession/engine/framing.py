"""Split engine output into lines.

Line sources are pull based: the session asks for one line at a time and
inspects it before asking for the next. ``read_line`` returns the line
without its terminator, ``""`` for an empty line and ``None`` once the
stream has ended.
"""

from collections.abc import Iterator
from typing import Protocol, TextIO

import pexpect
from pexpect.spawnbase import SpawnBase

from ucisession.errors import EngineReadError, EngineTimeoutError

# Engines on Windows builds sometimes emit CRLF
_LINE_END = r"\r?\n"


class LineSource(Protocol):
    """Anything the session can pull engine output lines from."""

    def read_line(self) -> str | None: ...


class _LineReaderBase:
    """Shared bookkeeping for line readers."""

    def __init__(self) -> None:
        self.lines_read = 0
        self._eof = False

    @property
    def at_eof(self) -> bool:
        return self._eof

    def read_line(self) -> str | None:
        if self._eof:
            return None
        line = self._next_line()
        if line is None:
            self._eof = True
            return None
        self.lines_read += 1
        return line

    def _next_line(self) -> str | None:
        raise NotImplementedError

    def __iter__(self) -> Iterator[str]:
        while (line := self.read_line()) is not None:
            yield line


class PexpectLineReader(_LineReaderBase):
    """Frames the output of a pexpect child into lines.

    A trailing fragment with no terminator before EOF is returned as a
    final line.
    """

    def __init__(self, child: SpawnBase, timeout: float | None = None) -> None:
        """Initialize the reader.

        Args:
            child: pexpect child to read from, e.g. an ``fdspawn`` over a pipe.
            timeout: Seconds to wait for a full line, or None to wait forever.
        """
        super().__init__()
        self._child = child
        self.timeout = timeout

    def _next_line(self) -> str | None:
        try:
            index = self._child.expect([_LINE_END, pexpect.EOF], timeout=self.timeout)
        except pexpect.TIMEOUT as exc:
            msg = f"No complete line from engine within {self.timeout}s"
            raise EngineTimeoutError(msg) from exc
        except (pexpect.ExceptionPexpect, OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read from engine: {exc}"
            raise EngineReadError(msg) from exc

        before = self._child.before or ""
        if index == 0:
            return before
        # EOF: flush whatever was left without a terminator
        return before if before else None


class StreamLineReader(_LineReaderBase):
    """Frames a text stream (anything with ``readline``) into lines."""

    def __init__(self, stream: TextIO) -> None:
        super().__init__()
        self._stream = stream

    def _next_line(self) -> str | None:
        try:
            raw = self._stream.readline()
        except (OSError, ValueError) as exc:
            msg = f"Failed to read from engine: {exc}"
            raise EngineReadError(msg) from exc

        if raw == "":
            return None
        if raw.endswith("\n"):
            raw = raw[:-1]
            if raw.endswith("\r"):
                raw = raw[:-1]
        return raw
