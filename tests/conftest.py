"""Pytest configuration and shared fixtures."""

import sys
from collections import deque
from collections.abc import Callable
from pathlib import Path

import pytest

from ucisession.errors import EngineWriteError

STUB_ENGINE = Path(__file__).parent / "stub_engine.py"


class ScriptedEngine:
    """In-memory stand-in for an engine process.

    Output lines become readable only after the command that triggers them
    is written, like a real half-duplex engine. Once nothing is pending,
    reads report end of stream.
    """

    def __init__(
        self,
        banner: list[str] | None = None,
        responses: dict[str, list[str]] | None = None,
    ) -> None:
        self.pending: deque[str] = deque(banner or [])
        self.responses = responses or {}
        self.written: list[str] = []
        self.lines_read = 0
        self.killed = False
        self.exit_status = 0
        self.broken_pipe = False
        self.on_write: Callable[[str], None] | None = None

    def write(self, text: str) -> None:
        if self.broken_pipe:
            raise EngineWriteError("Failed to write to engine: [Errno 32] Broken pipe")
        if self.on_write is not None:
            self.on_write(text)
        self.written.append(text)
        self.pending.extend(self.responses.get(text, []))

    def read_line(self) -> str | None:
        if not self.pending:
            return None
        self.lines_read += 1
        return self.pending.popleft()

    def kill(self) -> None:
        self.killed = True

    def wait(self) -> int:
        return self.exit_status

    @property
    def is_alive(self) -> bool:
        return not self.killed


@pytest.fixture
def scripted_engine() -> ScriptedEngine:
    """Engine that answers the handshake, isready and a simple search."""
    return ScriptedEngine(
        responses={
            "uci\n": ["id name Stub", "id author Nobody", "option name Hash type spin default 16", "uciok"],
            "isready\n": ["readyok"],
            "go depth 3\n": [
                "info depth 1 score cp 20 pv e2e4",
                "info depth 2 score cp 15 pv e2e4 e7e5",
                "info depth 3 score cp 18 pv e2e4 e7e5 g1f3",
                "bestmove e2e4 ponder e7e5",
            ],
        }
    )


@pytest.fixture
def stub_command() -> Callable[..., list[str]]:
    """Build the argv that runs the stub engine script in a given mode."""

    def build(mode: str = "normal") -> list[str]:
        return [sys.executable, str(STUB_ENGINE), mode]

    return build
