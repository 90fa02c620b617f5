"""Exceptions raised while talking to a UCI engine.

Every error is fatal to the operation that raised it. Nothing is retried;
a session whose operation failed should be killed (see ``error.session``).
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ucisession.engine.session import EngineSession


class UCIEngineError(Exception):
    """Raised when UCI communication fails.

    Attributes:
        session: Handle that owns the engine after a failed operation, so
            the caller can still ``kill()`` it. ``None`` when no process
            is left to clean up.
    """

    session: "EngineSession | None" = None


class SpawnError(UCIEngineError):
    """Raised when the engine process could not be started."""

    pass


class HandshakeError(UCIEngineError):
    """Raised when the initial ``uci`` / ``uciok`` exchange did not complete."""

    pass


class EngineWriteError(UCIEngineError):
    """Raised when the engine's input pipe rejects a write."""

    pass


class EngineReadError(UCIEngineError):
    """Raised when the engine's output ends or errors before the awaited message."""

    pass


class EngineTimeoutError(EngineReadError):
    """Raised when a configured read deadline expires."""

    pass


class MessageParseError(UCIEngineError, ValueError):
    """Raised when a line matches a message prefix but not its structure.

    For example ``bestmove e9e4``. Distinct from lines nobody recognizes,
    which classify as unknown commands.
    """

    def __init__(self, message: str, line: str) -> None:
        super().__init__(message)
        self.line = line


class TerminationError(UCIEngineError):
    """Raised when the engine process could not be killed or reaped."""

    pass


class SessionConsumedError(UCIEngineError):
    """Raised when an operation is issued on a session handle that was already used."""

    pass
