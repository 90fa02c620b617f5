"""UCI engine session.

An ``EngineSession`` is a handle on one engine process. Every operation
takes the process out of the handle it was called on and returns a fresh
handle, so at most one command is ever in flight on a pipe pair:

    session = EngineSession.spawn("stockfish")
    session = session.new_game()
    session = session.set_position("startpos moves e2e4")
    session, best = session.go("depth 12")
    session.quit()

Calling an operation on a handle that was already used raises
``SessionConsumedError``.

Commands with a defined reply wait for it by reading and classifying lines
and discarding everything else (``info`` progress, ``option`` lists,
banners) until the expected kind of message arrives. By default there is no
deadline on that wait; pass ``timeout`` to get one.

Commands outside that table (``debug on``, ``register later``, ...) go
through the raw ``write`` / ``read_line`` / ``parse_line`` calls, which
follow the same handle discipline.
"""

import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

from loguru import logger

from ucisession.engine.process import EngineProcess, EngineTransport
from ucisession.errors import (
    EngineReadError,
    HandshakeError,
    SessionConsumedError,
    TerminationError,
    UCIEngineError,
)
from ucisession.protocol.messages import EngineMessage, MessageKind, parse_message
from ucisession.protocol.moves import BestMove
from ucisession.utils.config import EngineConfig
from ucisession.utils.logging import TRAFFIC_KEY

_traffic = logger.bind(**{TRAFFIC_KEY: True})


class SessionState(Enum):
    """Lifecycle of the engine behind a session."""

    UNINITIALIZED = "uninitialized"
    HANDSHAKING = "handshaking"
    READY = "ready"
    BUSY = "busy"
    TERMINATING = "terminating"
    TERMINATED = "terminated"


class _Channel:
    """The engine transport plus its lifecycle state, shared by successive handles."""

    def __init__(self, transport: EngineTransport) -> None:
        self.transport = transport
        self.state = SessionState.UNINITIALIZED

    def send(self, command: str) -> None:
        _traffic.trace(f"UCI send: {command!r}")
        self.transport.write(command)

    def receive(self) -> str | None:
        line = self.transport.read_line()
        if line is not None:
            _traffic.trace(f"UCI recv: {line}")
        return line

    def receive_message(self, waiting_for: str = "a message") -> EngineMessage:
        line = self.receive()
        if line is None:
            msg = f"Engine output ended while waiting for {waiting_for}"
            raise EngineReadError(msg)
        return parse_message(line)

    def wait_for(self, kind: MessageKind) -> EngineMessage:
        """Read lines until a message of ``kind`` arrives, discarding the rest."""
        while True:
            message = self.receive_message(kind.value)
            if message.kind is kind:
                return message


class EngineSession:
    """Exclusive handle on a UCI engine in the Ready state.

    Use ``spawn`` (or ``launch`` for scoped cleanup) rather than the
    constructor.
    """

    def __init__(self, channel: _Channel) -> None:
        self._channel: _Channel | None = channel
        self._shared = channel
        self._lock = threading.Lock()

    @classmethod
    def spawn(
        cls,
        command: str | Path,
        *args: str,
        timeout: float | None = None,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
    ) -> "EngineSession":
        """Start an engine and complete the UCI handshake.

        Args:
            command: Engine executable.
            *args: Extra command line arguments for the engine.
            timeout: Seconds to wait for each output line, or None to wait forever.
            cwd: Working directory for the engine.
            env: Environment for the engine.
            encoding: Text encoding of the engine's pipes.

        Returns:
            A Ready session.

        Raises:
            SpawnError: If the engine could not be started.
            HandshakeError: If ``uciok`` was never received. The process is
                killed before this is raised.
        """
        process = EngineProcess.spawn(
            [command, *args], cwd=cwd, env=env, timeout=timeout, encoding=encoding
        )
        return cls.handshake(process)

    @classmethod
    def from_config(cls, config: EngineConfig) -> "EngineSession":
        """Start an engine described by an ``EngineConfig``."""
        session = cls.spawn(
            config.command,
            *config.args,
            timeout=config.timeout,
            cwd=config.cwd,
            env=config.env,
            encoding=config.encoding,
        )
        if config.new_game_on_start:
            session = session.new_game()
        return session

    @classmethod
    def handshake(cls, transport: EngineTransport) -> "EngineSession":
        """Put a freshly started engine into UCI mode.

        Writes ``uci`` and discards output up to and including ``uciok``.
        """
        channel = _Channel(transport)
        channel.state = SessionState.HANDSHAKING
        try:
            channel.send("uci\n")
            channel.wait_for(MessageKind.UCI_OK)
        except UCIEngineError as exc:
            _kill_quietly(transport)
            channel.state = SessionState.TERMINATED
            msg = f"UCI handshake failed: {exc}"
            raise HandshakeError(msg) from exc

        channel.state = SessionState.READY
        logger.debug("UCI engine initialized")
        return cls(channel)

    @property
    def state(self) -> SessionState:
        return self._shared.state

    @property
    def is_consumed(self) -> bool:
        return self._channel is None

    @property
    def lines_read(self) -> int:
        """Number of engine output lines consumed so far."""
        return self._shared.transport.lines_read

    def _take(self) -> _Channel:
        with self._lock:
            channel = self._channel
            if channel is None:
                msg = "Session handle was already used; continue with the handle it returned"
                raise SessionConsumedError(msg)
            self._channel = None
        return channel

    @contextmanager
    def _operation(self, state: SessionState = SessionState.BUSY) -> Iterator[_Channel]:
        """Own the channel for one operation.

        On failure the raised error carries a handle owning the engine.
        """
        channel = self._take()
        channel.state = state
        try:
            yield channel
        except UCIEngineError as exc:
            exc.session = EngineSession(channel)
            raise

    def _command(self, command: str, until: MessageKind | None = None) -> "EngineSession":
        with self._operation() as channel:
            channel.send(command)
            if until is not None:
                channel.wait_for(until)
        channel.state = SessionState.READY
        return EngineSession(channel)

    def write(self, text: str) -> "EngineSession":
        """Write raw text to the engine. No newline is added.

        Example:
            session = session.write("debug on\\n")
        """
        return self._command(text)

    def read_line(self) -> tuple[str | None, "EngineSession"]:
        """Read one raw output line; ``None`` once the engine's output has ended."""
        with self._operation() as channel:
            line = channel.receive()
        channel.state = SessionState.READY
        return line, EngineSession(channel)

    def parse_line(self) -> tuple[EngineMessage, "EngineSession"]:
        """Read one output line and classify it.

        Raises:
            EngineReadError: If the engine's output has ended.
            MessageParseError: If the line is a malformed ``bestmove``.
        """
        with self._operation() as channel:
            message = channel.receive_message()
        channel.state = SessionState.READY
        return message, EngineSession(channel)

    def sync(self) -> "EngineSession":
        """Wait for the engine to be ready to accept more commands.

        Sends ``isready`` and waits for ``readyok``.
        """
        return self._command("isready\n", until=MessageKind.READY_OK)

    def new_game(self) -> "EngineSession":
        """Tell the engine the next search belongs to a new game, then sync."""
        return self._command("ucinewgame\n").sync()

    def set_option(self, name: str, value: str | None = None) -> "EngineSession":
        raise NotImplementedError("setoption is not supported")

    def set_position(self, params: str) -> "EngineSession":
        """Send ``position <params>``, e.g. ``startpos moves e2e4 e7e5``."""
        return self._command(f"position {params}\n")

    def go(self, params: str) -> tuple["EngineSession", BestMove]:
        """Start a search with ``go <params>`` and wait for ``bestmove``.

        Args:
            params: Search limits passed through verbatim, e.g. ``depth 20``.

        Returns:
            The new session handle and the engine's best move.
        """
        with self._operation() as channel:
            channel.send(f"go {params}\n")
            best = channel.wait_for(MessageKind.BEST_MOVE).best_move
            if best is None:
                msg = "bestmove message carried no move"
                raise EngineReadError(msg)
        channel.state = SessionState.READY
        logger.debug(f"Engine answered {best}")
        return EngineSession(channel), best

    def stop(self) -> "EngineSession":
        raise NotImplementedError("stop is not supported")

    def ponder_hit(self) -> "EngineSession":
        """Tell the engine the opponent played the expected ponder move.

        Writes ``ponderhit`` with no trailing newline.
        """
        return self._command("ponderhit")

    def quit(self) -> int:
        """Send ``quit`` and wait for the engine to exit.

        Returns:
            The engine's exit status.

        Raises:
            EngineWriteError: If ``quit`` could not be written.
            TerminationError: If the process could not be reaped.
        """
        with self._operation(SessionState.TERMINATING) as channel:
            channel.send("quit\n")
            status = channel.transport.wait()
        channel.state = SessionState.TERMINATED
        return status

    def kill(self) -> None:
        """Forcibly terminate the engine without going through the protocol."""
        with self._operation(SessionState.TERMINATING) as channel:
            channel.transport.kill()
        channel.state = SessionState.TERMINATED

    def __repr__(self) -> str:
        status = "consumed" if self.is_consumed else self.state.value
        return f"EngineSession({status})"


def _kill_quietly(transport: EngineTransport) -> None:
    try:
        transport.kill()
    except UCIEngineError as exc:
        logger.error(f"Failed to kill engine after handshake failure: {exc}")


def _release(session: EngineSession, process: EngineProcess) -> None:
    if not process.is_alive:
        return
    channel = session._shared
    channel.state = SessionState.TERMINATING
    process.kill()
    channel.state = SessionState.TERMINATED


@contextmanager
def launch(
    command: str | Path,
    *args: str,
    timeout: float | None = None,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    encoding: str = "utf-8",
) -> Iterator[EngineSession]:
    """Start an engine for the duration of a ``with`` block.

    The engine is killed and reaped on exit unless it already terminated
    (e.g. through ``quit``), including when the block raises. If the block
    raised, a failure to kill is logged and the block's exception wins.

    Example:
        with launch("stockfish") as session:
            session = session.set_position("startpos")
            session, best = session.go("depth 10")
    """
    process = EngineProcess.spawn(
        [command, *args], cwd=cwd, env=env, timeout=timeout, encoding=encoding
    )
    session = EngineSession.handshake(process)
    try:
        yield session
    except BaseException:
        try:
            _release(session, process)
        except TerminationError as exc:
            logger.error(f"Failed to kill engine while handling another error: {exc}")
        raise
    _release(session, process)
