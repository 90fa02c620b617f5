"""Engine child process: spawn, write, read lines, kill and reap.

Only stdin and stdout are redirected. The engine's stderr is inherited
from our process, so diagnostics never reach the UCI line stream. Output
is framed with ``pexpect.fdpexpect.fdspawn`` over the stdout pipe.
"""

import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from loguru import logger
from pexpect.fdpexpect import fdspawn

from ucisession.engine.framing import PexpectLineReader
from ucisession.errors import EngineWriteError, SpawnError, TerminationError


class EngineTransport(Protocol):
    """What a session needs from the process it drives."""

    lines_read: int

    def write(self, text: str) -> None: ...

    def read_line(self) -> str | None: ...

    def kill(self) -> None: ...

    def wait(self) -> int: ...

    @property
    def is_alive(self) -> bool: ...


class EngineProcess:
    """A running engine with its input pipe and framed output.

    Example:
        process = EngineProcess.spawn(["stockfish"])
        process.write("uci\\n")
        while process.read_line() != "uciok":
            pass
        process.kill()
    """

    def __init__(
        self,
        proc: subprocess.Popen,
        argv: list[str],
        *,
        timeout: float | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self._proc = proc
        self.argv = argv
        self.encoding = encoding
        self._output = fdspawn(proc.stdout, encoding=encoding)
        self._reader = PexpectLineReader(self._output, timeout=timeout)
        self._reaped = False

    @classmethod
    def spawn(
        cls,
        argv: Sequence[str | Path],
        *,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
        encoding: str = "utf-8",
    ) -> "EngineProcess":
        """Start an engine process.

        Args:
            argv: Executable followed by its arguments.
            cwd: Working directory for the child.
            env: Environment for the child (inherits ours if None).
            timeout: Seconds to wait for each output line, or None to wait forever.
            encoding: Text encoding of the engine's pipes.

        Returns:
            The running process.

        Raises:
            SpawnError: If the executable could not be started.
        """
        args = [os.fspath(arg) for arg in argv]
        if not args:
            msg = "Engine command is empty"
            raise SpawnError(msg)

        logger.debug(f"Starting UCI engine: {' '.join(args)}")
        try:
            proc = subprocess.Popen(
                args,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                cwd=os.fspath(cwd) if cwd is not None else None,
                env=dict(env) if env is not None else None,
            )
        except OSError as exc:
            msg = f"Failed to start engine {args[0]!r}: {exc}"
            raise SpawnError(msg) from exc

        logger.debug(f"Engine started with pid {proc.pid}")
        return cls(proc, args, timeout=timeout, encoding=encoding)

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def lines_read(self) -> int:
        return self._reader.lines_read

    @property
    def is_alive(self) -> bool:
        if self._reaped:
            return False
        return self._proc.poll() is None

    @property
    def closed(self) -> bool:
        """True once both pipes to the engine have been closed."""
        return self._proc.stdin.closed and self._proc.stdout.closed

    def write(self, text: str) -> None:
        """Write raw text to the engine's stdin. No newline is added."""
        try:
            self._proc.stdin.write(text.encode(self.encoding))
            self._proc.stdin.flush()
        except (OSError, ValueError) as exc:
            msg = f"Failed to write to engine: {exc}"
            raise EngineWriteError(msg) from exc

    def read_line(self) -> str | None:
        return self._reader.read_line()

    def wait(self) -> int:
        """Wait for the engine to exit on its own, reap it and close its pipes.

        Returns:
            The exit status (negative signal number if killed by a signal).

        Raises:
            TerminationError: If the process could not be reaped.
        """
        try:
            status = self._proc.wait()
        except OSError as exc:
            msg = f"Failed to reap engine: {exc}"
            raise TerminationError(msg) from exc

        self._reaped = True
        self._close_pipes()
        logger.debug(f"Engine exited with status {status}")
        return status

    def kill(self) -> None:
        """Forcibly terminate the engine and reap it."""
        if self._reaped:
            return

        logger.warning(f"Killing engine (pid {self.pid})")
        try:
            self._proc.kill()
        except OSError as exc:
            msg = f"Failed to kill engine: {exc}"
            raise TerminationError(msg) from exc
        self.wait()

    def _close_pipes(self) -> None:
        for pipe in (self._proc.stdin, self._proc.stdout):
            try:
                pipe.close()
            except OSError as exc:
                # stdin may still hold unflushed bytes for a dead reader
                logger.debug(f"Ignoring error closing engine pipe: {exc}")
