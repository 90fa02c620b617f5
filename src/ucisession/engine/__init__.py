"""Driving a UCI engine process."""

from ucisession.engine.framing import LineSource, PexpectLineReader, StreamLineReader
from ucisession.engine.process import EngineProcess, EngineTransport
from ucisession.engine.session import EngineSession, SessionState, launch

__all__ = [
    "EngineProcess",
    "EngineSession",
    "EngineTransport",
    "LineSource",
    "PexpectLineReader",
    "SessionState",
    "StreamLineReader",
    "launch",
]
