"""ucisession: client side of the Universal Chess Interface.

Start an engine, drive it one command at a time and wait for the reply
that completes each command:

    from ucisession import launch

    with launch("stockfish") as session:
        session = session.set_position("startpos moves e2e4")
        session, best = session.go("depth 12")
        print(best.best_move, best.ponder)

Subpackages:
- `ucisession.protocol`: move notation and the engine message grammar
- `ucisession.engine`: process, line framing and the session itself
- `ucisession.utils`: configuration and logging helpers
"""

__version__ = "0.1.0"

from ucisession.engine import EngineProcess, EngineSession, SessionState, launch
from ucisession.errors import (
    EngineReadError,
    EngineTimeoutError,
    EngineWriteError,
    HandshakeError,
    MessageParseError,
    SessionConsumedError,
    SpawnError,
    TerminationError,
    UCIEngineError,
)
from ucisession.protocol import (
    BestMove,
    EngineMessage,
    File,
    MessageKind,
    Move,
    MoveParseError,
    PromotionPiece,
    Rank,
    Square,
    parse_message,
)
from ucisession.utils import EngineConfig, load_engine_config, setup_logging

__all__ = [
    "BestMove",
    "EngineConfig",
    "EngineMessage",
    "EngineProcess",
    "EngineReadError",
    "EngineSession",
    "EngineTimeoutError",
    "EngineWriteError",
    "File",
    "HandshakeError",
    "MessageKind",
    "MessageParseError",
    "Move",
    "MoveParseError",
    "PromotionPiece",
    "Rank",
    "SessionConsumedError",
    "SessionState",
    "SpawnError",
    "Square",
    "TerminationError",
    "UCIEngineError",
    "__version__",
    "launch",
    "load_engine_config",
    "parse_message",
    "setup_logging",
]
