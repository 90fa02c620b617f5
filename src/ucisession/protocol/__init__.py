"""UCI move notation and engine message grammar."""

from ucisession.protocol.messages import (
    EngineMessage,
    MessageKind,
    parse_bestmove,
    parse_message,
)
from ucisession.protocol.moves import (
    BestMove,
    File,
    Move,
    MoveParseError,
    PromotionPiece,
    Rank,
    Square,
)

__all__ = [
    "BestMove",
    "EngineMessage",
    "File",
    "MessageKind",
    "Move",
    "MoveParseError",
    "PromotionPiece",
    "Rank",
    "Square",
    "parse_bestmove",
    "parse_message",
]
