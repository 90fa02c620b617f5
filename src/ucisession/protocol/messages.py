"""Classification of engine output lines.

``parse_message`` turns one line (terminator already stripped) into an
``EngineMessage``. Rules are tried in a fixed order and the last one
matches anything, so the only failure is a ``bestmove`` line whose move
tokens are malformed.

    id <rest>                           -> ID
    uciok                               -> UCI_OK
    readyok                             -> READY_OK
    bestmove <move> [ponder <move>]     -> BEST_MOVE
    info <rest>                         -> INFO
    option <rest>                       -> OPTION
    anything else, including ""         -> UNKNOWN
"""

import re
from dataclasses import dataclass
from enum import Enum

from ucisession.errors import MessageParseError
from ucisession.protocol.moves import BestMove, Move, MoveParseError


class MessageKind(Enum):
    """Kind of message an engine line was classified as."""

    ID = "id"
    UCI_OK = "uciok"
    READY_OK = "readyok"
    BEST_MOVE = "bestmove"
    INFO = "info"
    OPTION = "option"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class EngineMessage:
    """One classified line of engine output.

    Only ``BEST_MOVE`` carries a payload; the session just needs to know
    what kind of line it saw for everything else.
    """

    kind: MessageKind
    best_move: BestMove | None = None

    @classmethod
    def id(cls) -> "EngineMessage":
        return cls(MessageKind.ID)

    @classmethod
    def uci_ok(cls) -> "EngineMessage":
        return cls(MessageKind.UCI_OK)

    @classmethod
    def ready_ok(cls) -> "EngineMessage":
        return cls(MessageKind.READY_OK)

    @classmethod
    def bestmove(cls, best_move: BestMove) -> "EngineMessage":
        return cls(MessageKind.BEST_MOVE, best_move)

    @classmethod
    def info(cls) -> "EngineMessage":
        return cls(MessageKind.INFO)

    @classmethod
    def option(cls) -> "EngineMessage":
        return cls(MessageKind.OPTION)

    @classmethod
    def unknown(cls) -> "EngineMessage":
        return cls(MessageKind.UNKNOWN)


_ID_RE = re.compile(r"id\s")
_INFO_RE = re.compile(r"info\s")
_OPTION_RE = re.compile(r"option\s")
_BESTMOVE_RE = re.compile(r"bestmove\s+(\S+)(?:\s+ponder\s+(\S+))?\s*")


def parse_bestmove(line: str) -> BestMove:
    """Parse a ``bestmove <move> [ponder <move>]`` line.

    Raises:
        MessageParseError: If the line does not have that exact structure
            or either move token is not valid UCI notation.
    """
    match = _BESTMOVE_RE.fullmatch(line)
    if match is None:
        msg = f"Malformed bestmove line: {line!r}"
        raise MessageParseError(msg, line)

    best_token, ponder_token = match.groups()
    try:
        best_move = Move.from_uci(best_token)
        ponder = Move.from_uci(ponder_token) if ponder_token is not None else None
    except MoveParseError as exc:
        msg = f"Malformed bestmove line: {line!r} ({exc})"
        raise MessageParseError(msg, line) from exc

    return BestMove(best_move=best_move, ponder=ponder)


def parse_message(line: str) -> EngineMessage:
    """Classify one line of engine output.

    Args:
        line: A single line without its terminator.

    Returns:
        The classified message. Unrecognized lines become ``UNKNOWN``.

    Raises:
        MessageParseError: If the line starts with ``bestmove`` but is malformed.
    """
    if _ID_RE.match(line):
        return EngineMessage.id()
    if line == "uciok":
        return EngineMessage.uci_ok()
    if line == "readyok":
        return EngineMessage.ready_ok()
    if line.startswith("bestmove"):
        return EngineMessage.bestmove(parse_bestmove(line))
    if _INFO_RE.match(line):
        return EngineMessage.info()
    if _OPTION_RE.match(line):
        return EngineMessage.option()
    return EngineMessage.unknown()
