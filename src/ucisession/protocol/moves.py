"""Squares and moves in UCI long algebraic notation.

A move is written ``<from><to>[<promotion>]`` with no separators, e.g.
``e2e4`` or ``b7b8r``. These types are purely syntactic carriers: nothing
here checks that a move is legal, or even that ``from != to``.

Promotion letters follow the grammar ``[kbrq]`` (``k`` is the knight).
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class MoveParseError(ValueError):
    """Raised when text is not a syntactically valid square or move."""

    pass


class File(Enum):
    """Board column, ``a`` through ``h``."""

    A = "a"
    B = "b"
    C = "c"
    D = "d"
    E = "e"
    F = "f"
    G = "g"
    H = "h"

    @property
    def index(self) -> int:
        """Zero-based column index (a=0, h=7)."""
        return "abcdefgh".index(self.value)


class Rank(Enum):
    """Board row, ``1`` through ``8``."""

    FIRST = "1"
    SECOND = "2"
    THIRD = "3"
    FOURTH = "4"
    FIFTH = "5"
    SIXTH = "6"
    SEVENTH = "7"
    EIGHTH = "8"

    @property
    def index(self) -> int:
        """Zero-based row index (1st rank=0, 8th rank=7)."""
        return int(self.value) - 1


class PromotionPiece(Enum):
    """Piece a pawn may promote to."""

    KNIGHT = "k"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"


# [a-h][1-8][a-h][1-8][kbrq]? with nothing before or after
_MOVE_RE = re.compile(r"([a-h])([1-8])([a-h])([1-8])([kbrq])?")
_SQUARE_RE = re.compile(r"([a-h])([1-8])")


@dataclass(frozen=True)
class Square:
    """A board square, e.g. ``e4``."""

    file: File
    rank: Rank

    @classmethod
    def from_name(cls, name: str) -> "Square":
        """Parse a two-character square name such as ``"e4"``.

        Raises:
            MoveParseError: If the name is not exactly ``[a-h][1-8]``.
        """
        match = _SQUARE_RE.fullmatch(name)
        if match is None:
            msg = f"Invalid square notation: {name!r}"
            raise MoveParseError(msg)
        return cls(File(match.group(1)), Rank(match.group(2)))

    @classmethod
    def all(cls) -> Iterator["Square"]:
        """Iterate over all 64 squares, a1, b1, ..., h8."""
        for rank in Rank:
            for file in File:
                yield cls(file, rank)

    @property
    def name(self) -> str:
        return self.file.value + self.rank.value

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Move:
    """A move in long algebraic notation.

    Attributes:
        from_square: Square the piece leaves.
        to_square: Square the piece lands on.
        promotion_piece: Piece a pawn promotes to, if any.
    """

    from_square: Square
    to_square: Square
    promotion_piece: PromotionPiece | None = None

    @classmethod
    def from_uci(cls, text: str) -> "Move":
        """Parse a move such as ``"e2e4"`` or ``"b7b8r"``.

        The whole string must match; there is no partial parsing and no
        case folding.

        Args:
            text: Four or five characters of UCI move notation.

        Returns:
            The parsed move.

        Raises:
            MoveParseError: If ``text`` is not ``[a-h][1-8][a-h][1-8][kbrq]?``.
        """
        match = _MOVE_RE.fullmatch(text)
        if match is None:
            msg = f"Invalid UCI move: {text!r}"
            raise MoveParseError(msg)

        from_file, from_rank, to_file, to_rank, promotion = match.groups()
        return cls(
            from_square=Square(File(from_file), Rank(from_rank)),
            to_square=Square(File(to_file), Rank(to_rank)),
            promotion_piece=PromotionPiece(promotion) if promotion else None,
        )

    def uci(self) -> str:
        """Serialize back to UCI notation."""
        text = self.from_square.name + self.to_square.name
        if self.promotion_piece is not None:
            text += self.promotion_piece.value
        return text

    def __str__(self) -> str:
        return self.uci()


@dataclass(frozen=True)
class BestMove:
    """Result of a search: the engine's move and, optionally, its ponder move."""

    best_move: Move
    ponder: Move | None = None

    def __str__(self) -> str:
        if self.ponder is None:
            return f"bestmove {self.best_move}"
        return f"bestmove {self.best_move} ponder {self.ponder}"
