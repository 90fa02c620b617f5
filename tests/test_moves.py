"""Tests for squares and UCI move notation."""

import pytest

from ucisession.protocol import BestMove, File, Move, MoveParseError, PromotionPiece, Rank, Square


class TestSquare:
    """Tests for the Square type."""

    def test_from_name(self) -> None:
        """Test parsing square names."""
        assert Square.from_name("a1") == Square(File.A, Rank.FIRST)
        assert Square.from_name("c7") == Square(File.C, Rank.SEVENTH)
        assert Square.from_name("e4") == Square(File.E, Rank.FOURTH)
        assert Square.from_name("h6") == Square(File.H, Rank.SIXTH)

    @pytest.mark.parametrize("name", ["", "a", "a9", "i1", "A1", "e44", "4e"])
    def test_invalid_names_rejected(self, name: str) -> None:
        """Test that anything but [a-h][1-8] is rejected."""
        with pytest.raises(MoveParseError, match="Invalid square"):
            Square.from_name(name)

    def test_all_yields_64_distinct_squares(self) -> None:
        """Test that all() covers the board exactly once."""
        squares = list(Square.all())
        assert len(squares) == 64
        assert len(set(squares)) == 64
        assert squares[0].name == "a1"
        assert squares[-1].name == "h8"

    def test_file_and_rank_indices(self) -> None:
        """Test zero-based indices."""
        assert File.A.index == 0
        assert File.H.index == 7
        assert Rank.FIRST.index == 0
        assert Rank.EIGHTH.index == 7


class TestMove:
    """Tests for parsing and serializing moves."""

    def test_parse_simple_move(self) -> None:
        """Test a move without promotion."""
        move = Move.from_uci("e2e4")
        assert move.from_square == Square(File.E, Rank.SECOND)
        assert move.to_square == Square(File.E, Rank.FOURTH)
        assert move.promotion_piece is None

    def test_parse_promotion(self) -> None:
        """Test a move with a promotion letter."""
        move = Move.from_uci("b7b8r")
        assert move.from_square == Square(File.B, Rank.SEVENTH)
        assert move.to_square == Square(File.B, Rank.EIGHTH)
        assert move.promotion_piece is PromotionPiece.ROOK

    @pytest.mark.parametrize(
        ("letter", "piece"),
        [
            ("k", PromotionPiece.KNIGHT),
            ("b", PromotionPiece.BISHOP),
            ("r", PromotionPiece.ROOK),
            ("q", PromotionPiece.QUEEN),
        ],
    )
    def test_promotion_letters(self, letter: str, piece: PromotionPiece) -> None:
        """Test every accepted promotion letter."""
        assert Move.from_uci(f"a7a8{letter}").promotion_piece is piece

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "e2",
            "e2e",
            "e2e4 ",
            " e2e4",
            "e2e4qq",
            "e2e9",
            "i2e4",
            "E2E4",
            "e7e8Q",
            "e7e8p",
            "e7e8n",
            "0000",
            "(none)",
        ],
    )
    def test_invalid_moves_rejected(self, text: str) -> None:
        """Test that partial matches and unknown characters are rejected."""
        with pytest.raises(MoveParseError, match="Invalid UCI move"):
            Move.from_uci(text)

    def test_move_parse_error_is_value_error(self) -> None:
        """Test that callers can catch move syntax errors as ValueError."""
        with pytest.raises(ValueError):
            Move.from_uci("nonsense")

    def test_same_square_is_accepted(self) -> None:
        """Test that no legality checks are made."""
        move = Move.from_uci("d4d4")
        assert move.from_square == move.to_square

    @pytest.mark.parametrize("text", ["e2e4", "b7b8r", "a7a8k", "h2h1q", "g7g1", "c2c1b"])
    def test_serialize_returns_original_text(self, text: str) -> None:
        """Test that serializing a parsed move gives back the input."""
        assert Move.from_uci(text).uci() == text
        assert str(Move.from_uci(text)) == text

    def test_constructed_move_round_trips(self) -> None:
        """Test that parsing a serialized move gives back an equal value."""
        for from_square in Square.all():
            move = Move(from_square, Square(File.D, Rank.EIGHTH), PromotionPiece.QUEEN)
            assert Move.from_uci(move.uci()) == move

    def test_moves_are_hashable_values(self) -> None:
        """Test value equality and immutability."""
        assert Move.from_uci("e2e4") == Move.from_uci("e2e4")
        assert len({Move.from_uci("e2e4"), Move.from_uci("e2e4")}) == 1
        with pytest.raises(AttributeError):
            Move.from_uci("e2e4").promotion_piece = PromotionPiece.QUEEN  # type: ignore[misc]


class TestBestMove:
    """Tests for the BestMove result type."""

    def test_str_without_ponder(self) -> None:
        """Test rendering without a ponder move."""
        assert str(BestMove(Move.from_uci("f1h3"))) == "bestmove f1h3"

    def test_str_with_ponder(self) -> None:
        """Test rendering with a ponder move."""
        best = BestMove(Move.from_uci("g7g1"), ponder=Move.from_uci("a1a7"))
        assert str(best) == "bestmove g7g1 ponder a1a7"
