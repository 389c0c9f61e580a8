"""Tests for localized algebraic notation."""

from __future__ import annotations

import chess
import pytest

from tactician.core.moves import CoordinateMove
from tactician.core.notation import piece_word, translate
from tactician.core.rules import STARTING_FEN, position_from_fen
from tactician.i18n import Strings, strings_for


def _san(fen: str, move: str, strings: Strings) -> str | None:
    return translate(position_from_fen(fen), move, strings)


class TestPieceMoves:
    def test_pawn_push(self, english: Strings) -> None:
        assert _san(STARTING_FEN, "e2e4", english) == "e4"

    def test_knight_move(self, english: Strings) -> None:
        assert _san(STARTING_FEN, "g1f3", english) == "Nf3"

    def test_accepts_coordinate_move_object(self, english: Strings) -> None:
        board = position_from_fen(STARTING_FEN)
        assert translate(board, CoordinateMove(chess.B1, chess.C3), english) == "Nc3"

    def test_pawn_capture(self, english: Strings) -> None:
        fen = "4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1"
        assert _san(fen, "e4d5", english) == "exd5"

    def test_piece_capture(self, english: Strings) -> None:
        fen = "4k3/8/8/3p4/8/4N3/8/4K3 w - - 0 1"
        assert _san(fen, "e3d5", english) == "Nxd5"

    def test_empty_origin_gives_none(self, english: Strings) -> None:
        assert _san(STARTING_FEN, "e4e5", english) is None


class TestDisambiguation:
    def test_by_file(self, english: Strings) -> None:
        fen = "4k3/8/8/8/8/8/8/1N3NK1 w - - 0 1"
        assert _san(fen, "b1d2", english) == "Nbd2"
        assert _san(fen, "f1d2", english) == "Nfd2"

    def test_by_rank(self, english: Strings) -> None:
        fen = "4k3/8/8/R7/8/8/8/R5K1 w - - 0 1"
        assert _san(fen, "a1a3", english) == "R1a3"
        assert _san(fen, "a5a3", english) == "R5a3"

    def test_by_square_with_three_queens(self, english: Strings) -> None:
        fen = "4k3/8/8/8/8/Q7/8/Q1Q3K1 w - - 0 1"
        assert _san(fen, "a1b2", english) == "Qa1b2"

    def test_unambiguous_piece_has_no_qualifier(self, english: Strings) -> None:
        fen = "4k3/8/8/8/8/8/8/1N4K1 w - - 0 1"
        assert _san(fen, "b1d2", english) == "Nd2"


class TestSpecialMoves:
    def test_kingside_castle(self, english: Strings) -> None:
        fen = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
        assert _san(fen, "e1g1", english) == "0-0"

    def test_queenside_castle(self, english: Strings) -> None:
        fen = "r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1"
        assert _san(fen, "e8c8", english) == "0-0-0"

    def test_en_passant(self, english: Strings) -> None:
        fen = "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1"
        assert _san(fen, "e5d6", english) == "exd6 e.p."

    def test_promotion_defaults_to_queen(self, english: Strings) -> None:
        fen = "8/4P3/8/8/8/8/k7/4K3 w - - 0 1"
        assert _san(fen, "e7e8", english) == "e8=Q"

    def test_underpromotion(self, english: Strings) -> None:
        fen = "8/4P3/8/8/8/8/k7/4K3 w - - 0 1"
        assert _san(fen, "e7e8n", english) == "e8=N"

    def test_check_suffix(self, english: Strings) -> None:
        fen = "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"
        assert _san(fen, "a1a8", english) == "Ra8+"

    def test_mate_suffix(self, english: Strings) -> None:
        fen = "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"
        assert _san(fen, "a1a8", english) == "Ra8#"

    def test_illegal_move_skips_suffix(self, english: Strings) -> None:
        assert _san(STARTING_FEN, "d1d5", english) == "Qd5"


class TestLocalization:
    @pytest.mark.parametrize(
        ("language", "expected"),
        [
            ("English", "Nf3"),
            ("Dutch", "Pf3"),
            ("Portuguese", "Cf3"),
            ("Spanish", "Cf3"),
            ("French", "Cf3"),
        ],
    )
    def test_knight_letter(self, language: str, expected: str) -> None:
        assert _san(STARTING_FEN, "g1f3", strings_for(language)) == expected

    def test_localized_promotion(self) -> None:
        fen = "8/4P3/8/8/8/8/k7/4K3 w - - 0 1"
        assert _san(fen, "e7e8q", strings_for("Dutch")) == "e8=D"

    def test_castling_token_is_not_localized(self) -> None:
        fen = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
        assert _san(fen, "e1c1", strings_for("French")) == "0-0-0"

    def test_piece_word(self, english: Strings) -> None:
        assert piece_word(english, chess.BISHOP) == "B"
        assert piece_word(strings_for("Spanish"), chess.BISHOP) == "A"
        assert piece_word(english, chess.PAWN) == ""
