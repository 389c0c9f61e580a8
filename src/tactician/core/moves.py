"""Coordinate moves: origin/destination squares plus an optional promotion."""

from __future__ import annotations

from dataclasses import dataclass

import chess

PROMOTION_LETTERS: dict[str, chess.PieceType] = {
    "q": chess.QUEEN,
    "r": chess.ROOK,
    "n": chess.KNIGHT,
    "b": chess.BISHOP,
}
_PROMOTION_LETTERS_REV: dict[chess.PieceType, str] = {
    v: k for k, v in PROMOTION_LETTERS.items()
}


@dataclass(slots=True, frozen=True)
class CoordinateMove:
    """A move independent of any display language, e.g. ``e7e8q``."""

    origin: chess.Square
    dest: chess.Square
    promotion: chess.PieceType | None = None

    def uci(self) -> str:
        text = chess.square_name(self.origin) + chess.square_name(self.dest)
        if self.promotion is not None:
            text += _PROMOTION_LETTERS_REV.get(self.promotion, "q")
        return text

    def to_move(self) -> chess.Move:
        return chess.Move(self.origin, self.dest, promotion=self.promotion)

    @classmethod
    def from_move(cls, move: chess.Move) -> CoordinateMove:
        return cls(move.from_square, move.to_square, move.promotion)

    def __str__(self) -> str:
        return self.uci()


def promotion_from_letter(letter: str) -> chess.PieceType:
    """Map a promotion letter to a piece. Unrecognized letters mean queen."""
    return PROMOTION_LETTERS.get(letter.lower(), chess.QUEEN)


def parse_coordinate_move(text: str) -> CoordinateMove:
    """Parse ``<file><rank><file><rank>[promotion]`` text.

    Raises ``ValueError`` when the squares are malformed. A fifth character
    always yields a promotion piece: ``q|r|n|b`` map exactly and anything
    else falls back to queen.
    """
    coords = text.strip()
    if len(coords) not in (4, 5):
        raise ValueError(f"Invalid coordinate move: {text!r}")
    try:
        origin = chess.parse_square(coords[0:2].lower())
        dest = chess.parse_square(coords[2:4].lower())
    except ValueError as exc:
        raise ValueError(f"Invalid coordinate move: {text!r}") from exc

    promotion = promotion_from_letter(coords[4]) if len(coords) == 5 else None
    return CoordinateMove(origin, dest, promotion)


def is_promotion_move(board: chess.Board, move: CoordinateMove) -> bool:
    """True for a pawn of the side on *origin* stepping onto its last rank."""
    if board.piece_type_at(move.origin) != chess.PAWN:
        return False
    color = board.color_at(move.origin)
    last_rank = 7 if color == chess.WHITE else 0
    return chess.square_rank(move.dest) == last_rank


def with_default_promotion(
    board: chess.Board,
    move: CoordinateMove,
    piece: chess.PieceType = chess.QUEEN,
) -> CoordinateMove:
    """Fill in *piece* for a promoting pawn move that carries none.

    Non-promoting moves lose any stray promotion letter so that comparison
    with solution moves stays exact.
    """
    if not is_promotion_move(board, move):
        if move.promotion is None:
            return move
        return CoordinateMove(move.origin, move.dest)
    if move.promotion is not None:
        return move
    return CoordinateMove(move.origin, move.dest, piece)
