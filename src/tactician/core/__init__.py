"""Core chess layer: rules oracle, coordinate moves and notation."""

from tactician.core.moves import (
    PROMOTION_LETTERS,
    CoordinateMove,
    parse_coordinate_move,
    promotion_from_letter,
    with_default_promotion,
)
from tactician.core.notation import (
    EN_PASSANT_MARKER,
    KINGSIDE_CASTLE,
    QUEENSIDE_CASTLE,
    piece_word,
    translate,
)
from tactician.core.rules import (
    STARTING_FEN,
    BoardStatus,
    IllegalMoveError,
    apply_move,
    board_status,
    gives_checkmate,
    position_from_fen,
    position_to_fen,
)

__all__ = [
    "BoardStatus",
    "CoordinateMove",
    "EN_PASSANT_MARKER",
    "IllegalMoveError",
    "KINGSIDE_CASTLE",
    "PROMOTION_LETTERS",
    "QUEENSIDE_CASTLE",
    "STARTING_FEN",
    "apply_move",
    "board_status",
    "gives_checkmate",
    "parse_coordinate_move",
    "piece_word",
    "position_from_fen",
    "position_to_fen",
    "promotion_from_letter",
    "translate",
    "with_default_promotion",
]
