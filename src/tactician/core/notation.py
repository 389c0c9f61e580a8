"""Coordinate move → localized algebraic notation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import chess

from tactician.core.moves import (
    CoordinateMove,
    parse_coordinate_move,
    with_default_promotion,
)
from tactician.core.rules import (
    BoardStatus,
    IllegalMoveError,
    apply_move,
    board_status,
    legal_moves_to,
    piece_at,
)

if TYPE_CHECKING:
    from tactician.i18n import Strings

_LOGGER = logging.getLogger(__name__)

KINGSIDE_CASTLE = "0-0"
QUEENSIDE_CASTLE = "0-0-0"
EN_PASSANT_MARKER = " e.p."

_KINGSIDE_COORDS = frozenset({"e1g1", "e8g8"})
_QUEENSIDE_COORDS = frozenset({"e1c1", "e8c8"})


def piece_word(strings: Strings, piece_type: chess.PieceType) -> str:
    """Localized piece word for display. Pawns have none."""
    words = {
        chess.KNIGHT: strings.knight,
        chess.BISHOP: strings.bishop,
        chess.ROOK: strings.rook,
        chess.QUEEN: strings.queen,
        chess.KING: strings.king,
    }
    return words.get(piece_type, "")


def translate(
    board: chess.Board,
    move: CoordinateMove | str,
    strings: Strings,
) -> str | None:
    """Render *move* on *board* as localized algebraic notation.

    Returns ``None`` when the origin square is empty. When the oracle cannot
    apply the move (the displayed position and the move went out of sync),
    the check/mate suffix is left off and the base notation is still returned.
    """
    if isinstance(move, str):
        move = parse_coordinate_move(move)

    piece = piece_at(board, move.origin)
    if piece is None:
        return None

    if piece == chess.KING:
        coords = move.uci()[:4]
        if coords in _KINGSIDE_COORDS:
            return KINGSIDE_CASTLE
        if coords in _QUEENSIDE_COORDS:
            return QUEENSIDE_CASTLE

    move = with_default_promotion(board, move)
    dest_name = chess.square_name(move.dest)
    origin_file = chess.FILE_NAMES[chess.square_file(move.origin)]
    is_capture = board.piece_at(move.dest) is not None

    if piece == chess.PAWN:
        is_en_passant = not is_capture and chess.square_file(
            move.dest
        ) != chess.square_file(move.origin)
        if is_en_passant:
            san = origin_file + "x" + dest_name + EN_PASSANT_MARKER
        else:
            san = (origin_file + "x" if is_capture else "") + dest_name
            if move.promotion is not None:
                san += "=" + piece_word(strings, move.promotion)
    else:
        san = piece_word(strings, piece) + _disambiguation(board, move, piece)
        if is_capture:
            san += "x"
        san += dest_name

    return san + _check_suffix(board, move)


def _disambiguation(
    board: chess.Board,
    move: CoordinateMove,
    piece_type: chess.PieceType,
) -> str:
    rivals = [
        m.from_square
        for m in legal_moves_to(board, move.dest, piece_type)
        if m.from_square != move.origin
    ]
    if not rivals:
        return ""

    origin_file = chess.square_file(move.origin)
    if all(chess.square_file(sq) != origin_file for sq in rivals):
        return chess.FILE_NAMES[origin_file]

    origin_rank = chess.square_rank(move.origin)
    if all(chess.square_rank(sq) != origin_rank for sq in rivals):
        return chess.RANK_NAMES[origin_rank]

    # Three or more like pieces: neither file nor rank alone is enough.
    return chess.square_name(move.origin)


def _check_suffix(board: chess.Board, move: CoordinateMove) -> str:
    try:
        after = apply_move(board, move.to_move())
    except IllegalMoveError:
        _LOGGER.debug("Skipping check suffix for %s: not legal here", move)
        return ""

    status = board_status(after)
    if status == BoardStatus.CHECKMATE:
        return "#"
    if status == BoardStatus.CHECK:
        return "+"
    return ""
