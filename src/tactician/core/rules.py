"""Rules oracle: legality, move application and status over ``chess.Board``.

Positions are treated as values. Nothing in this module mutates the board it
receives; operations that produce a new position return a fresh copy.
"""

from __future__ import annotations

from enum import IntEnum, auto

import chess

STARTING_FEN = chess.STARTING_FEN


class IllegalMoveError(ValueError):
    """Raised when a move is applied to a position where it is not legal."""


class BoardStatus(IntEnum):
    """Terminal/non-terminal status of a position for the side to move."""

    NORMAL = auto()
    CHECK = auto()
    CHECKMATE = auto()
    STALEMATE = auto()


# ── FEN ──────────────────────────────────────────────────────────────────────


def position_from_fen(fen: str) -> chess.Board:
    """Parse *fen* into a board. Raises ``ValueError`` for invalid input."""
    return chess.Board(fen)


def position_to_fen(board: chess.Board) -> str:
    """Serialize *board*, always emitting the en-passant target after a double push."""
    return board.fen(en_passant="fen")


# ── Queries ──────────────────────────────────────────────────────────────────


def piece_at(board: chess.Board, square: chess.Square) -> chess.PieceType | None:
    return board.piece_type_at(square)


def color_at(board: chess.Board, square: chess.Square) -> chess.Color | None:
    return board.color_at(square)


def side_to_move(board: chess.Board) -> chess.Color:
    return board.turn


def is_legal(board: chess.Board, move: chess.Move) -> bool:
    return board.is_legal(move)


def legal_moves_to(
    board: chess.Board,
    dest: chess.Square,
    piece_type: chess.PieceType,
) -> list[chess.Move]:
    """Legal moves of the side to move that bring a *piece_type* to *dest*."""
    return [
        move
        for move in board.generate_legal_moves(
            from_mask=board.pieces_mask(piece_type, board.turn),
            to_mask=chess.BB_SQUARES[dest],
        )
    ]


def board_status(board: chess.Board) -> BoardStatus:
    if board.is_checkmate():
        return BoardStatus.CHECKMATE
    if board.is_check():
        return BoardStatus.CHECK
    if board.is_stalemate():
        return BoardStatus.STALEMATE
    return BoardStatus.NORMAL


# ── Transitions ──────────────────────────────────────────────────────────────


def apply_move(board: chess.Board, move: chess.Move) -> chess.Board:
    """Return the position after *move*. Raises :class:`IllegalMoveError`."""
    if not board.is_legal(move):
        raise IllegalMoveError(f"Illegal move {move.uci()} in {board.fen()}")
    after = board.copy(stack=False)
    after.push(move)
    return after


def gives_checkmate(board: chess.Board, move: chess.Move) -> bool:
    """True when *move* is legal and leaves the opponent checkmated."""
    if not board.is_legal(move):
        return False
    return board_status(apply_move(board, move)) == BoardStatus.CHECKMATE
