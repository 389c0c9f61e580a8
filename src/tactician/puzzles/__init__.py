"""Puzzle layer: records, CSV source and the solving state machine.

Quick start::

    from tactician.puzzles import PuzzleSession, read_puzzles

    session = PuzzleSession()
    session.load(read_puzzles("lichess_db_puzzle.csv", limit=500))
"""

from tactician.puzzles.models import Puzzle
from tactician.puzzles.session import (
    MoveVerdict,
    PuzzleEvents,
    PuzzleFeedback,
    PuzzleSession,
    PuzzleStatus,
)
from tactician.puzzles.source import PuzzleFormatError, puzzle_from_row, read_puzzles

__all__ = [
    "MoveVerdict",
    "Puzzle",
    "PuzzleEvents",
    "PuzzleFeedback",
    "PuzzleFormatError",
    "PuzzleSession",
    "PuzzleStatus",
    "puzzle_from_row",
    "read_puzzles",
]
