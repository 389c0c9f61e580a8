"""Puzzle session: verifies player moves against a puzzle's solution line.

The session owns the puzzle list, the index of the active puzzle, the ply
index into its solution, and the board. It never renders anything: hosts
subscribe to :class:`PuzzleEvents` to show feedback and moves.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import IntEnum, auto

import chess

from tactician.core.moves import CoordinateMove, with_default_promotion
from tactician.core.rules import (
    BoardStatus,
    apply_move,
    board_status,
    gives_checkmate,
    position_from_fen,
)
from tactician.puzzles.models import Puzzle

_LOGGER = logging.getLogger(__name__)


class PuzzleStatus(IntEnum):
    """Finite-state-machine states of a puzzle session."""

    NO_PUZZLES = auto()
    PLAYING = auto()
    PUZZLE_ENDED = auto()


class PuzzleFeedback(IntEnum):
    """Transient messages for the host's status line."""

    WHITE_TO_MOVE = auto()
    BLACK_TO_MOVE = auto()
    CORRECT_MOVE = auto()
    PUZZLE_SOLVED = auto()
    ALL_PUZZLES_DONE = auto()
    WRONG_MOVE_WHITE = auto()
    WRONG_MOVE_BLACK = auto()
    NO_PUZZLE_FOUND = auto()


class MoveVerdict(IntEnum):
    """Outcome of :meth:`PuzzleSession.verify_move`."""

    IGNORED = auto()  # no puzzle is being played
    WRONG = auto()
    CORRECT = auto()  # accepted, opponent replied, more plies remain
    SOLVED = auto()
    NEXT_LOADED = auto()  # solved and the next puzzle was auto-loaded
    ALL_DONE = auto()  # solved the last puzzle of the set


# ── Event definitions ────────────────────────────────────────────────────────

FeedbackCallback = Callable[[PuzzleFeedback], None]
MoveCallback = Callable[[CoordinateMove, chess.Board, bool], None]  # move, before, by player
PuzzleLoadedCallback = Callable[[Puzzle, int], None]  # puzzle, index


@dataclass
class PuzzleEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_feedback: list[FeedbackCallback] = field(default_factory=list)
    on_move: list[MoveCallback] = field(default_factory=list)
    on_puzzle_loaded: list[PuzzleLoadedCallback] = field(default_factory=list)


# ── Session ──────────────────────────────────────────────────────────────────


class PuzzleSession:
    """State machine for solving a set of puzzles one ply at a time.

    ``current_move`` is 1-based into the puzzle's move list: index 0 is the
    opponent's setup move, already applied once a puzzle is loaded.
    """

    __slots__ = (
        "_puzzles",
        "_current_puzzle",
        "_current_move",
        "_solution",
        "_side",
        "_status",
        "_position",
        "_last_move",
        "auto_load_next",
        "events",
    )

    def __init__(self, *, auto_load_next: bool = False) -> None:
        self._puzzles: list[Puzzle] = []
        self._current_puzzle = 0
        self._current_move = 1
        self._solution: list[CoordinateMove] = []
        self._side = chess.WHITE
        self._status = PuzzleStatus.NO_PUZZLES
        self._position = chess.Board()
        self._last_move: tuple[chess.Square, chess.Square] | None = None
        self.auto_load_next = auto_load_next
        self.events = PuzzleEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def puzzles(self) -> tuple[Puzzle, ...]:
        return tuple(self._puzzles)

    @property
    def current_puzzle(self) -> int:
        return self._current_puzzle

    @property
    def current_move(self) -> int:
        return self._current_move

    @property
    def side(self) -> chess.Color:
        """The side the player solves for."""
        return self._side

    @property
    def status(self) -> PuzzleStatus:
        return self._status

    @property
    def position(self) -> chess.Board:
        """A copy of the current board."""
        return self._position.copy(stack=False)

    @property
    def last_move(self) -> tuple[chess.Square, chess.Square] | None:
        return self._last_move

    @property
    def current(self) -> Puzzle | None:
        if not self._puzzles:
            return None
        return self._puzzles[self._current_puzzle]

    # ── Loading ──────────────────────────────────────────────────────────

    def load(
        self,
        puzzles: Sequence[Puzzle],
        *,
        shuffle: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        """Replace the puzzle set and start its first puzzle."""
        self._puzzles = list(puzzles)
        if shuffle:
            (rng or random.Random()).shuffle(self._puzzles)
        self._current_puzzle = 0

        if not self._puzzles:
            self._position = chess.Board()
            self._solution = []
            self._last_move = None
            self._current_move = 1
            self._status = PuzzleStatus.NO_PUZZLES
            self._emit_feedback(PuzzleFeedback.NO_PUZZLE_FOUND)
            return
        self.load_puzzle()

    def load_puzzle(self) -> None:
        """(Re)start the selected puzzle by applying its setup move."""
        puzzle = self.current
        if puzzle is None:
            return

        solution = puzzle.coordinate_moves
        start = position_from_fen(puzzle.fen)
        setup = with_default_promotion(start, solution[0])
        position = apply_move(start, setup.to_move())

        self._solution = solution
        self._position = position
        self._current_move = 1
        self._last_move = (setup.origin, setup.dest)
        self._side = position.turn
        self._status = PuzzleStatus.PLAYING
        _LOGGER.debug(
            "Loaded puzzle %s (%d/%d)",
            puzzle.puzzle_id,
            self._current_puzzle + 1,
            len(self._puzzles),
        )

        for cb in self.events.on_puzzle_loaded:
            cb(puzzle, self._current_puzzle)
        self._emit_move(setup, start, by_player=False)
        self._emit_feedback(
            PuzzleFeedback.WHITE_TO_MOVE
            if self._side == chess.WHITE
            else PuzzleFeedback.BLACK_TO_MOVE
        )

    # ── Playing ──────────────────────────────────────────────────────────

    def verify_move(
        self,
        origin: chess.Square,
        dest: chess.Square,
        promotion: chess.PieceType | None = None,
    ) -> MoveVerdict:
        """Check a player move against the solution and advance on success.

        Any mating move is accepted, even when it differs from the stored
        solution move.
        """
        if self._status != PuzzleStatus.PLAYING:
            return MoveVerdict.IGNORED

        board = self._position
        candidate = with_default_promotion(
            board, CoordinateMove(origin, dest, promotion)
        )
        expected = with_default_promotion(board, self._solution[self._current_move])

        if candidate != expected and not gives_checkmate(board, candidate.to_move()):
            self._emit_feedback(
                PuzzleFeedback.WRONG_MOVE_WHITE
                if board.turn == chess.WHITE
                else PuzzleFeedback.WRONG_MOVE_BLACK
            )
            return MoveVerdict.WRONG

        self._play(candidate, by_player=True)
        # A mate ends the puzzle even when the stored line runs longer.
        if (
            self._current_move == len(self._solution)
            or board_status(self._position) == BoardStatus.CHECKMATE
        ):
            return self._finish_puzzle()

        reply = with_default_promotion(
            self._position, self._solution[self._current_move]
        )
        self._play(reply, by_player=False)
        if self._current_move == len(self._solution):
            return self._finish_puzzle()

        self._emit_feedback(PuzzleFeedback.CORRECT_MOVE)
        return MoveVerdict.CORRECT

    def hint(self) -> chess.Square | None:
        """Origin square of the expected move, if one is pending."""
        move = self.solution_move()
        return move.origin if move is not None else None

    def solution_move(self) -> CoordinateMove | None:
        if self._status != PuzzleStatus.PLAYING:
            return None
        if self._current_move >= len(self._solution):
            return None
        return self._solution[self._current_move]

    # ── Navigation ───────────────────────────────────────────────────────

    def next_puzzle(self) -> None:
        if self._current_puzzle + 1 >= len(self._puzzles):
            return
        self._current_puzzle += 1
        self.load_puzzle()

    def previous_puzzle(self) -> None:
        if self._current_puzzle <= 0 or not self._puzzles:
            return
        self._current_puzzle -= 1
        self.load_puzzle()

    def jump_to(self, number: int) -> None:
        """Select puzzle *number* (1-based). Out-of-range input reloads the current one."""
        if 1 <= number <= len(self._puzzles):
            self._current_puzzle = number - 1
        self.load_puzzle()

    def redo(self) -> None:
        self.load_puzzle()

    # ── Internal helpers ─────────────────────────────────────────────────

    def _play(self, move: CoordinateMove, *, by_player: bool) -> None:
        before = self._position
        self._position = apply_move(before, move.to_move())
        self._last_move = (move.origin, move.dest)
        self._current_move += 1
        self._emit_move(move, before, by_player=by_player)

    def _finish_puzzle(self) -> MoveVerdict:
        if self._current_puzzle >= len(self._puzzles) - 1:
            self._status = PuzzleStatus.NO_PUZZLES
            self._emit_feedback(PuzzleFeedback.ALL_PUZZLES_DONE)
            return MoveVerdict.ALL_DONE

        if self.auto_load_next:
            self._current_puzzle += 1
            self.load_puzzle()
            return MoveVerdict.NEXT_LOADED

        self._status = PuzzleStatus.PUZZLE_ENDED
        self._emit_feedback(PuzzleFeedback.PUZZLE_SOLVED)
        return MoveVerdict.SOLVED

    def _emit_move(
        self,
        move: CoordinateMove,
        before: chess.Board,
        *,
        by_player: bool,
    ) -> None:
        for cb in self.events.on_move:
            cb(move, before, by_player)

    def _emit_feedback(self, feedback: PuzzleFeedback) -> None:
        for cb in self.events.on_feedback:
            cb(feedback)
