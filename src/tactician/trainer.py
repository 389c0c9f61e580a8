"""Host session tying puzzles, notation and the engine together.

Owns the :class:`PuzzleSession` and the :class:`EngineSession` as siblings,
the current mode, the analysis line and the status text. Boards are copied
whenever they cross from one component to another.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from enum import IntEnum, auto

import chess
from PyQt6.QtCore import QObject

from tactician.config import AppSettings
from tactician.core.moves import (
    CoordinateMove,
    parse_coordinate_move,
    with_default_promotion,
)
from tactician.core.notation import translate
from tactician.core.rules import apply_move, is_legal
from tactician.engine.session import EngineSession
from tactician.engine.worker import EngineFactory
from tactician.i18n import feedback_text
from tactician.puzzles.models import Puzzle
from tactician.puzzles.session import (
    MoveVerdict,
    PuzzleFeedback,
    PuzzleSession,
    PuzzleStatus,
)

_LOGGER = logging.getLogger(__name__)

_ACCEPTED = frozenset(
    {
        MoveVerdict.CORRECT,
        MoveVerdict.SOLVED,
        MoveVerdict.NEXT_LOADED,
        MoveVerdict.ALL_DONE,
    }
)


class GameMode(IntEnum):
    PUZZLE = auto()
    ANALYSIS = auto()


class TrainerSession:
    """Routes user moves to puzzle verification or free analysis play."""

    __slots__ = (
        "__weakref__",
        "_settings",
        "_strings",
        "_mode",
        "_status_text",
        "_move_log",
        "_analysis_log_start",
        "_analysis_history",
        "_on_changed",
        "puzzles",
        "engine",
    )

    def __init__(
        self,
        settings: AppSettings,
        *,
        on_changed: Callable[[], None] | None = None,
        on_exit_ready: Callable[[], None] | None = None,
        parent: QObject | None = None,
        engine_factory: EngineFactory | None = None,
    ) -> None:
        self._settings = settings
        self._strings = settings.strings
        self._mode = GameMode.PUZZLE
        self._status_text = self._strings.use_search
        self._move_log: list[str] = []
        self._analysis_log_start = 0
        self._analysis_history: list[chess.Board] = [chess.Board()]
        self._on_changed = on_changed

        self.puzzles = PuzzleSession(auto_load_next=settings.auto_load_next)
        self.puzzles.events.on_feedback.append(self._on_feedback)
        self.puzzles.events.on_move.append(self._on_puzzle_move)
        self.puzzles.events.on_puzzle_loaded.append(self._on_puzzle_loaded)

        self.engine = EngineSession(
            engine_path=settings.engine_path,
            strings=self._strings,
            set_status=self._set_status,
            on_update=self._notify,
            on_exit_ready=on_exit_ready,
            limit=settings.engine_limit,
            parent=parent,
            engine_factory=engine_factory,
        )

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def mode(self) -> GameMode:
        return self._mode

    @property
    def status_text(self) -> str:
        return self._status_text

    @property
    def move_log(self) -> tuple[str, ...]:
        return tuple(self._move_log)

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def current_board(self) -> chess.Board:
        """A copy of the board the user is looking at."""
        if self._mode == GameMode.ANALYSIS:
            return self._analysis_history[-1].copy(stack=False)
        return self.puzzles.position

    def puzzle_number_text(self) -> str:
        total = len(self.puzzles.puzzles)
        if total == 0:
            return ""
        return self._strings.puzzle_number.format(
            number=self.puzzles.current_puzzle + 1, total=total
        )

    def evaluation_text(self) -> str:
        if not self.engine.evaluation:
            return ""
        text = self._strings.eval + self.engine.evaluation
        if self.engine.best_move:
            text += "  " + self._strings.best_move + self.engine.best_move
        return text

    # ── Puzzles ──────────────────────────────────────────────────────────

    def load_puzzles(self, puzzles: Sequence[Puzzle]) -> None:
        self.engine.stop()
        self.puzzles.load(puzzles, shuffle=self._settings.shuffle_puzzles)
        self._enter_puzzle_mode()
        self._notify()

    def next_puzzle(self) -> None:
        self.puzzles.next_puzzle()
        self._notify()

    def previous_puzzle(self) -> None:
        if self._mode != GameMode.PUZZLE:
            return
        self.puzzles.previous_puzzle()
        self._notify()

    def jump_to(self, number: int) -> None:
        self.puzzles.jump_to(number)
        self._notify()

    def redo(self) -> None:
        self.puzzles.redo()
        self._notify()

    def show_hint(self) -> chess.Square | None:
        square = self.puzzles.hint()
        if square is not None:
            self._set_status(
                self._strings.hint_square.format(square=chess.square_name(square))
            )
        return square

    # ── Moves ────────────────────────────────────────────────────────────

    def play(
        self,
        origin: chess.Square,
        dest: chess.Square,
        promotion: chess.PieceType | None = None,
    ) -> bool:
        """Handle a user move. Returns ``True`` if it was accepted.

        A promoting pawn move without *promotion* uses the configured piece.
        """
        if promotion is None:
            promotion = self._settings.promotion
        if self._mode == GameMode.ANALYSIS:
            return self._play_analysis(origin, dest, promotion)
        if self.puzzles.status != PuzzleStatus.PLAYING:
            return False
        verdict = self.puzzles.verify_move(origin, dest, promotion)
        self._notify()
        return verdict in _ACCEPTED

    def play_text(self, text: str) -> bool:
        """Handle a user move typed as coordinates, e.g. ``e2e4`` or ``e7e8n``."""
        move = parse_coordinate_move(text)
        return self.play(move.origin, move.dest, move.promotion)

    def take_back(self) -> bool:
        """Undo the last analysis move, never past the puzzle position."""
        if self._mode != GameMode.ANALYSIS or len(self._analysis_history) <= 1:
            return False
        self._analysis_history.pop()
        if len(self._move_log) > self._analysis_log_start:
            self._move_log.pop()
        self.engine.update_position(self._analysis_history[-1])
        self._notify()
        return True

    def _play_analysis(
        self,
        origin: chess.Square,
        dest: chess.Square,
        promotion: chess.PieceType,
    ) -> bool:
        board = self._analysis_history[-1]
        move = with_default_promotion(board, CoordinateMove(origin, dest, promotion))
        if not is_legal(board, move.to_move()):
            return False

        san = translate(board, move, self._strings)
        after = apply_move(board, move.to_move())
        self._analysis_history.append(after)
        if san is not None:
            self._move_log.append(san)
        self.engine.update_position(after)
        self._notify()
        return True

    # ── Modes and engine ─────────────────────────────────────────────────

    def set_mode(self, mode: GameMode) -> None:
        if mode == self._mode:
            return
        if mode == GameMode.ANALYSIS:
            board = self.puzzles.position
            self._analysis_history = [board]
            self._analysis_log_start = len(self._move_log)
            self._mode = GameMode.ANALYSIS
            self.engine.update_position(board)
        else:
            self._enter_puzzle_mode()
        self._notify()

    def toggle_engine(self) -> bool:
        """Start or stop the engine. Returns ``True`` if it is now starting."""
        if self.engine.is_started:
            self.engine.stop()
            return False
        if self._mode != GameMode.ANALYSIS:
            self.set_mode(GameMode.ANALYSIS)
        return self.engine.start(self.current_board())

    def set_engine_path(self, path: str) -> None:
        """Used by the next engine start."""
        self._settings.engine_path = path
        self.engine.set_engine_path(path)

    def set_engine_limit(self, limit: str) -> None:
        """Used by the next engine start."""
        self._settings.engine_limit = limit
        self.engine.set_limit(limit)

    def set_language(self, language: str) -> None:
        self._settings.language = language
        self._strings = self._settings.strings
        self.engine.set_strings(self._strings)
        self._notify()

    def mode_text(self) -> str:
        if self._mode == GameMode.ANALYSIS:
            return self._strings.mode_analysis
        return self._strings.mode_puzzle

    def close(self) -> bool:
        """Begin closing. ``True`` means wait for the engine's exit callback."""
        return self.engine.stop_and_exit()

    def _enter_puzzle_mode(self) -> None:
        if self._mode == GameMode.ANALYSIS:
            self.engine.stop()
            del self._move_log[self._analysis_log_start :]
        self._mode = GameMode.PUZZLE
        self._analysis_history = [self.puzzles.position]

    # ── Puzzle callbacks ─────────────────────────────────────────────────

    def _on_feedback(self, feedback: PuzzleFeedback) -> None:
        self._set_status(feedback_text(self._strings, feedback))

    def _on_puzzle_loaded(self, puzzle: Puzzle, index: int) -> None:
        _LOGGER.debug("Puzzle %s loaded at index %d", puzzle.puzzle_id, index)
        self._enter_puzzle_mode()
        self._move_log = []
        self._analysis_log_start = 0

    def _on_puzzle_move(
        self,
        move: CoordinateMove,
        before: chess.Board,
        _by_player: bool,
    ) -> None:
        san = translate(before, move, self._strings)
        if san is not None:
            self._move_log.append(san)
        self._analysis_history = [self.puzzles.position]

    # ── Internal helpers ─────────────────────────────────────────────────

    def _set_status(self, text: str) -> None:
        self._status_text = text
        self._notify()

    def _notify(self) -> None:
        if self._on_changed is not None:
            self._on_changed()
