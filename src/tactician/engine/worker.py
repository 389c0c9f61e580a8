"""Qt worker that drives a UCI engine process on its own thread."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

import chess
import chess.engine
from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from tactician.engine.protocol import (
    CommandKind,
    EngineChannel,
    EngineEvaluation,
    describe_info,
)

_LOGGER = logging.getLogger(__name__)

POLL_INTERVAL_S = 0.1


class AnalysisHandle(Protocol):
    """The subset of ``chess.engine.SimpleAnalysisResult`` the worker uses."""

    def empty(self) -> bool: ...

    def get(self) -> chess.engine.InfoDict: ...

    def stop(self) -> None: ...


class UciEngine(Protocol):
    """The subset of ``chess.engine.SimpleEngine`` the worker uses."""

    def analysis(
        self,
        board: chess.Board,
        limit: chess.engine.Limit | None = None,
    ) -> AnalysisHandle: ...

    def quit(self) -> None: ...


EngineFactory = Callable[[str], UciEngine]


def popen_uci(path: str) -> UciEngine:
    return chess.engine.SimpleEngine.popen_uci(path)


class EngineWorker(QObject):
    """Thread-affine worker: analyses positions until told to stop.

    Commands arrive in order through an :class:`EngineChannel`; evaluations
    leave through ``evaluation_ready`` tagged with the request id of the
    position they belong to.
    """

    ready = pyqtSignal()
    evaluation_ready = pyqtSignal(int, object, object)  # request_id, score, best move
    failed = pyqtSignal(str)
    stopped = pyqtSignal(bool)  # exit_app

    __slots__ = (
        "_engine_path",
        "_limit",
        "_channel",
        "_fen",
        "_request_id",
        "_engine_factory",
        "_poll_interval_s",
    )

    def __init__(
        self,
        *,
        engine_path: str,
        limit: chess.engine.Limit,
        channel: EngineChannel,
        fen: str,
        request_id: int = 0,
        engine_factory: EngineFactory | None = None,
        poll_interval_s: float = POLL_INTERVAL_S,
    ) -> None:
        super().__init__()
        self._engine_path = engine_path
        self._limit = limit
        self._channel = channel
        self._fen = fen
        self._request_id = request_id
        self._engine_factory = engine_factory or popen_uci
        self._poll_interval_s = poll_interval_s

    @pyqtSlot()
    def run(self) -> None:
        """Open the engine and serve commands until STOP/EXIT or closure."""
        try:
            engine = self._engine_factory(self._engine_path)
        except (OSError, chess.engine.EngineError) as exc:
            _LOGGER.error("Could not start engine %s: %s", self._engine_path, exc)
            self._channel.close()
            self.failed.emit(str(exc))
            self.stopped.emit(False)
            return

        _LOGGER.info("Engine %s started", self._engine_path)
        self.ready.emit()

        exit_app = False
        analysis: AnalysisHandle | None = None
        request_id = self._request_id
        try:
            analysis = self._analyse(engine, self._fen)
            while not self._channel.closed:
                self._forward(analysis, request_id)
                command = self._channel.receive(timeout=self._poll_interval_s)
                if command is None:
                    continue
                if command.kind == CommandKind.POSITION:
                    _LOGGER.debug("Analysing #%d: %s", command.request_id, command.fen)
                    if analysis is not None:
                        analysis.stop()
                    analysis = self._analyse(engine, command.fen)
                    request_id = command.request_id
                    continue
                exit_app = command.kind == CommandKind.EXIT
                break
        except chess.engine.EngineError as exc:
            _LOGGER.error("Engine terminated unexpectedly: %s", exc)
            self.failed.emit(str(exc))
        finally:
            self._channel.close()
            self._shutdown_engine(engine, analysis)
            _LOGGER.info("Engine %s stopped", self._engine_path)
            self.stopped.emit(exit_app)

    def _analyse(self, engine: UciEngine, fen: str | None) -> AnalysisHandle | None:
        try:
            board = chess.Board(fen) if fen else chess.Board()
        except ValueError:
            _LOGGER.warning("Ignoring invalid position for engine: %r", fen)
            return None
        return engine.analysis(board, self._limit)

    def _forward(self, analysis: AnalysisHandle | None, request_id: int) -> None:
        if analysis is None:
            return
        latest: EngineEvaluation | None = None
        while not analysis.empty():
            evaluation = describe_info(analysis.get())
            if evaluation.score is not None or evaluation.best_move is not None:
                latest = evaluation
        if latest is not None:
            self.evaluation_ready.emit(request_id, latest.score, latest.best_move)

    def _shutdown_engine(
        self,
        engine: UciEngine,
        analysis: AnalysisHandle | None,
    ) -> None:
        try:
            if analysis is not None:
                analysis.stop()
            engine.quit()
        except chess.engine.EngineError as exc:
            _LOGGER.debug("Engine already gone during shutdown: %s", exc)
