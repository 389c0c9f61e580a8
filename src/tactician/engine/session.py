"""Engine analysis session orchestration for the foreground thread."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import IntEnum, auto
from pathlib import Path
from typing import TYPE_CHECKING

import chess
from PyQt6.QtCore import QObject, QThread

from tactician.core.notation import translate
from tactician.core.rules import position_to_fen
from tactician.engine.protocol import (
    DEFAULT_ENGINE_LIMIT,
    SEND_TIMEOUT_S,
    EngineBusy,
    EngineChannel,
    EngineChannelClosed,
    EngineCommand,
    format_evaluation,
    parse_engine_limit,
)
from tactician.engine.worker import EngineFactory, EngineWorker

if TYPE_CHECKING:
    from tactician.i18n import Strings

_LOGGER = logging.getLogger(__name__)


class EngineStatus(IntEnum):
    TURNED_OFF = auto()
    STARTED = auto()


class EngineSession:
    """Owns the engine worker thread and the cached evaluation display.

    Only the worker's signals mutate the cached evaluation; the foreground
    copies the position into every command it sends.
    """

    _THREAD_WAIT_MS = 2000

    __slots__ = (
        "__weakref__",
        "_engine_path",
        "_limit_text",
        "_strings",
        "_set_status",
        "_on_update",
        "_on_exit_ready",
        "_parent",
        "_engine_factory",
        "_send_timeout_s",
        "_status",
        "_board",
        "_channel",
        "_thread",
        "_worker",
        "_request_id",
        "_evaluation",
        "_best_move",
        "_failure_reported",
    )

    def __init__(
        self,
        *,
        engine_path: str,
        strings: Strings,
        set_status: Callable[[str], None],
        on_update: Callable[[], None] | None = None,
        on_exit_ready: Callable[[], None] | None = None,
        limit: str = DEFAULT_ENGINE_LIMIT,
        parent: QObject | None = None,
        engine_factory: EngineFactory | None = None,
        send_timeout_s: float = SEND_TIMEOUT_S,
    ) -> None:
        self._engine_path = engine_path
        self._limit_text = limit
        self._strings = strings
        self._set_status = set_status
        self._on_update = on_update
        self._on_exit_ready = on_exit_ready
        self._parent = parent
        self._engine_factory = engine_factory
        self._send_timeout_s = send_timeout_s

        self._status = EngineStatus.TURNED_OFF
        self._board = chess.Board()
        self._channel: EngineChannel | None = None
        self._thread: QThread | None = None
        self._worker: EngineWorker | None = None
        self._request_id = 0
        self._evaluation = ""
        self._best_move = ""
        self._failure_reported = False

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def status(self) -> EngineStatus:
        return self._status

    @property
    def is_started(self) -> bool:
        return self._status == EngineStatus.STARTED

    @property
    def evaluation(self) -> str:
        return self._evaluation

    @property
    def best_move(self) -> str:
        return self._best_move

    @property
    def engine_path(self) -> str:
        return self._engine_path

    def set_engine_path(self, path: str) -> None:
        """Takes effect on the next :meth:`start`."""
        self._engine_path = path

    def set_limit(self, limit: str) -> None:
        """Takes effect on the next :meth:`start`."""
        self._limit_text = limit

    def set_strings(self, strings: Strings) -> None:
        self._strings = strings

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self, board: chess.Board) -> bool:
        """Launch the engine on *board*. Returns ``False`` if it cannot start."""
        if self._status != EngineStatus.TURNED_OFF:
            return False
        if self._thread is not None and self._thread.isRunning():
            _LOGGER.warning("Previous engine thread is still running")
            return False
        if not self._engine_path or not Path(self._engine_path).exists():
            _LOGGER.warning("Engine executable not found: %s", self._engine_path)
            self._set_status(self._strings.engine_not_found.format(path=self._engine_path))
            return False

        try:
            limit = parse_engine_limit(self._limit_text)
        except ValueError as exc:
            _LOGGER.warning("%s; using %r", exc, DEFAULT_ENGINE_LIMIT)
            limit = parse_engine_limit(DEFAULT_ENGINE_LIMIT)

        self._board = board.copy(stack=False)
        self._request_id += 1
        self._failure_reported = False
        self._channel = EngineChannel()
        worker = EngineWorker(
            engine_path=self._engine_path,
            limit=limit,
            channel=self._channel,
            fen=position_to_fen(self._board),
            request_id=self._request_id,
            engine_factory=self._engine_factory,
        )
        self._worker = worker
        self._thread = QThread(self._parent)
        worker.moveToThread(self._thread)
        self._thread.started.connect(worker.run)
        worker.ready.connect(self._on_engine_ready)
        worker.evaluation_ready.connect(self._on_evaluation)
        worker.failed.connect(self._on_engine_failed)
        worker.stopped.connect(
            lambda exit_app: self._on_engine_stopped(worker, exit_app)
        )

        self._status = EngineStatus.STARTED
        self._thread.start()
        return True

    def update_position(self, board: chess.Board) -> None:
        """Remember *board* and, while started, send it to the engine."""
        self._board = board.copy(stack=False)
        if self._status != EngineStatus.STARTED:
            return
        self._request_id += 1
        self._send(EngineCommand.position(position_to_fen(self._board), self._request_id))

    def stop(self) -> None:
        """Ask the engine task to stop; the session turns off once it has."""
        if self._status != EngineStatus.STARTED:
            return
        self._send(EngineCommand.stop())

    def stop_and_exit(self) -> bool:
        """Ask the engine task to stop because the application is closing.

        Returns ``True`` when the caller must wait for ``on_exit_ready``;
        ``False`` means nothing is running and the host may close right away.
        """
        if self._status != EngineStatus.STARTED:
            return False
        return self._send(EngineCommand.exit())

    def shutdown(self) -> None:
        """Blocking teardown: stop the engine and wait for its thread."""
        if self._channel is not None and not self._channel.closed:
            try:
                self._channel.send(EngineCommand.exit(), timeout=self._send_timeout_s)
            except (EngineBusy, EngineChannelClosed):
                self._channel.close()
        self._join_thread()
        self._reset()

    # ── Worker callbacks ─────────────────────────────────────────────────

    def _on_engine_ready(self) -> None:
        self._set_status(self._strings.engine_started)

    def _on_evaluation(
        self,
        request_id: int,
        score: object,
        best_move: object,
    ) -> None:
        if self._status != EngineStatus.STARTED:
            return
        if request_id != self._request_id:
            _LOGGER.debug("Dropping stale evaluation #%d", request_id)
            return

        if isinstance(score, str):
            text, clear_best_move = format_evaluation(
                score,
                white_to_move=self._board.turn == chess.WHITE,
                strings=self._strings,
            )
            self._evaluation = text
            if clear_best_move:
                self._best_move = ""
                self._notify()
                return

        if isinstance(best_move, str):
            try:
                san = translate(self._board, best_move, self._strings)
            except ValueError:
                _LOGGER.warning("Engine sent malformed move %r", best_move)
                san = None
            if san is not None:
                self._best_move = san
        self._notify()

    def _on_engine_failed(self, message: str) -> None:
        self._failure_reported = True
        self._set_status(self._strings.engine_error.format(msg=message))

    def _on_engine_stopped(self, worker: EngineWorker, exit_app: bool) -> None:
        if worker is not self._worker:
            return
        self._join_thread()
        self._reset()
        if exit_app:
            if self._on_exit_ready is not None:
                self._on_exit_ready()
            return
        # Keep the error message of a failed launch or crash on screen.
        if not self._failure_reported:
            self._set_status(self._strings.engine_stopped)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _send(self, command: EngineCommand) -> bool:
        if self._channel is None:
            return False
        try:
            self._channel.send(command, timeout=self._send_timeout_s)
        except EngineBusy:
            _LOGGER.warning("Engine busy, dropped %s", command.kind.name)
            self._set_status(self._strings.engine_busy)
            return False
        except EngineChannelClosed as exc:
            _LOGGER.error("Lost contact with the engine: %s", exc)
            self._join_thread()
            self._reset()
            self._set_status(self._strings.engine_error.format(msg=exc))
            return False
        return True

    def _join_thread(self) -> None:
        thread = self._thread
        if thread is None:
            return
        thread.quit()
        if not thread.wait(self._THREAD_WAIT_MS):
            # Keep the reference: a running QThread must not be collected.
            _LOGGER.warning("Engine thread did not finish in time")
            return
        self._thread = None

    def _reset(self) -> None:
        if self._channel is not None:
            self._channel.close()
        self._status = EngineStatus.TURNED_OFF
        self._channel = None
        if self._thread is None:
            self._worker = None
        self._evaluation = ""
        self._best_move = ""
        self._notify()

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update()
