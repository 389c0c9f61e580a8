"""Messages exchanged between the foreground and the engine task."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

import chess
import chess.engine

if TYPE_CHECKING:
    from tactician.i18n import Strings

DEFAULT_ENGINE_LIMIT = "depth 40"
CHANNEL_CAPACITY = 16
SEND_TIMEOUT_S = 0.5


class CommandKind(IntEnum):
    POSITION = auto()
    STOP = auto()
    EXIT = auto()


@dataclass(slots=True, frozen=True)
class EngineCommand:
    """One outbound command. Position updates carry a request id."""

    kind: CommandKind
    fen: str | None = None
    request_id: int = 0

    @classmethod
    def position(cls, fen: str, request_id: int) -> EngineCommand:
        return cls(CommandKind.POSITION, fen, request_id)

    @classmethod
    def stop(cls) -> EngineCommand:
        return cls(CommandKind.STOP)

    @classmethod
    def exit(cls) -> EngineCommand:
        return cls(CommandKind.EXIT)


@dataclass(slots=True, frozen=True)
class EngineEvaluation:
    """Inbound evaluation: score text and best move in coordinate form.

    ``score`` is ``"mate +N"``, ``"mate 0"``, ``"mate -N"`` or a pawn value
    such as ``"0.35"``, always from the side to move.
    """

    score: str | None
    best_move: str | None


# ── Channel ──────────────────────────────────────────────────────────────────


class EngineChannelClosed(RuntimeError):
    """Raised when sending to an engine task that has terminated."""


class EngineBusy(RuntimeError):
    """Raised when the channel stayed full for the whole send timeout."""


class EngineChannel:
    """Bounded, ordered command channel from the foreground to the engine task.

    Sends block for at most *timeout* seconds when the channel is full, so
    commands are never reordered and the caller is never stalled forever.
    """

    __slots__ = ("_queue", "_closed")

    def __init__(self, capacity: int = CHANNEL_CAPACITY) -> None:
        self._queue: queue.Queue[EngineCommand] = queue.Queue(maxsize=capacity)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, command: EngineCommand, timeout: float = SEND_TIMEOUT_S) -> None:
        if self._closed.is_set():
            raise EngineChannelClosed("Engine task is no longer running")
        try:
            self._queue.put(command, timeout=timeout)
        except queue.Full as exc:
            raise EngineBusy("Engine command channel is full") from exc

    def receive(self, timeout: float | None = None) -> EngineCommand | None:
        """Next command, or ``None`` if none arrived within *timeout*."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        self._closed.set()


# ── Limits ───────────────────────────────────────────────────────────────────


def parse_engine_limit(text: str) -> chess.engine.Limit:
    """Parse a limit setting such as ``"depth 40"`` or ``"movetime 3000"``.

    Accepted keywords: ``depth``, ``nodes``, ``movetime`` (milliseconds),
    ``time`` (seconds) and ``infinite``.
    """
    tokens = text.split()
    if tokens == ["infinite"]:
        return chess.engine.Limit()
    if len(tokens) != 2:
        raise ValueError(f"Invalid engine limit: {text!r}")

    keyword, value = tokens[0].lower(), tokens[1]
    try:
        if keyword == "depth":
            return chess.engine.Limit(depth=int(value))
        if keyword == "nodes":
            return chess.engine.Limit(nodes=int(value))
        if keyword == "movetime":
            return chess.engine.Limit(time=int(value) / 1000)
        if keyword == "time":
            return chess.engine.Limit(time=float(value))
    except ValueError as exc:
        raise ValueError(f"Invalid engine limit: {text!r}") from exc
    raise ValueError(f"Unknown engine limit keyword: {keyword!r}")


# ── Inbound parsing ──────────────────────────────────────────────────────────


def describe_info(info: chess.engine.InfoDict) -> EngineEvaluation:
    """Turn a UCI ``info`` dictionary into an :class:`EngineEvaluation`."""
    score_text: str | None = None
    pov = info.get("score")
    if pov is not None:
        score = pov.relative
        mate = score.mate()
        if mate is not None:
            score_text = "mate 0" if mate == 0 else f"mate {mate:+d}"
        else:
            cp = score.score()
            if cp is not None:
                score_text = f"{cp / 100:.2f}"

    best_move: str | None = None
    pv = info.get("pv")
    if pv:
        best_move = pv[0].uci()

    return EngineEvaluation(score_text, best_move)


def format_evaluation(
    score: str,
    *,
    white_to_move: bool,
    strings: Strings,
) -> tuple[str, bool]:
    """Render an inbound score for display.

    Returns ``(text, clear_best_move)``. Pawn values are shown from White's
    point of view; an immediate mate (``mate 0``) asks to clear the best move.
    """
    tokens = score.split()
    if tokens and tokens[0].lower() == "mate":
        distance = int(tokens[1])
        if distance == 0:
            return strings.mate, True
        return strings.mate_in + str(abs(distance)), False

    value = float(score)
    if not white_to_move:
        value = -value
    return _format_pawns(value), False


def _format_pawns(value: float) -> str:
    text = f"{value:.2f}"
    return "0.00" if text == "-0.00" else text
