"""UCI engine package: command protocol, Qt worker and analysis session."""

from tactician.engine.protocol import (
    CommandKind,
    EngineBusy,
    EngineChannel,
    EngineChannelClosed,
    EngineCommand,
    EngineEvaluation,
    describe_info,
    format_evaluation,
    parse_engine_limit,
)
from tactician.engine.session import EngineSession, EngineStatus
from tactician.engine.worker import EngineWorker

__all__ = [
    "CommandKind",
    "EngineBusy",
    "EngineChannel",
    "EngineChannelClosed",
    "EngineCommand",
    "EngineEvaluation",
    "EngineSession",
    "EngineStatus",
    "EngineWorker",
    "describe_info",
    "format_evaluation",
    "parse_engine_limit",
]
