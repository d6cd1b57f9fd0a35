"""Data models for araise."""

from araise.models.task import Task, TaskCategory, RepeatFrequency, CycleSpec
from araise.models.session import (
    BreakType,
    PhaseType,
    SessionStatus,
    SessionConfig,
    Phase,
    LiveSessionState,
    SessionResult,
    SessionView,
)
from araise.models.xp import XpLedgerState, DailyProgress
from araise.models.focus_log import FocusLogEntry

__all__ = [
    "Task",
    "TaskCategory",
    "RepeatFrequency",
    "CycleSpec",
    "BreakType",
    "PhaseType",
    "SessionStatus",
    "SessionConfig",
    "Phase",
    "LiveSessionState",
    "SessionResult",
    "SessionView",
    "XpLedgerState",
    "DailyProgress",
    "FocusLogEntry",
]
