"""Request/response models for the araise API."""

import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from araise.models.focus_log import FocusLogEntry
from araise.models.session import SessionResult, SessionView
from araise.models.task import CycleSpec, RepeatFrequency, Task, TaskCategory
from araise.models.xp import DailyProgress, XpLedgerState


class TaskCreateRequest(BaseModel):
    """Request model for creating a task."""
    title: str = Field(..., min_length=1)
    category: TaskCategory = TaskCategory.WORK
    date: Optional[dt.date] = Field(None, description="Anchor date; defaults to today")
    start_at: Optional[dt.datetime] = None
    end_at: Optional[dt.datetime] = None
    focus_mode: bool = False
    focus_duration: Optional[int] = Field(None, ge=1)
    break_duration: Optional[int] = Field(None, ge=0)
    cycles: Optional[int] = Field(None, ge=1)
    custom_cycles: Optional[List[CycleSpec]] = None
    repeat: RepeatFrequency = RepeatFrequency.NONE
    repeat_until: Optional[dt.date] = None
    exceptions: Optional[List[dt.date]] = None
    order: Optional[int] = None


class TaskUpdateRequest(BaseModel):
    """Request model for editing a task (whole series for repeating tasks)."""
    title: Optional[str] = Field(None, min_length=1)
    category: Optional[TaskCategory] = None
    date: Optional[dt.date] = None
    start_at: Optional[dt.datetime] = None
    end_at: Optional[dt.datetime] = None
    focus_mode: Optional[bool] = None
    focus_duration: Optional[int] = Field(None, ge=1)
    break_duration: Optional[int] = Field(None, ge=0)
    cycles: Optional[int] = Field(None, ge=1)
    custom_cycles: Optional[List[CycleSpec]] = None
    repeat: Optional[RepeatFrequency] = None
    repeat_until: Optional[dt.date] = None
    order: Optional[int] = None


class ReorderRequest(BaseModel):
    date: dt.date
    source_id: str
    target_id: str


class MinutesRequest(BaseModel):
    """Minute offset for moving or stretching a time block."""
    minutes: int


class DayResponse(BaseModel):
    """Occurrences for one day, in render order."""
    date: dt.date
    tasks: List[Task]


class AwardXpRequest(BaseModel):
    amount: int


class DailyGoalRequest(BaseModel):
    minutes: int


class XpResponse(BaseModel):
    """Ledger state plus today's progress."""
    ledger: XpLedgerState
    progress: DailyProgress


class SessionResponse(BaseModel):
    """Current session snapshot and, once finished, its result."""
    session: SessionView
    result: Optional[SessionResult] = None
    resumed: bool = False
    live_progress: Dict[str, int] = Field(default_factory=dict)


class FocusLogResponse(BaseModel):
    entries: List[FocusLogEntry]
    minutes_today: int
