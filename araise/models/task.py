"""Task data model for araise."""

import datetime as dt
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator


class TaskCategory(str, Enum):
    """Task category enumeration."""
    STUDY = "study"
    WORK = "work"
    READING = "reading"
    SELFCARE = "selfcare"
    ROUTINE = "routine"
    PERSONALWORK = "personalwork"


class RepeatFrequency(str, Enum):
    """How a task repeats across calendar days."""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"


class CycleSpec(BaseModel):
    """One focus/break pair, in minutes."""

    focus: int = Field(..., ge=1, description="Focus length in minutes")
    break_: int = Field(0, ge=0, alias="break", description="Break length in minutes")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class Task(BaseModel):
    """Canonical Task model.

    For repeating tasks `date` is the first occurrence; occurrences for other
    days are projected by `araise.recurrence.occurrences` and never stored.
    """

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    title: str = Field(..., min_length=1, description="Task title")
    category: TaskCategory = Field(TaskCategory.WORK, description="Task category")
    date: dt.date = Field(..., description="Anchor date (first occurrence for repeating tasks)")
    start_at: Optional[dt.datetime] = Field(None, description="Block start (time-blocked tasks only)")
    end_at: Optional[dt.datetime] = Field(None, description="Block end (time-blocked tasks only)")
    done: bool = Field(False, description="Whether the task is completed")
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow, description="Task creation timestamp")

    # Focus session settings
    focus_mode: bool = Field(False, description="Whether starting this task opens a focus session")
    focus_duration: int = Field(25, ge=1, description="Focus length in minutes")
    break_duration: int = Field(5, ge=0, description="Break length in minutes (0 allowed)")
    cycles: int = Field(1, ge=1, description="Number of focus/break repetitions")
    custom_cycles: Optional[List[CycleSpec]] = Field(
        None, description="Explicit per-cycle focus/break lengths, overriding focus/break duration"
    )
    planned_minutes: int = Field(0, ge=0, description="Planned focus minutes")
    completed_minutes: int = Field(0, ge=0, description="Focus minutes credited from sessions")

    # Recurrence
    repeat: RepeatFrequency = Field(RepeatFrequency.NONE, description="Repeat frequency")
    repeat_until: Optional[dt.date] = Field(None, description="Last occurrence date (inclusive)")
    exceptions: List[dt.date] = Field(default_factory=list, description="Dates where the occurrence is hidden")

    order: int = Field(0, description="Sort key among unscheduled tasks sharing a date")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("start_at", "end_at")
    @classmethod
    def _to_local_naive(cls, v: Optional[dt.datetime]) -> Optional[dt.datetime]:
        # Blocks are compared with each other and with the local wall clock.
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @field_validator("exceptions")
    @classmethod
    def _normalize_exceptions(cls, v):
        return sorted(set(v))

    @model_validator(mode="after")
    def _check_time_block(self):
        if (self.start_at is None) != (self.end_at is None):
            raise ValueError("start_at and end_at must be set together")
        if self.start_at is not None and self.end_at < self.start_at:
            raise ValueError("end_at must be >= start_at")
        if self.repeat_until is not None and self.repeat_until < self.date:
            raise ValueError("repeat_until must be >= date")
        return self

    @property
    def is_scheduled(self) -> bool:
        """True when the task is time-blocked."""
        return self.start_at is not None and self.end_at is not None
