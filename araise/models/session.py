"""Focus session data models for araise."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from araise.models.task import CycleSpec


class BreakType(str, Enum):
    """How breaks are laid out in a session."""
    NONE = "none"
    POMODORO = "pomodoro"
    CUSTOM = "custom"


class PhaseType(str, Enum):
    """Phase type enumeration."""
    FOCUS = "focus"
    BREAK = "break"


class SessionStatus(str, Enum):
    """Live session controller state."""
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class SessionConfig(BaseModel):
    """Ephemeral description of a session to run (never persisted as an entity)."""

    mode: str = Field("custom", description="Entry point that opened the session (e.g. 'task', 'custom')")
    name: str = Field(..., description="Session or task name")
    duration: int = Field(..., ge=0, description="Focus duration in minutes")
    break_type: BreakType = Field(BreakType.NONE, description="Break layout")
    custom_cycles: Optional[List[CycleSpec]] = Field(None, description="Cycles for break_type=custom")
    task_id: Optional[str] = Field(None, description="Owning task, if the session is task-bound")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class Phase(BaseModel):
    """One contiguous focus or break interval."""

    type: PhaseType
    duration_seconds: int = Field(..., ge=0)
    cycle_index: int = Field(0, ge=0)

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


class LiveSessionState(BaseModel):
    """Transient persisted state of an in-flight session."""

    current_phase_index: int = Field(0, ge=0)
    time_remaining_seconds: int = Field(..., ge=0)
    total_focus_minutes_accrued: int = Field(0, ge=0)
    time_spent_in_current_phase_seconds: int = Field(0, ge=0)
    task_id: Optional[str] = None
    last_saved_at: datetime = Field(default_factory=datetime.utcnow)


class SessionResult(BaseModel):
    """Payload of a session_complete event."""

    duration_minutes: int = Field(..., ge=0, description="Focus minutes credited")
    task: str = Field(..., description="Session or task name")
    task_id: Optional[str] = None
    completed: bool = Field(..., description="False for partial-credit sessions ended early")


class SessionView(BaseModel):
    """Read-only snapshot of a live session for rendering."""

    key: str
    status: SessionStatus
    phase: Optional[Phase]
    phase_index: int
    total_phases: int
    time_remaining_seconds: int
    clock: str
    progress_percent: float
    total_focus_minutes_accrued: int

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
