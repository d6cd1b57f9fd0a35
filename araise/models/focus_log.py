"""Focus log entry data model for araise."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class FocusLogEntry(BaseModel):
    """One finished (or partially finished) focus session in history."""

    id: str = Field(..., description="Unique log entry identifier (UUID v4)")
    task_name: str = Field(..., description="Session or task name")
    task_id: Optional[str] = Field(None, description="Owning task, if any")
    duration_minutes: int = Field(..., ge=0, description="Focus minutes credited")
    completed: bool = Field(..., description="False for sessions ended early with partial credit")
    logged_at: datetime = Field(default_factory=datetime.utcnow, description="When the session ended")
