"""SQLAlchemy database models for araise."""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text

from araise.database.database import Base


class KeyValueDB(Base):
    """Opaque JSON blob keyed by string (backs the durable store port)."""

    __tablename__ = "kv_store"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


class FocusLogDB(Base):
    """Database model for FocusLogEntry."""

    __tablename__ = "focus_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    task_name = Column(String, nullable=False)
    task_id = Column(String, nullable=True, index=True)
    duration_minutes = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    logged_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from araise.models.focus_log import FocusLogEntry

        return FocusLogEntry(
            id=self.id,
            task_name=self.task_name,
            task_id=self.task_id,
            duration_minutes=self.duration_minutes,
            completed=self.completed,
            logged_at=self.logged_at,
        )

    @classmethod
    def from_pydantic(cls, entry):
        """Create database model from Pydantic model."""
        return cls(
            id=entry.id,
            task_name=entry.task_name,
            task_id=entry.task_id,
            duration_minutes=entry.duration_minutes,
            completed=entry.completed,
            logged_at=entry.logged_at,
        )
