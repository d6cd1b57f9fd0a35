"""Repository for focus log database operations."""

import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from araise.database.models import FocusLogDB
from araise.models.focus_log import FocusLogEntry

logger = logging.getLogger(__name__)


class FocusLogRepository:
    """Repository for FocusLogEntry database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, entry: FocusLogEntry) -> FocusLogEntry:
        try:
            row = FocusLogDB.from_pydantic(entry)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Logged focus session {entry.id}: {entry.duration_minutes} min of {entry.task_name[:50]}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to log focus session {entry.id}: {type(e).__name__}: {str(e)}")
            raise

    def list_recent(self, limit: Optional[int] = None) -> List[FocusLogEntry]:
        """Entries newest first."""
        query = self.db.query(FocusLogDB).order_by(desc(FocusLogDB.logged_at))
        if limit is not None:
            query = query.limit(limit)
        return [row.to_pydantic() for row in query.all()]

    def list_for_day(self, day: date) -> List[FocusLogEntry]:
        start = datetime.combine(day, time(0, 0))
        end = start + timedelta(days=1)
        rows = (
            self.db.query(FocusLogDB)
            .filter(FocusLogDB.logged_at >= start, FocusLogDB.logged_at < end)
            .order_by(FocusLogDB.logged_at)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def minutes_for_day(self, day: date) -> int:
        """Focus minutes logged on `day`, partial sessions included."""
        return sum(e.duration_minutes for e in self.list_for_day(day))
