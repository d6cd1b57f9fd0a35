"""Record finished focus sessions into history and task progress."""

import logging
import uuid
from typing import Optional

from araise.database.focus_log_repository import FocusLogRepository
from araise.models.focus_log import FocusLogEntry
from araise.models.session import SessionResult
from araise.ports.clock import Clock
from araise.services.task_store import TaskStore

logger = logging.getLogger(__name__)


class FocusLog:
    """Consumer of session_complete events.

    Partial sessions (completed=False) are kept as valid history entries.
    """

    def __init__(self, repository: FocusLogRepository, clock: Clock, task_store: Optional[TaskStore] = None):
        self.repository = repository
        self.clock = clock
        self.task_store = task_store

    def record(self, result: SessionResult) -> FocusLogEntry:
        entry = self.repository.create(
            FocusLogEntry(
                id=str(uuid.uuid4()),
                task_name=result.task,
                task_id=result.task_id,
                duration_minutes=result.duration_minutes,
                completed=result.completed,
                logged_at=self.clock.now(),
            )
        )
        if result.task_id and self.task_store is not None and result.duration_minutes > 0:
            try:
                self.task_store.record_focus_minutes(result.task_id, result.duration_minutes)
            except ValueError:
                # Task deleted while its session was running.
                logger.warning(f"Focus minutes for missing task {result.task_id} not credited")
        return entry

    def minutes_today(self) -> int:
        return self.repository.minutes_for_day(self.clock.today())
