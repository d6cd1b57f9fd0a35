"""Task collection persisted as one JSON blob in the durable store.

Repeating tasks are stored once. Day views are projected on read by
`araise.recurrence`, and deleting a single occurrence only records an
exception date on the stored task.
"""

import logging
import threading
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from araise.engine.xp_ledger import XpLedger
from araise.models.constants import TASKS_STORE_KEY
from araise.models.task import CycleSpec, RepeatFrequency, Task, TaskCategory
from araise.models.task_factory import create_task_base, planned_minutes_for
from araise.ports.clock import Clock
from araise.ports.store import DurableStore
from araise.recurrence.occurrences import occurrences_for_date, occurrences_in_range, sort_occurrences

logger = logging.getLogger(__name__)

MIN_BLOCK_MINUTES = 5


class TaskCollection(BaseModel):
    """Shape of the persisted blob."""

    tasks: List[Task] = Field(default_factory=list)


class TaskStore:
    """CRUD over the task collection; every mutation is persisted immediately.

    Session completions credit minutes from the ticker thread, so reads and
    read-modify-write updates hold one re-entrant lock.
    """

    def __init__(self, clock: Clock, store: DurableStore, xp_ledger: Optional[XpLedger] = None):
        self.clock = clock
        self.store = store
        self.xp_ledger = xp_ledger
        self._lock = threading.RLock()
        self.tasks: List[Task] = self._load()

    def _load(self) -> List[Task]:
        raw = self.store.get(TASKS_STORE_KEY)
        if not raw:
            return []
        try:
            return TaskCollection.model_validate_json(raw).tasks
        except (ValidationError, ValueError) as e:
            logger.warning(f"Discarding unreadable task collection: {type(e).__name__}")
            return []

    def _save(self) -> None:
        with self._lock:
            blob = TaskCollection(tasks=self.tasks).model_dump_json(by_alias=True)
            self.store.set(TASKS_STORE_KEY, blob)

    def _index(self, task_id: str) -> int:
        for i, t in enumerate(self.tasks):
            if t.id == task_id:
                return i
        raise ValueError(f"Task {task_id} not found")

    def _replace(self, task: Task) -> Task:
        with self._lock:
            self.tasks[self._index(task.id)] = task
            self._save()
            return task

    def get(self, task_id: str) -> Optional[Task]:
        with self._lock:
            return next((t for t in self.tasks if t.id == task_id), None)

    def _next_order(self, day: date) -> int:
        orders = [t.order for t in self.tasks if t.date == day and not t.is_scheduled]
        return max([-1] + orders) + 1

    def add_task(
        self,
        title: str,
        category: TaskCategory = TaskCategory.WORK,
        *,
        task_date: Optional[date] = None,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        focus_mode: bool = False,
        focus_duration: Optional[int] = None,
        break_duration: Optional[int] = None,
        cycles: Optional[int] = None,
        custom_cycles: Optional[List[CycleSpec]] = None,
        repeat: RepeatFrequency = RepeatFrequency.NONE,
        repeat_until: Optional[date] = None,
        exceptions: Optional[List[date]] = None,
        order: Optional[int] = None,
    ) -> Task:
        """Create a task and put it at the front of the collection."""
        day = task_date or self.clock.today()
        with self._lock:
            task = create_task_base(
                title=title,
                task_date=day,
                order=order if order is not None else self._next_order(day),
                category=category,
                start_at=start_at,
                end_at=end_at,
                focus_mode=focus_mode,
                focus_duration=focus_duration,
                break_duration=break_duration,
                cycles=cycles,
                custom_cycles=custom_cycles,
                repeat=repeat,
                repeat_until=repeat_until,
                exceptions=exceptions,
            )
            self.tasks.insert(0, task)
            self._save()
        logger.debug(f"Created task {task.id}: {task.title[:50]}")
        return task

    def update_task(self, task_id: str, updates: Dict[str, Any]) -> Task:
        """Edit a task. For repeating tasks this edits the whole series."""
        with self._lock:
            current = self.tasks[self._index(task_id)]
            data = {**current.model_dump(), **updates, "id": current.id}
            if {"focus_duration", "cycles", "custom_cycles"} & set(updates) and "planned_minutes" not in updates:
                candidate = Task.model_validate(data)
                data["planned_minutes"] = planned_minutes_for(
                    candidate.focus_duration, candidate.cycles, candidate.custom_cycles
                )
            return self._replace(Task.model_validate(data))

    def toggle_task(self, task_id: str) -> Task:
        """Flip done. Completing awards XP; un-completing does not take it back."""
        with self._lock:
            current = self.tasks[self._index(task_id)]
            task = self._replace(current.model_copy(update={"done": not current.done}))
        if task.done and self.xp_ledger is not None:
            self.xp_ledger.award_task_completion(task)
        return task

    def record_focus_minutes(self, task_id: str, minutes: int) -> Task:
        """Credit focus minutes from a finished or partial session."""
        with self._lock:
            current = self.tasks[self._index(task_id)]
            return self._replace(
                current.model_copy(update={"completed_minutes": current.completed_minutes + max(0, minutes)})
            )

    def reorder_unscheduled(self, day: date, source_id: str, target_id: str) -> bool:
        """Swap the order keys of two unscheduled tasks anchored on `day`."""
        with self._lock:
            a = self.get(source_id)
            b = self.get(target_id)
            if a is None or b is None:
                return False
            if a.date != day or b.date != day:
                return False
            if a.is_scheduled or b.is_scheduled:
                return False
            self.tasks[self._index(a.id)] = a.model_copy(update={"order": b.order})
            self.tasks[self._index(b.id)] = b.model_copy(update={"order": a.order})
            self._save()
            return True

    def occurrences_for_date(self, day: date) -> List[Task]:
        """Sorted occurrences for one day."""
        with self._lock:
            tasks = list(self.tasks)
        return sort_occurrences(occurrences_for_date(tasks, day))

    def occurrences_in_range(self, start: date, end: date) -> Dict[date, List[Task]]:
        with self._lock:
            tasks = list(self.tasks)
        return {d: sort_occurrences(items) for d, items in occurrences_in_range(tasks, start, end).items()}

    def delete_occurrence(self, task_id: str, day: date) -> Task:
        """Hide one date of a task while keeping the series."""
        with self._lock:
            current = self.tasks[self._index(task_id)]
            if day in current.exceptions:
                return current
            return self._replace(current.model_copy(update={"exceptions": sorted({*current.exceptions, day})}))

    def delete_series(self, task_id: str) -> None:
        """Remove a task and every occurrence projected from it."""
        with self._lock:
            del self.tasks[self._index(task_id)]
            self._save()

    def shift_task(self, task_id: str, minutes: int) -> Task:
        with self._lock:
            current = self.tasks[self._index(task_id)]
            if not current.is_scheduled:
                return current
            delta = timedelta(minutes=minutes)
            return self._replace(
                current.model_copy(update={"start_at": current.start_at + delta, "end_at": current.end_at + delta})
            )

    def resize_task(self, task_id: str, minutes_delta: int) -> Task:
        """Move end_at, keeping at least a five minute block."""
        with self._lock:
            current = self.tasks[self._index(task_id)]
            if not current.is_scheduled:
                return current
            end_at = max(
                current.start_at + timedelta(minutes=MIN_BLOCK_MINUTES),
                current.end_at + timedelta(minutes=minutes_delta),
            )
            return self._replace(current.model_copy(update={"end_at": end_at}))

    def clear_done(self) -> int:
        with self._lock:
            before = len(self.tasks)
            self.tasks = [t for t in self.tasks if not t.done]
            self._save()
            return before - len(self.tasks)
