"""Project repeating tasks onto calendar dates.

Occurrences are views: a repeating task is stored once and copied per date on
read, with `date` rebound to the requested day. Nothing here mutates or caches
the stored tasks.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, List

from araise.models.task import RepeatFrequency, Task


def _daterange(start: date, end_inclusive: date) -> Iterable[date]:
    cur = start
    while cur <= end_inclusive:
        yield cur
        cur = cur + timedelta(days=1)


def occurs_on_date(task: Task, day: date) -> bool:
    """Whether `task` has an occurrence on `day`."""
    if day in task.exceptions:
        return False

    if task.repeat == RepeatFrequency.NONE:
        return task.date == day

    # Respect start/until bounds
    if day < task.date:
        return False
    if task.repeat_until and day > task.repeat_until:
        return False

    if task.repeat == RepeatFrequency.DAILY:
        return True

    if task.repeat == RepeatFrequency.WEEKLY:
        return day.weekday() == task.date.weekday()

    return False


def occurrences_for_date(tasks: Iterable[Task], target_date: date) -> List[Task]:
    """Concrete occurrences of `tasks` on `target_date`.

    One-off tasks are returned as stored; repeating tasks are returned as
    shallow copies dated `target_date`. start_at/end_at are left untouched.
    """
    result: List[Task] = []
    for t in tasks:
        if not occurs_on_date(t, target_date):
            continue
        if t.repeat == RepeatFrequency.NONE:
            result.append(t)
        else:
            result.append(t.model_copy(update={"date": target_date}))
    return result


def occurrences_in_range(tasks: Iterable[Task], start: date, end: date) -> Dict[date, List[Task]]:
    """Occurrences for every day in [start, end]."""
    tasks = list(tasks)
    return {day: occurrences_for_date(tasks, day) for day in _daterange(start, end)}


def sort_occurrences(occurrences: Iterable[Task]) -> List[Task]:
    """Render order for one day.

    Scheduled occurrences first, by start_at; then unscheduled ones by order.
    Completed tasks sink below incomplete ones inside each group. Python's sort
    is stable, so ties keep their input order.
    """
    occurrences = list(occurrences)
    scheduled = [t for t in occurrences if t.is_scheduled]
    unscheduled = [t for t in occurrences if not t.is_scheduled]
    scheduled.sort(key=lambda t: (t.done, t.start_at))
    unscheduled.sort(key=lambda t: (t.done, t.order))
    return scheduled + unscheduled
