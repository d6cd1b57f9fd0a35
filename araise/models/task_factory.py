"""Task creation factory for araise.

This module centralizes task creation logic to eliminate duplication
and ensure consistent default values across the application.
"""

import uuid
from datetime import date, datetime
from typing import Optional, Dict, Any, List

from araise.models.task import Task, TaskCategory, RepeatFrequency, CycleSpec
from araise.models.constants import (
    DEFAULT_FOCUS_DURATION_MINUTES,
    DEFAULT_BREAK_DURATION_MINUTES,
    DEFAULT_CYCLES,
)


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary.

    Returns:
        Dictionary with default task field values using constants
    """
    return {
        "category": TaskCategory.WORK,
        "start_at": None,
        "end_at": None,
        "focus_mode": False,
        "focus_duration": DEFAULT_FOCUS_DURATION_MINUTES,
        "break_duration": DEFAULT_BREAK_DURATION_MINUTES,
        "cycles": DEFAULT_CYCLES,
        "custom_cycles": None,
        "planned_minutes": 0,
        "repeat": RepeatFrequency.NONE,
        "repeat_until": None,
        "exceptions": [],
    }


def planned_minutes_for(
    focus_duration: int,
    cycles: int,
    custom_cycles: Optional[List[CycleSpec]] = None,
) -> int:
    """Total planned focus minutes for a task's session settings."""
    if custom_cycles:
        return sum(c.focus for c in custom_cycles)
    return focus_duration * cycles


def create_task_base(
    title: str,
    task_date: date,
    order: int = 0,
    category: Optional[TaskCategory] = None,
    start_at: Optional[datetime] = None,
    end_at: Optional[datetime] = None,
    focus_mode: Optional[bool] = None,
    focus_duration: Optional[int] = None,
    break_duration: Optional[int] = None,
    cycles: Optional[int] = None,
    custom_cycles: Optional[List[CycleSpec]] = None,
    repeat: Optional[RepeatFrequency] = None,
    repeat_until: Optional[date] = None,
    exceptions: Optional[List[date]] = None,
) -> Task:
    """Create a task with defaults, allowing overrides.

    All optional parameters override defaults when provided. `break_duration`
    may legitimately be 0, so only None falls back to the default.

    Args:
        title: Task title (required, stripped)
        task_date: Anchor date; first occurrence for repeating tasks
        order: Sort key among unscheduled tasks on the same date
        category: Task category (defaults to WORK)
        start_at: Block start; requires end_at
        end_at: Block end; requires start_at
        focus_mode: Whether starting the task opens a focus session
        focus_duration: Focus length in minutes
        break_duration: Break length in minutes
        cycles: Number of focus/break repetitions
        custom_cycles: Explicit per-cycle lengths
        repeat: Repeat frequency
        repeat_until: Last occurrence date (inclusive)
        exceptions: Dates where the occurrence is hidden

    Returns:
        Task object with defaults applied
    """
    defaults = create_task_defaults()

    focus_duration = focus_duration if focus_duration is not None else defaults["focus_duration"]
    cycles = cycles if cycles is not None else defaults["cycles"]

    task = Task(
        id=str(uuid.uuid4()),
        title=title,
        category=category if category is not None else defaults["category"],
        date=task_date,
        start_at=start_at if start_at is not None else defaults["start_at"],
        end_at=end_at if end_at is not None else defaults["end_at"],
        done=False,
        created_at=datetime.utcnow(),
        focus_mode=bool(focus_mode) if focus_mode is not None else defaults["focus_mode"],
        focus_duration=focus_duration,
        break_duration=break_duration if break_duration is not None else defaults["break_duration"],
        cycles=cycles,
        custom_cycles=custom_cycles if custom_cycles is not None else defaults["custom_cycles"],
        planned_minutes=planned_minutes_for(focus_duration, cycles, custom_cycles),
        repeat=repeat if repeat is not None else defaults["repeat"],
        repeat_until=repeat_until if repeat_until is not None else defaults["repeat_until"],
        exceptions=exceptions if exceptions is not None else defaults["exceptions"],
        order=order,
    )

    return task
