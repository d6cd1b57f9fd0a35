"""Build the phase sequence for a focus session.

The sequence is computed once per session start and never changes length
while the session runs.
"""

from typing import Iterable, Tuple

from araise.models.constants import POMODORO_BREAK_MINUTES, SECONDS_PER_MINUTE
from araise.models.session import BreakType, Phase, PhaseType, SessionConfig
from araise.models.task import CycleSpec, Task


def build_phases(config: SessionConfig) -> Tuple[Phase, ...]:
    """Map a session configuration to its ordered phases.

    - custom: focus then break for every cycle, trailing break included;
      an empty cycle list yields no phases
    - pomodoro: one focus phase then a 5 minute break
    - anything else: a single focus phase
    """
    if config.break_type == BreakType.CUSTOM and config.custom_cycles is not None:
        phases = []
        for index, cycle in enumerate(config.custom_cycles):
            phases.append(Phase(type=PhaseType.FOCUS, duration_seconds=cycle.focus * SECONDS_PER_MINUTE, cycle_index=index))
            phases.append(Phase(type=PhaseType.BREAK, duration_seconds=cycle.break_ * SECONDS_PER_MINUTE, cycle_index=index))
        return tuple(phases)

    if config.break_type == BreakType.POMODORO:
        return (
            Phase(type=PhaseType.FOCUS, duration_seconds=config.duration * SECONDS_PER_MINUTE, cycle_index=0),
            Phase(type=PhaseType.BREAK, duration_seconds=POMODORO_BREAK_MINUTES * SECONDS_PER_MINUTE, cycle_index=0),
        )

    return (Phase(type=PhaseType.FOCUS, duration_seconds=config.duration * SECONDS_PER_MINUTE, cycle_index=0),)


def total_focus_minutes(phases: Iterable[Phase]) -> int:
    """Sum of focus phase lengths, each floored to whole minutes."""
    return sum(p.duration_seconds // SECONDS_PER_MINUTE for p in phases if p.type == PhaseType.FOCUS)


def total_seconds(phases: Iterable[Phase]) -> int:
    return sum(p.duration_seconds for p in phases)


def session_config_for_task(task: Task) -> SessionConfig:
    """Session a focus-mode task opens when started."""
    if task.custom_cycles:
        cycles = list(task.custom_cycles)
    elif task.cycles == 1 and task.break_duration == 0:
        return SessionConfig(
            mode="task",
            name=task.title,
            duration=task.focus_duration,
            break_type=BreakType.NONE,
            task_id=task.id,
        )
    else:
        cycles = [CycleSpec(focus=task.focus_duration, break_=task.break_duration) for _ in range(task.cycles)]

    return SessionConfig(
        mode="task",
        name=task.title,
        duration=sum(c.focus for c in cycles),
        break_type=BreakType.CUSTOM,
        custom_cycles=cycles,
        task_id=task.id,
    )
