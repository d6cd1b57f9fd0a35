"""Live focus session controller.

Drives one session through its phase sequence: one tick per second while
running, phase transitions, pause/resume, break skipping, and early end with
partial credit. State is written to the durable store on every change so a
session of the same shape resumes where it left off after a reload.
"""

import logging
import threading
from typing import Callable, Optional

from pydantic import ValidationError

from araise.engine.phases import build_phases, total_focus_minutes, total_seconds
from araise.models.constants import SECONDS_PER_MINUTE, SESSION_KEY_PREFIX
from araise.models.session import (
    BreakType,
    LiveSessionState,
    Phase,
    PhaseType,
    SessionConfig,
    SessionResult,
    SessionStatus,
    SessionView,
)
from araise.ports.clock import Cancel, Clock
from araise.ports.store import DurableStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int], None]
CompleteCallback = Callable[[SessionResult], None]
Hook = Callable[[], None]


def session_key(config: SessionConfig) -> str:
    """Deterministic persistence key for a session.

    Task-bound sessions are keyed by task id plus shape so two tasks with the
    same title never share a slot; ad-hoc sessions fall back to name, duration
    and break type.
    """
    break_type = BreakType(config.break_type or BreakType.NONE).value
    if config.task_id:
        return f"{SESSION_KEY_PREFIX}-task-{config.task_id}-{config.duration}-{break_type}"
    return f"{SESSION_KEY_PREFIX}-{config.name}-{config.duration}-{break_type}"


def format_clock(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), SECONDS_PER_MINUTE)
    return f"{minutes}:{secs:02d}"


class LiveSessionController:
    """State machine over (phase index, remaining seconds, paused).

    The controller owns at most one timer handle at a time. Callers must keep
    a single controller per session key active.
    """

    def __init__(
        self,
        config: SessionConfig,
        clock: Clock,
        store: DurableStore,
        *,
        on_progress_update: Optional[ProgressCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
        on_abandoned: Optional[Hook] = None,
        on_pause: Optional[Hook] = None,
        on_resume: Optional[Hook] = None,
        on_skip_break: Optional[Hook] = None,
    ):
        phases = build_phases(config)
        if not phases or total_seconds(phases) == 0:
            raise ValueError(f"Session '{config.name}' has no runnable phases")

        self.config = config
        self.phases = phases
        self.key = session_key(config)
        self.clock = clock
        self.store = store

        self.on_progress_update = on_progress_update
        self.on_complete = on_complete
        self.on_abandoned = on_abandoned
        self.on_pause = on_pause
        self.on_resume = on_resume
        self.on_skip_break = on_skip_break

        self.status = SessionStatus.PAUSED
        self.result: Optional[SessionResult] = None
        self._cancel_timer: Optional[Cancel] = None
        self._timer_generation = 0
        self._lock = threading.RLock()

        state = self._load_state()
        self.resumed = state is not None
        if state is None:
            self.current_phase_index = 0
            self.time_remaining = phases[0].duration_seconds
            self.total_focus_minutes_accrued = 0
            self.time_spent_in_current_phase = 0
        else:
            self.current_phase_index = state.current_phase_index
            self.time_remaining = state.time_remaining_seconds
            self.total_focus_minutes_accrued = state.total_focus_minutes_accrued
            self.time_spent_in_current_phase = state.time_spent_in_current_phase_seconds

    def _load_state(self) -> Optional[LiveSessionState]:
        raw = self.store.get(self.key)
        if not raw:
            return None
        try:
            state = LiveSessionState.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Discarding unreadable session state for {self.key}: {type(e).__name__}")
            return None

        if state.current_phase_index >= len(self.phases):
            logger.warning(f"Discarding session state for {self.key}: phase index out of range")
            return None
        phase = self.phases[state.current_phase_index]
        if not 0 < state.time_remaining_seconds <= phase.duration_seconds:
            logger.warning(f"Discarding session state for {self.key}: remaining time does not fit phase")
            return None

        logger.debug(
            f"Resuming {self.key} at phase {state.current_phase_index} "
            f"with {state.time_remaining_seconds}s remaining"
        )
        return state

    def _save_state(self) -> None:
        state = LiveSessionState(
            current_phase_index=self.current_phase_index,
            time_remaining_seconds=self.time_remaining,
            total_focus_minutes_accrued=self.total_focus_minutes_accrued,
            time_spent_in_current_phase_seconds=self.time_spent_in_current_phase,
            task_id=self.config.task_id,
            last_saved_at=self.clock.now(),
        )
        self.store.set(self.key, state.model_dump_json())

    def _clear_state(self) -> None:
        self.store.remove(self.key)

    def _start_timer(self) -> None:
        if self._cancel_timer is None:
            self._timer_generation += 1
            generation = self._timer_generation
            self._cancel_timer = self.clock.every_second(lambda: self._on_timer(generation))

    def _stop_timer(self) -> None:
        if self._cancel_timer is not None:
            self._cancel_timer()
            self._cancel_timer = None
            # A cancelled ticker thread may still deliver one tick.
            self._timer_generation += 1

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._timer_generation:
                return
            self.tick()

    @property
    def current_phase(self) -> Phase:
        return self.phases[self.current_phase_index]

    @property
    def is_break(self) -> bool:
        return self.current_phase.type == PhaseType.BREAK

    @property
    def is_last_phase(self) -> bool:
        return self.current_phase_index == len(self.phases) - 1

    @property
    def is_paused(self) -> bool:
        return self.status == SessionStatus.PAUSED

    @property
    def is_finished(self) -> bool:
        return self.status in (SessionStatus.COMPLETED, SessionStatus.ABANDONED)

    def start(self) -> None:
        """Begin (or continue a resumed) countdown."""
        with self._lock:
            if self.is_finished or self.status == SessionStatus.RUNNING:
                return
            self.status = SessionStatus.RUNNING
            self._save_state()
            self._start_timer()
            logger.debug(f"Started {self.key} at phase {self.current_phase_index}")

    def tick(self) -> None:
        """Advance the countdown by one second."""
        with self._lock:
            if self.status != SessionStatus.RUNNING:
                return

            self.time_remaining = max(0, self.time_remaining - 1)

            if self.current_phase.type == PhaseType.FOCUS:
                self.time_spent_in_current_phase += 1
                if self.config.task_id and self.on_progress_update:
                    seconds_spent = self.total_focus_minutes_accrued * SECONDS_PER_MINUTE + self.time_spent_in_current_phase
                    self.on_progress_update(self.config.task_id, seconds_spent // SECONDS_PER_MINUTE)

            if self.time_remaining == 0:
                self._complete_phase()
            else:
                self._save_state()

    def _complete_phase(self) -> None:
        phase = self.current_phase
        if phase.type == PhaseType.FOCUS:
            self.total_focus_minutes_accrued += phase.duration_seconds // SECONDS_PER_MINUTE

        if self.is_last_phase:
            self._finish()
        else:
            self._advance()

    def _advance(self) -> None:
        self.current_phase_index += 1
        self.time_remaining = self.current_phase.duration_seconds
        self.time_spent_in_current_phase = 0
        logger.debug(f"{self.key} entered {self.current_phase.type} phase {self.current_phase_index}")
        if self.time_remaining == 0:
            # zero-length break
            self._complete_phase()
        else:
            self._save_state()

    def _finish(self) -> None:
        self._stop_timer()
        self._clear_state()
        self.status = SessionStatus.COMPLETED
        self.result = SessionResult(
            duration_minutes=total_focus_minutes(self.phases),
            task=self.config.name,
            task_id=self.config.task_id,
            completed=True,
        )
        logger.info(f"Session {self.key} completed: {self.result.duration_minutes} focus minutes")
        if self.on_complete:
            self.on_complete(self.result)

    def pause(self) -> bool:
        with self._lock:
            if self.status != SessionStatus.RUNNING:
                return False
            self._stop_timer()
            self.status = SessionStatus.PAUSED
            self._save_state()
            if self.on_pause:
                self.on_pause()
            return True

    def resume(self) -> bool:
        with self._lock:
            if self.status != SessionStatus.PAUSED:
                return False
            self.status = SessionStatus.RUNNING
            self._start_timer()
            if self.on_resume:
                self.on_resume()
            return True

    def toggle_pause(self) -> bool:
        """Pause if running, resume if paused. Returns the new paused flag."""
        with self._lock:
            if self.status == SessionStatus.RUNNING:
                self.pause()
            else:
                self.resume()
            return self.is_paused

    def skip_break(self) -> bool:
        """Skip the rest of the current break. No-op on focus phases."""
        with self._lock:
            if self.is_finished or not self.is_break:
                return False
            if self.on_skip_break:
                self.on_skip_break()
            if self.is_last_phase:
                self._finish()
            else:
                self._advance()
            return True

    def focus_minutes_spent(self) -> int:
        """Completed focus phases plus whole minutes of the current focus phase."""
        minutes = sum(
            p.duration_seconds // SECONDS_PER_MINUTE
            for p in self.phases[: self.current_phase_index]
            if p.type == PhaseType.FOCUS
        )
        phase = self.current_phase
        if phase.type == PhaseType.FOCUS:
            minutes += (phase.duration_seconds - self.time_remaining) // SECONDS_PER_MINUTE
        return minutes

    def end(self) -> Optional[SessionResult]:
        """Stop before natural completion.

        Any whole focus minute earns a partial-credit result (completed=False);
        otherwise the session is abandoned without credit.
        """
        with self._lock:
            if self.is_finished:
                return self.result
            self._stop_timer()
            self._clear_state()

            minutes = self.focus_minutes_spent()
            if minutes > 0:
                self.status = SessionStatus.COMPLETED
                self.result = SessionResult(
                    duration_minutes=minutes,
                    task=self.config.name,
                    task_id=self.config.task_id,
                    completed=False,
                )
                logger.info(f"Session {self.key} ended early with {minutes} focus minutes")
                if self.on_complete:
                    self.on_complete(self.result)
                return self.result

            self.status = SessionStatus.ABANDONED
            logger.info(f"Session {self.key} abandoned without focus time")
            if self.on_abandoned:
                self.on_abandoned()
            return None

    def close(self) -> None:
        """Release the timer but keep persisted state for a later resume."""
        with self._lock:
            self._stop_timer()
            if self.status == SessionStatus.RUNNING:
                self.status = SessionStatus.PAUSED

    def progress_percent(self) -> float:
        total = total_seconds(self.phases)
        if self.result is not None and self.result.completed:
            return 100.0
        done = sum(p.duration_seconds for p in self.phases[: self.current_phase_index])
        done += self.current_phase.duration_seconds - self.time_remaining
        return (done / total) * 100 if total > 0 else 0.0

    def snapshot(self) -> SessionView:
        with self._lock:
            return SessionView(
                key=self.key,
                status=self.status,
                phase=None if self.is_finished else self.current_phase,
                phase_index=self.current_phase_index,
                total_phases=len(self.phases),
                time_remaining_seconds=self.time_remaining,
                clock=format_clock(self.time_remaining),
                progress_percent=round(self.progress_percent(), 2),
                total_focus_minutes_accrued=self.total_focus_minutes_accrued,
            )
