"""Experience points, daily totals and day streaks.

Every read or write first rolls the ledger over to the clock's current day
through `rollover_if_new_day`, so the award path and the progress path share
one definition of a day boundary.
"""

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from pydantic import ValidationError

from araise.models.constants import (
    DEFAULT_DAILY_GOAL,
    FOCUS_TASK_XP,
    MAX_DAILY_GOAL,
    MIN_DAILY_GOAL,
    TASK_XP,
    XP_STORE_KEY,
)
from araise.models.task import Task
from araise.models.xp import DailyProgress, XpLedgerState
from araise.ports.clock import Clock
from araise.ports.store import DurableStore

logger = logging.getLogger(__name__)

XpAwardedCallback = Callable[[int, XpLedgerState], None]


def clamp_daily_goal(minutes: int) -> int:
    return max(MIN_DAILY_GOAL, min(MAX_DAILY_GOAL, int(minutes)))


def xp_for_task_completion(task: Task) -> int:
    """XP credited when a task is toggled to done."""
    return FOCUS_TASK_XP if task.focus_mode else TASK_XP


class XpLedger:
    """Stateful XP accumulator persisted under a single store key."""

    def __init__(
        self,
        clock: Clock,
        store: DurableStore,
        *,
        default_goal: int = DEFAULT_DAILY_GOAL,
        on_xp_awarded: Optional[XpAwardedCallback] = None,
    ):
        self.clock = clock
        self.store = store
        self.default_goal = clamp_daily_goal(default_goal)
        self.on_xp_awarded = on_xp_awarded
        self.state = self._load()

    def _default_state(self) -> XpLedgerState:
        return XpLedgerState(daily_goal=self.default_goal)

    def _load(self) -> XpLedgerState:
        raw = self.store.get(XP_STORE_KEY)
        if not raw:
            return self._default_state()
        try:
            return XpLedgerState.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Discarding unreadable XP ledger: {type(e).__name__}")
            return self._default_state()

    def _save(self) -> None:
        self.store.set(XP_STORE_KEY, self.state.model_dump_json())

    def rollover_if_new_day(self, today: date) -> bool:
        """Reset daily counters when `today` differs from the last active day.

        The streak survives only if the last active day was yesterday. Daily XP
        is zeroed on any boundary. Idempotent for a given `today`.
        """
        s = self.state
        if s.last_active_date is None or s.last_active_date == today:
            return False

        updates = {"daily_xp": 0, "last_active_date": today}
        if s.last_active_date != today - timedelta(days=1):
            updates["streak_days"] = 0
            updates["last_streak_date"] = None
        logger.debug(f"XP rollover from {s.last_active_date} to {today}")
        self.state = s.model_copy(update=updates)
        return True

    def award_xp(self, amount: int) -> XpLedgerState:
        """Add (or, when negative, remove) XP and update the streak."""
        today = self.clock.today()
        self.rollover_if_new_day(today)

        s = self.state
        xp = max(0, s.xp + amount)
        daily_xp = max(0, s.daily_xp + amount)
        streak_days = s.streak_days
        last_streak_date = s.last_streak_date

        if daily_xp >= s.daily_goal:
            if streak_days == 0:
                streak_days = 1
                last_streak_date = today
            elif last_streak_date != today:
                streak_days += 1
                last_streak_date = today

        self.state = s.model_copy(
            update={
                "xp": xp,
                "daily_xp": daily_xp,
                "streak_days": streak_days,
                "last_streak_date": last_streak_date,
                "last_active_date": today,
            }
        )
        self._save()
        logger.debug(f"Awarded {amount} XP: total={xp} daily={daily_xp} streak={streak_days}")
        if self.on_xp_awarded:
            self.on_xp_awarded(amount, self.state)
        return self.state

    def award_task_completion(self, task: Task) -> XpLedgerState:
        return self.award_xp(xp_for_task_completion(task))

    def check_and_reset_daily(self) -> bool:
        """Catch a day boundary crossed while nothing was awarded."""
        changed = self.rollover_if_new_day(self.clock.today())
        if changed:
            self._save()
        return changed

    def daily_progress(self) -> DailyProgress:
        self.check_and_reset_daily()
        goal = self.state.daily_goal
        daily_xp = self.state.daily_xp
        return DailyProgress(
            daily_xp=daily_xp,
            threshold=goal,
            progress_percent=min((daily_xp / goal) * 100, 100.0),
            is_threshold_reached=daily_xp >= goal,
        )

    def set_daily_goal(self, minutes: int) -> int:
        """Set the daily goal, clamped to the supported range."""
        goal = clamp_daily_goal(minutes)
        self.state = self.state.model_copy(update={"daily_goal": goal})
        self._save()
        return goal

    def reset_streak(self) -> XpLedgerState:
        self.state = self.state.model_copy(update={"streak_days": 0, "last_streak_date": None, "daily_xp": 0})
        self._save()
        return self.state

    def clear(self) -> None:
        """Forget everything (e.g. on sign-out)."""
        self.state = self._default_state()
        self.store.remove(XP_STORE_KEY)
