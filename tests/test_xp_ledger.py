"""Tests for the XP / streak ledger and its day-boundary rules."""

import pytest
from datetime import date, datetime, timedelta

from araise.engine.xp_ledger import XpLedger, clamp_daily_goal, xp_for_task_completion
from araise.models.constants import XP_STORE_KEY
from araise.models.task import Task
from araise.models.xp import XpLedgerState

TODAY = date(2024, 1, 1)
YESTERDAY = TODAY - timedelta(days=1)


def _seed(store, **fields):
    store.set(XP_STORE_KEY, XpLedgerState(**fields).model_dump_json())


class TestAwardXp:

    def test_first_award(self, xp_ledger):
        state = xp_ledger.award_xp(10)
        assert state.xp == 10
        assert state.daily_xp == 10
        assert state.streak_days == 0
        assert state.last_active_date == TODAY

    def test_reaching_goal_starts_streak(self, xp_ledger):
        xp_ledger.award_xp(50)
        state = xp_ledger.award_xp(10)
        assert state.streak_days == 1
        assert state.last_streak_date == TODAY

    def test_streak_credited_once_per_day(self, xp_ledger):
        xp_ledger.award_xp(60)
        state = xp_ledger.award_xp(40)
        assert state.streak_days == 1
        assert state.daily_xp == 100

    def test_negative_amounts_floor_at_zero(self, clock, memory_store):
        _seed(memory_store, xp=5, daily_xp=5, last_active_date=TODAY)
        ledger = XpLedger(clock, memory_store)
        state = ledger.award_xp(-10)
        assert state.xp == 0
        assert state.daily_xp == 0

    def test_award_persists(self, clock, memory_store, xp_ledger):
        xp_ledger.award_xp(25)
        reloaded = XpLedger(clock, memory_store)
        assert reloaded.state == xp_ledger.state

    def test_award_event(self, clock, memory_store):
        seen = []
        ledger = XpLedger(clock, memory_store, on_xp_awarded=lambda amount, state: seen.append((amount, state.xp)))
        ledger.award_xp(10)
        ledger.award_xp(20)
        assert seen == [(10, 10), (20, 30)]


class TestDayBoundary:

    def test_gap_of_two_days_resets_streak_and_daily(self, clock, memory_store):
        _seed(
            memory_store,
            xp=500,
            daily_xp=80,
            streak_days=4,
            last_active_date=TODAY - timedelta(days=2),
            last_streak_date=TODAY - timedelta(days=2),
        )
        ledger = XpLedger(clock, memory_store)
        state = ledger.award_xp(5)
        assert state.streak_days == 0
        assert state.last_streak_date is None
        assert state.daily_xp == 5
        assert state.xp == 505

    def test_yesterday_keeps_streak_but_resets_daily(self, clock, memory_store):
        _seed(
            memory_store,
            xp=300,
            daily_xp=90,
            streak_days=3,
            last_active_date=YESTERDAY,
            last_streak_date=YESTERDAY,
        )
        ledger = XpLedger(clock, memory_store)

        state = ledger.award_xp(10)
        assert state.daily_xp == 10
        assert state.streak_days == 3

        state = ledger.award_xp(50)
        assert state.daily_xp == 60
        assert state.streak_days == 4
        assert state.last_streak_date == TODAY

    def test_new_day_after_award_on_same_ledger(self, clock, xp_ledger):
        xp_ledger.award_xp(60)
        clock.set(datetime(2024, 1, 2, 8, 0))
        state = xp_ledger.award_xp(60)
        assert state.streak_days == 2
        assert state.daily_xp == 60

    def test_clock_set_backwards_breaks_streak_without_going_negative(self, clock, memory_store):
        _seed(memory_store, xp=100, daily_xp=70, streak_days=2, last_active_date=TODAY + timedelta(days=3))
        ledger = XpLedger(clock, memory_store)
        state = ledger.award_xp(1)
        assert state.streak_days == 0
        assert state.daily_xp == 1


class TestCheckAndResetDaily:

    def test_progress_read_rolls_over(self, clock, memory_store):
        _seed(memory_store, xp=40, daily_xp=40, streak_days=2, last_active_date=YESTERDAY, last_streak_date=YESTERDAY)
        ledger = XpLedger(clock, memory_store)
        progress = ledger.daily_progress()
        assert progress.daily_xp == 0
        assert progress.is_threshold_reached is False
        assert ledger.state.streak_days == 2
        assert XpLedgerState.model_validate_json(memory_store.get(XP_STORE_KEY)).daily_xp == 0

    def test_rollover_is_idempotent(self, clock, memory_store):
        _seed(memory_store, daily_xp=40, streak_days=2, last_active_date=TODAY - timedelta(days=5))
        ledger = XpLedger(clock, memory_store)
        assert ledger.check_and_reset_daily() is True
        first = ledger.state
        assert ledger.check_and_reset_daily() is False
        assert ledger.state == first
        assert first.streak_days == 0

    def test_read_and_award_agree(self, clock, memory_store):
        fields = dict(xp=10, daily_xp=30, streak_days=5, last_active_date=TODAY - timedelta(days=3))
        _seed(memory_store, **fields)
        read_path = XpLedger(clock, memory_store)
        read_path.check_and_reset_daily()
        read_path.award_xp(0)

        _seed(memory_store, **fields)
        award_path = XpLedger(clock, memory_store)
        award_path.award_xp(0)

        assert read_path.state == award_path.state

    def test_progress_percent_caps_at_100(self, xp_ledger):
        xp_ledger.award_xp(90)
        progress = xp_ledger.daily_progress()
        assert progress.progress_percent == 100.0
        assert progress.threshold == 60


class TestDailyGoal:

    @pytest.mark.parametrize("requested,expected", [(5, 15), (15, 15), (90, 90), (480, 480), (1000, 480)])
    def test_clamped(self, xp_ledger, requested, expected):
        assert xp_ledger.set_daily_goal(requested) == expected
        assert xp_ledger.state.daily_goal == expected

    def test_goal_applies_to_streak(self, xp_ledger):
        xp_ledger.set_daily_goal(15)
        assert xp_ledger.award_xp(15).streak_days == 1

    def test_default_goal_from_constructor(self, clock, memory_store):
        assert XpLedger(clock, memory_store, default_goal=120).state.daily_goal == 120
        assert clamp_daily_goal(0) == 15


class TestLedgerMaintenance:

    def test_unreadable_blob_starts_fresh(self, clock, memory_store):
        memory_store.set(XP_STORE_KEY, "][")
        ledger = XpLedger(clock, memory_store)
        assert ledger.state.xp == 0
        assert ledger.state.daily_goal == 60

    def test_reset_streak(self, xp_ledger):
        xp_ledger.award_xp(70)
        state = xp_ledger.reset_streak()
        assert state.streak_days == 0
        assert state.daily_xp == 0
        assert state.xp == 70

    def test_clear(self, memory_store, xp_ledger):
        xp_ledger.award_xp(70)
        xp_ledger.clear()
        assert xp_ledger.state.xp == 0
        assert memory_store.get(XP_STORE_KEY) is None


class TestTaskCompletionXp:

    def test_focus_tasks_earn_more(self, sample_task_base):
        assert xp_for_task_completion(Task(**sample_task_base)) == 10
        assert xp_for_task_completion(Task(**{**sample_task_base, "focus_mode": True})) == 20
