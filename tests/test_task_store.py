"""Tests for the persisted task collection."""

import pytest
import threading
from datetime import date, datetime, timedelta

from araise.models.constants import TASKS_STORE_KEY
from araise.models.task import CycleSpec, RepeatFrequency, TaskCategory
from araise.services.task_store import TaskStore

MONDAY = date(2024, 1, 1)


def _block(hour, length=60):
    start = datetime(2024, 1, 1, hour, 0)
    return {"start_at": start, "end_at": start + timedelta(minutes=length)}


class TestAddTask:

    def test_defaults(self, task_store):
        task = task_store.add_task("Write report")
        assert task.date == MONDAY
        assert task.category == TaskCategory.WORK
        assert task.planned_minutes == 25
        assert task.completed_minutes == 0
        assert task.done is False

    def test_new_tasks_go_to_front(self, task_store):
        first = task_store.add_task("first")
        second = task_store.add_task("second")
        assert [t.id for t in task_store.tasks] == [second.id, first.id]

    def test_order_counts_only_unscheduled_tasks_on_same_day(self, task_store):
        assert task_store.add_task("a").order == 0
        assert task_store.add_task("b").order == 1
        task_store.add_task("block", **_block(10))
        task_store.add_task("tomorrow", task_date=MONDAY + timedelta(days=1))
        assert task_store.add_task("c").order == 2

    def test_planned_minutes_from_cycles(self, task_store):
        assert task_store.add_task("x", focus_duration=30, cycles=3).planned_minutes == 90
        custom = [CycleSpec(focus=50, break_=10), CycleSpec(focus=20, break_=0)]
        assert task_store.add_task("y", custom_cycles=custom).planned_minutes == 70

    def test_blank_title_rejected(self, task_store):
        with pytest.raises(ValueError):
            task_store.add_task("   ")
        assert task_store.tasks == []


class TestToggle:

    def test_completion_awards_xp(self, task_store, xp_ledger):
        task = task_store.add_task("plain")
        assert task_store.toggle_task(task.id).done is True
        assert xp_ledger.state.xp == 10

    def test_focus_task_awards_more(self, task_store, xp_ledger):
        task = task_store.add_task("deep", focus_mode=True)
        task_store.toggle_task(task.id)
        assert xp_ledger.state.xp == 20

    def test_uncompleting_keeps_xp(self, task_store, xp_ledger):
        task = task_store.add_task("plain")
        task_store.toggle_task(task.id)
        assert task_store.toggle_task(task.id).done is False
        assert xp_ledger.state.xp == 10
        task_store.toggle_task(task.id)
        assert xp_ledger.state.xp == 20

    def test_without_ledger(self, clock, memory_store):
        store = TaskStore(clock, memory_store)
        task = store.add_task("plain")
        assert store.toggle_task(task.id).done is True

    def test_missing_task(self, task_store):
        with pytest.raises(ValueError, match="not found"):
            task_store.toggle_task("nope")


class TestRepeatingTasks:

    def test_delete_occurrence_hides_only_that_day(self, task_store):
        task = task_store.add_task("stretch", repeat=RepeatFrequency.DAILY)
        hidden = MONDAY + timedelta(days=2)
        task_store.delete_occurrence(task.id, hidden)

        assert task_store.occurrences_for_date(hidden) == []
        assert len(task_store.occurrences_for_date(hidden + timedelta(days=1))) == 1
        assert len(task_store.occurrences_for_date(hidden - timedelta(days=1))) == 1
        assert task_store.get(task.id).exceptions == [hidden]

    def test_delete_occurrence_twice_keeps_one_exception(self, task_store):
        task = task_store.add_task("stretch", repeat=RepeatFrequency.DAILY)
        task_store.delete_occurrence(task.id, MONDAY)
        task_store.delete_occurrence(task.id, MONDAY)
        assert task_store.get(task.id).exceptions == [MONDAY]

    def test_delete_series(self, task_store):
        task = task_store.add_task("review", repeat=RepeatFrequency.WEEKLY)
        task_store.delete_series(task.id)
        assert task_store.occurrences_for_date(MONDAY + timedelta(days=7)) == []
        assert task_store.get(task.id) is None

    def test_series_toggle_applies_to_every_occurrence(self, task_store):
        task = task_store.add_task("stretch", repeat=RepeatFrequency.DAILY)
        task_store.toggle_task(task.id)
        [later] = task_store.occurrences_for_date(MONDAY + timedelta(days=4))
        assert later.done is True

    def test_range(self, task_store):
        task_store.add_task("stretch", repeat=RepeatFrequency.DAILY)
        task_store.add_task("one-off", task_date=MONDAY + timedelta(days=1))
        days = task_store.occurrences_in_range(MONDAY, MONDAY + timedelta(days=2))
        assert [len(days[d]) for d in sorted(days)] == [1, 2, 1]


class TestUpdate:

    def test_update_recomputes_planned_minutes(self, task_store):
        task = task_store.add_task("x")
        updated = task_store.update_task(task.id, {"focus_duration": 40, "cycles": 2})
        assert updated.planned_minutes == 80
        assert updated.id == task.id

    def test_update_keeps_custom_cycles(self, task_store):
        task = task_store.add_task("x", custom_cycles=[CycleSpec(focus=15, break_=5)])
        updated = task_store.update_task(task.id, {"title": "renamed"})
        assert updated.title == "renamed"
        assert updated.custom_cycles == [CycleSpec(focus=15, break_=5)]

    def test_invalid_update_leaves_task_untouched(self, task_store):
        task = task_store.add_task("x")
        with pytest.raises(ValueError):
            task_store.update_task(task.id, {"start_at": datetime(2024, 1, 1, 9)})
        assert task_store.get(task.id) == task


class TestReorder:

    def test_swaps_order_keys(self, task_store):
        a = task_store.add_task("a")
        b = task_store.add_task("b")
        assert task_store.reorder_unscheduled(MONDAY, a.id, b.id) is True
        assert [t.title for t in task_store.occurrences_for_date(MONDAY)] == ["b", "a"]

    def test_refuses_scheduled_or_other_day(self, task_store):
        a = task_store.add_task("a")
        block = task_store.add_task("block", **_block(9))
        other = task_store.add_task("other", task_date=MONDAY + timedelta(days=1))
        assert task_store.reorder_unscheduled(MONDAY, a.id, block.id) is False
        assert task_store.reorder_unscheduled(MONDAY, a.id, other.id) is False
        assert task_store.reorder_unscheduled(MONDAY, a.id, "missing") is False


class TestDayView:

    def test_sorted_scheduled_first(self, task_store):
        task_store.add_task("loose")
        task_store.add_task("late", **_block(15))
        task_store.add_task("early", **_block(8))
        assert [t.title for t in task_store.occurrences_for_date(MONDAY)] == ["early", "late", "loose"]


class TestBlocks:

    def test_shift(self, task_store):
        task = task_store.add_task("block", **_block(9))
        shifted = task_store.shift_task(task.id, 30)
        assert shifted.start_at == datetime(2024, 1, 1, 9, 30)
        assert shifted.end_at == datetime(2024, 1, 1, 10, 30)

    def test_resize_keeps_minimum_block(self, task_store):
        task = task_store.add_task("block", **_block(9))
        assert task_store.resize_task(task.id, 15).end_at == datetime(2024, 1, 1, 10, 15)
        assert task_store.resize_task(task.id, -600).end_at == datetime(2024, 1, 1, 9, 5)

    def test_unscheduled_tasks_are_not_moved(self, task_store):
        task = task_store.add_task("loose")
        assert task_store.shift_task(task.id, 30) == task


class TestFocusMinutesAndCleanup:

    def test_record_focus_minutes_accumulates(self, task_store):
        task = task_store.add_task("x")
        task_store.record_focus_minutes(task.id, 10)
        assert task_store.record_focus_minutes(task.id, 5).completed_minutes == 15

    def test_clear_done(self, task_store):
        a = task_store.add_task("a")
        task_store.add_task("b")
        task_store.toggle_task(a.id)
        assert task_store.clear_done() == 1
        assert [t.title for t in task_store.tasks] == ["b"]


class TestConcurrentUpdates:

    def test_credit_from_another_thread_does_not_lose_toggles(self, clock, memory_store):
        store = TaskStore(clock, memory_store)
        task = store.add_task("Essay")
        rounds = 300

        def credit():
            for _ in range(rounds):
                store.record_focus_minutes(task.id, 1)

        worker = threading.Thread(target=credit)
        worker.start()
        for _ in range(rounds + 1):
            store.toggle_task(task.id)
        worker.join()

        final = store.get(task.id)
        assert final.completed_minutes == rounds
        assert final.done is True
        assert TaskStore(clock, memory_store).get(task.id) == final


class TestPersistence:

    def test_round_trip(self, clock, memory_store, task_store):
        task_store.add_task(
            "deep",
            focus_mode=True,
            custom_cycles=[CycleSpec(focus=50, break_=10)],
            repeat=RepeatFrequency.WEEKLY,
            repeat_until=MONDAY + timedelta(days=28),
            **_block(10),
        )
        assert '"break":10' in memory_store.get(TASKS_STORE_KEY)

        reloaded = TaskStore(clock, memory_store)
        assert reloaded.tasks == task_store.tasks

    def test_unreadable_blob_starts_empty(self, clock, memory_store):
        memory_store.set(TASKS_STORE_KEY, "not json")
        assert TaskStore(clock, memory_store).tasks == []
