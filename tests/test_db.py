from __future__ import annotations

from datetime import datetime

import pytest

from reading_plan.db import ScheduleStore
from reading_plan.errors import PersistenceError
from reading_plan.schedule import (
    STATUS_ACTIVE,
    STATUS_COMPLETED,
    STATUS_PAUSED,
    STYLE_CHAPTERS_PER_DAY,
    STYLE_CUSTOM,
)

from .conftest import NOW


def test_create_and_load_schedule(store):
    schedule_id = store.create_schedule(
        "user-1", STYLE_CUSTOM, {"chapters": 3, "start_book_abbrev": "mt"}, start_date=NOW
    )
    schedule = store.get_active_or_paused_schedule("user-1")
    assert schedule.id == schedule_id
    assert schedule.style_type == STYLE_CUSTOM
    assert schedule.style_config == {"chapters": 3, "start_book_abbrev": "mt"}
    assert schedule.start_date == NOW
    assert schedule.status == STATUS_ACTIVE
    assert schedule.total_chapters_in_bible == 1189
    assert schedule.completed_chapters == set()
    assert schedule.chapters_read_count == 0
    assert schedule.last_read_reference is None
    assert schedule.read_completion_timestamps == []
    assert schedule.revision == 0


def test_atomic_update_round_trips_and_bumps_revision(store):
    schedule_id = store.create_schedule("user-1", STYLE_CHAPTERS_PER_DAY, {"chapters": 2}, start_date=NOW)
    later = datetime(2024, 3, 11, 7, 15)
    revision = store.apply_atomic_update(
        schedule_id,
        {
            "completed_chapters": {"gn-2", "gn-1"},
            "chapters_read_count": 2,
            "progress_percent": 0.5,
            "last_read_reference": "gn-2",
            "read_completion_timestamps": [NOW, later],
        },
    )
    assert revision == 1
    schedule = store.get_active_or_paused_schedule("user-1")
    assert schedule.completed_chapters == {"gn-1", "gn-2"}
    assert schedule.chapters_read_count == 2
    assert schedule.progress_percent == 0.5
    assert schedule.last_read_reference == "gn-2"
    assert schedule.read_completion_timestamps == [NOW, later]
    assert schedule.revision == 1


def test_update_rejects_unknown_fields_and_missing_rows(store):
    schedule_id = store.create_schedule("user-1", STYLE_CHAPTERS_PER_DAY, {"chapters": 1}, start_date=NOW)
    with pytest.raises(PersistenceError):
        store.apply_atomic_update(schedule_id, {"user_id": "someone-else"})
    with pytest.raises(PersistenceError):
        store.apply_atomic_update(schedule_id + 1, {"chapters_read_count": 1})
    assert store.get_active_or_paused_schedule("user-1").revision == 0


def test_pause_resume_and_delete(store):
    schedule_id = store.create_schedule("user-1", STYLE_CHAPTERS_PER_DAY, {"chapters": 1}, start_date=NOW)
    store.pause(schedule_id)
    assert store.get_active_or_paused_schedule("user-1").status == STATUS_PAUSED
    store.resume(schedule_id)
    assert store.get_active_or_paused_schedule("user-1").status == STATUS_ACTIVE
    store.delete_schedule(schedule_id)
    assert store.get_active_or_paused_schedule("user-1") is None
    with pytest.raises(PersistenceError):
        store.delete_schedule(schedule_id)


def test_active_query_skips_completed_plans_and_other_users(store):
    done = store.create_schedule("user-1", STYLE_CHAPTERS_PER_DAY, {"chapters": 1}, start_date=NOW)
    store.apply_atomic_update(done, {"status": STATUS_COMPLETED})
    store.create_schedule("user-2", STYLE_CHAPTERS_PER_DAY, {"chapters": 1}, start_date=NOW)
    assert store.get_active_or_paused_schedule("user-1") is None
    current = store.create_schedule("user-1", STYLE_CHAPTERS_PER_DAY, {"chapters": 2}, start_date=NOW)
    assert store.get_active_or_paused_schedule("user-1").id == current


def test_store_reopens_existing_database(tmp_path):
    path = tmp_path / "plans.sqlite"
    first = ScheduleStore(path)
    schedule_id = first.create_schedule("user-1", STYLE_CHAPTERS_PER_DAY, {"chapters": 1}, start_date=NOW)
    first.close()
    second = ScheduleStore(path)
    assert second.get_active_or_paused_schedule("user-1").id == schedule_id
    second.close()


def test_unopenable_database_raises_persistence_error(tmp_path):
    with pytest.raises(PersistenceError):
        ScheduleStore(tmp_path / "missing" / "plans.sqlite")
