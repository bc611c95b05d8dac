from __future__ import annotations

from datetime import datetime

import pytest

from reading_plan.db import ScheduleStore
from reading_plan.orders import ChapterOrders, default_orders
from reading_plan.schedule import STYLE_CHAPTERS_PER_DAY, ReadingSchedule, new_schedule

NOW = datetime(2024, 3, 10, 8, 30)


@pytest.fixture
def orders() -> ChapterOrders:
    return default_orders()


@pytest.fixture
def make_schedule():
    def factory(
        style_type: str = STYLE_CHAPTERS_PER_DAY,
        style_config: dict | None = None,
        **fields,
    ) -> ReadingSchedule:
        schedule = new_schedule(
            "user-1",
            style_type,
            style_config if style_config is not None else {"chapters": 2},
            start_date=fields.pop("start_date", NOW),
        )
        schedule.id = fields.pop("id", 1)
        for name, value in fields.items():
            setattr(schedule, name, value)
        return schedule

    return factory


@pytest.fixture
def store(tmp_path):
    schedule_store = ScheduleStore(tmp_path / "schedules.sqlite")
    yield schedule_store
    schedule_store.close()


class Clock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()
