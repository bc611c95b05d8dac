"""Reading-day streaks and pace status for a schedule."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Sequence

from .errors import ConfigurationError
from .orders import ChapterOrders, default_orders
from .schedule import (
    STATUS_COMPLETED,
    STATUS_PAUSED,
    STYLE_CHAPTERS_PER_DAY,
    STYLE_CHRONOLOGICAL,
    STYLE_CUSTOM,
    STYLE_TOTAL_DURATION,
    ReadingSchedule,
    parse_style_config,
)

AVERAGE_DAYS_PER_MONTH = 30.4375
AVERAGE_DAYS_PER_YEAR = 365.25


def read_today(timestamps: Sequence[datetime] | None, today: date | None = None) -> bool:
    """True when the most recent timestamp falls on today's local date."""
    if not timestamps:
        return False
    today = today or date.today()
    return timestamps[-1].date() == today


def record_reading_day(timestamps: Sequence[datetime] | None, now: datetime) -> list[datetime]:
    """Copy of ``timestamps`` with ``now`` appended unless today is already recorded."""
    updated = list(timestamps or ())
    if not read_today(updated, now.date()):
        updated.append(now)
    return updated


def streak_length(timestamps: Sequence[datetime] | None, today: date | None = None) -> int:
    """Consecutive reading days ending today, or yesterday if today has no reading."""
    if not timestamps:
        return 0
    today = today or date.today()
    days = {stamp.date() for stamp in timestamps}
    if today in days:
        current = today
    elif today - timedelta(days=1) in days:
        current = today - timedelta(days=1)
    else:
        return 0
    streak = 0
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak


def elapsed_days(start: date, today: date) -> int:
    """Plan day number for ``today``; the start day is day 1, future starts are 0."""
    if today < start:
        return 0
    return (today - start).days + 1


@dataclass(frozen=True)
class PaceStatus:
    status: str
    days_difference: int = 0


def chapters_per_day(schedule: ReadingSchedule, orders: ChapterOrders) -> float:
    """Expected daily rate for pace tracking; 0.0 when the config is unusable."""
    try:
        config = parse_style_config(schedule.style_type, schedule.style_config, orders.reference)
    except ConfigurationError:
        return 0.0
    if config.style_type in (STYLE_CHAPTERS_PER_DAY, STYLE_CUSTOM):
        return float(config.chapters)
    if config.style_type == STYLE_TOTAL_DURATION:
        return schedule.total_chapters_in_bible / (config.duration_months * AVERAGE_DAYS_PER_MONTH)
    if config.style_type == STYLE_CHRONOLOGICAL:
        return len(orders.chronological) / (config.duration_years * AVERAGE_DAYS_PER_YEAR)
    return 0.0


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def schedule_status(
    schedule: ReadingSchedule,
    today: date | None = None,
    orders: ChapterOrders | None = None,
) -> PaceStatus:
    """Whether the reader is ahead of, behind or on track with the plan's pace."""
    if schedule.status == STATUS_COMPLETED:
        return PaceStatus("completed")
    if schedule.status == STATUS_PAUSED:
        return PaceStatus("paused")
    today = today or date.today()
    days = elapsed_days(schedule.start_date.date(), today)
    if days <= 0:
        return PaceStatus("starting")
    rate = chapters_per_day(schedule, orders or default_orders())
    if rate <= 0:
        return PaceStatus("error")
    target = math.ceil(rate * days)
    difference = schedule.chapters_read_count - target
    days_difference = round_half_up(difference / rate) if difference else 0
    if difference > rate / 2:
        return PaceStatus("ahead", days_difference)
    if difference < -rate / 2:
        return PaceStatus("behind", days_difference)
    return PaceStatus("on_track", days_difference)
