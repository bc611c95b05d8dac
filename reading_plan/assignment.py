"""Next-assignment calculation for an active reading schedule."""

from __future__ import annotations

import logging
import math
from typing import Collection, Sequence

from .errors import ConfigurationError
from .orders import ChapterOrders, default_orders
from .schedule import (
    STYLE_CHAPTERS_PER_DAY,
    STYLE_CHRONOLOGICAL,
    STYLE_CUSTOM,
    STYLE_TOTAL_DURATION,
    ReadingSchedule,
    parse_style_config,
)

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30.4
DAYS_PER_PLAN_YEAR = 364
SCAN_LIMIT_FACTOR = 2


def needed_chapters(
    schedule: ReadingSchedule, order: Sequence[str], orders: ChapterOrders
) -> int:
    """Chapters expected per reading session; raises ConfigurationError."""
    config = parse_style_config(schedule.style_type, schedule.style_config, orders.reference)
    if config.style_type in (STYLE_CHAPTERS_PER_DAY, STYLE_CUSTOM):
        return config.chapters
    if config.style_type == STYLE_TOTAL_DURATION:
        per_day = schedule.total_chapters_in_bible / (config.duration_months * DAYS_PER_MONTH)
        return max(1, math.ceil(per_day))
    if config.style_type == STYLE_CHRONOLOGICAL:
        per_day = len(order) / (config.duration_years * DAYS_PER_PLAN_YEAR)
        return max(1, math.ceil(per_day))
    raise ConfigurationError(f"unknown style type {schedule.style_type!r}")


def plan_for(
    schedule: ReadingSchedule, orders: ChapterOrders
) -> tuple[tuple[str, ...], int]:
    """Return (order, needed), falling back to (sequential, 1) on bad config."""
    try:
        order = orders.order_for(schedule.style_type, schedule.style_config)
        needed = needed_chapters(schedule, order, orders)
    except ConfigurationError as exc:
        logger.warning(
            "Schedule %s has unusable configuration (%s); using sequential order",
            schedule.id,
            exc,
        )
        return orders.sequential, 1
    return order, needed


def start_index(order: Sequence[str], last_read: str | None) -> int:
    """Index after ``last_read`` in ``order``, wrapping to 0; 0 if not found."""
    if not order or last_read is None:
        return 0
    try:
        index = list(order).index(last_read)
    except ValueError:
        return 0
    return (index + 1) % len(order)


def collect_unread(
    order: Sequence[str],
    completed: Collection[str],
    start: int,
    needed: int,
    limit: int | None = None,
) -> list[str]:
    """Walk ``order`` from ``start`` with wrap-around, picking unread chapters.

    Stops after ``needed`` chapters or after ``limit`` inspected candidates
    (``2 * len(order)`` by default), whichever comes first.
    """
    if not order or needed <= 0:
        return []
    if limit is None:
        limit = SCAN_LIMIT_FACTOR * len(order)
    picked: list[str] = []
    seen: set[str] = set()
    inspected = 0
    while len(picked) < needed and inspected < limit:
        key = order[(start + inspected) % len(order)]
        inspected += 1
        if key not in completed and key not in seen:
            picked.append(key)
            seen.add(key)
    if inspected >= limit and len(picked) < needed:
        logger.warning(
            "Stopped after inspecting %d chapters with %d of %d collected",
            inspected,
            len(picked),
            needed,
        )
    return picked


def next_assignment(
    schedule: ReadingSchedule | None, orders: ChapterOrders | None = None
) -> list[str]:
    """Next batch of unread chapter keys, or [] when there is no active plan."""
    if schedule is None or not schedule.is_active:
        return []
    orders = orders or default_orders()
    order, needed = plan_for(schedule, orders)
    start = start_index(order, schedule.last_read_reference)
    return collect_unread(order, schedule.completed_chapters, start, needed)
