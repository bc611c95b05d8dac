"""Marking chapters as read and reverting the most recent batch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Sequence

from .errors import ConfigurationError, PreconditionFailed
from .orders import ChapterOrders, default_orders
from .parser import Standardized, standardize
from .schedule import STATUS_COMPLETED, ReadingSchedule, progress_percent
from .streak import record_reading_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkResult:
    schedule: ReadingSchedule
    updated_fields: dict[str, Any] = field(default_factory=dict)
    applied_count: int = 0
    skipped: tuple[Standardized, ...] = ()

    @property
    def no_op(self) -> bool:
        return not self.updated_fields

    @property
    def completed(self) -> bool:
        return self.updated_fields.get("status") == STATUS_COMPLETED


@dataclass(frozen=True)
class RevertResult:
    schedule: ReadingSchedule | None
    updated_fields: dict[str, Any] = field(default_factory=dict)
    reverted_count: int = 0

    @property
    def no_op(self) -> bool:
        return not self.updated_fields


def mark_read(
    schedule: ReadingSchedule | None,
    raw_batch: Sequence[str],
    now: datetime | None = None,
    orders: ChapterOrders | None = None,
) -> MarkResult:
    """Apply a batch of raw references to ``schedule``.

    Returns the updated schedule together with the fields that changed. The
    input schedule is left untouched; persisting ``updated_fields`` is up to
    the caller. A batch that adds no new chapter yields an empty update.
    """
    if schedule is None:
        raise PreconditionFailed("no reading schedule to update")
    orders = orders or default_orders()
    now = now or datetime.now()

    completed = set(schedule.completed_chapters)
    added = 0
    skipped: list[Standardized] = []
    last_key: str | None = None
    for raw in raw_batch:
        result = standardize(raw, orders.reference)
        if not result.ok:
            logger.warning("Skipping reference %r: %s", raw, result.reason)
            skipped.append(result)
            continue
        if result.key not in completed:
            completed.add(result.key)
            added += 1
        last_key = result.key

    if not added:
        logger.debug("Batch %r added no new chapters to schedule %s", list(raw_batch), schedule.id)
        return MarkResult(schedule=schedule, skipped=tuple(skipped))

    count = schedule.chapters_read_count + added
    fields: dict[str, Any] = {
        "completed_chapters": completed,
        "chapters_read_count": count,
        "progress_percent": progress_percent(count, schedule.total_chapters_in_bible),
        "last_read_reference": last_key,
        "read_completion_timestamps": record_reading_day(
            schedule.read_completion_timestamps, now
        ),
    }
    required = orders.completion_length(schedule.style_type)
    if len(completed) >= required:
        fields["status"] = STATUS_COMPLETED
        logger.info("Schedule %s completed with %d chapters", schedule.id, len(completed))
    elif fields["progress_percent"] >= 100:
        logger.info(
            "Schedule %s at 100%% but only %d/%d chapters marked",
            schedule.id,
            len(completed),
            required,
        )
    return MarkResult(
        schedule=replace(schedule, **fields),
        updated_fields=fields,
        applied_count=added,
        skipped=tuple(skipped),
    )


def revert(
    schedule: ReadingSchedule | None,
    last_marked_batch: Sequence[str] | None,
    orders: ChapterOrders | None = None,
) -> RevertResult:
    """Undo the batch most recently passed to :func:`mark_read`.

    The chapter count drops by the raw batch length, even when some of its
    references were skipped or already read when the batch was marked.
    References are canonicalized before they are removed from the completed
    set; ones that do not standardize are removed verbatim.
    """
    if not last_marked_batch:
        return RevertResult(schedule=schedule)
    if schedule is None:
        raise PreconditionFailed("no reading schedule to revert")
    if schedule.status == STATUS_COMPLETED:
        raise PreconditionFailed("completed schedules cannot be reverted")
    orders = orders or default_orders()

    count = max(0, schedule.chapters_read_count - len(last_marked_batch))
    try:
        order = orders.order_for(schedule.style_type, schedule.style_config)
    except ConfigurationError as exc:
        logger.warning("Reverting schedule %s against sequential order: %s", schedule.id, exc)
        order = orders.sequential

    keys = []
    for raw in last_marked_batch:
        result = standardize(raw, orders.reference)
        keys.append(result.key if result.ok else raw)

    index = orders.index_of(order, keys[0])
    # index 0 wraps to the last chapter of the order
    previous = order[index - 1] if index is not None else None

    completed = set(schedule.completed_chapters)
    for key in keys:
        completed.discard(key)

    fields: dict[str, Any] = {
        "completed_chapters": completed,
        "chapters_read_count": count,
        "progress_percent": progress_percent(count, schedule.total_chapters_in_bible),
        "last_read_reference": previous,
    }
    return RevertResult(
        schedule=replace(schedule, **fields),
        updated_fields=fields,
        reverted_count=len(last_marked_batch),
    )
