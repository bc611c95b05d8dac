"""Reading session: the current schedule, its assignment and one level of undo."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Sequence

from .assignment import next_assignment
from .db import ScheduleStore
from .errors import PreconditionFailed
from .orders import ChapterOrders, default_orders
from .progress import MarkResult, RevertResult, mark_read, revert
from .schedule import (
    STATUS_ACTIVE,
    STATUS_COMPLETED,
    STATUS_PAUSED,
    ReadingSchedule,
    parse_style_config,
)
from .streak import PaceStatus, read_today, schedule_status, streak_length

logger = logging.getLogger(__name__)


class ReadingTracker:
    """Glue between the schedule store and the assignment/progress engine.

    Holds the latest schedule snapshot for one user, the assignment derived
    from it and the last marked batch. Any snapshot that differs from the one
    held (another schedule, or a newer revision) drops the undo batch.
    """

    def __init__(
        self,
        store: ScheduleStore,
        user_id: str,
        orders: ChapterOrders | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if not user_id:
            raise PreconditionFailed("a user id is required")
        self.store = store
        self.user_id = user_id
        self.orders = orders or default_orders()
        self.clock = clock
        self.schedule: ReadingSchedule | None = None
        self.assignment: list[str] = []
        self.last_marked_batch: list[str] | None = None
        self.refresh()

    def refresh(self) -> ReadingSchedule | None:
        """Reload the active or paused schedule from the store."""
        self._accept(self.store.get_active_or_paused_schedule(self.user_id))
        return self.schedule

    def _accept(self, snapshot: ReadingSchedule | None) -> None:
        current = self.schedule
        if current is None or snapshot is None or (
            (current.id, current.revision) != (snapshot.id, snapshot.revision)
        ):
            self.last_marked_batch = None
        self.schedule = snapshot
        self.assignment = next_assignment(snapshot, self.orders)

    def _require_schedule(self) -> ReadingSchedule:
        if self.schedule is None or self.schedule.id is None:
            raise PreconditionFailed(f"user {self.user_id} has no reading plan")
        return self.schedule

    @property
    def can_undo(self) -> bool:
        return bool(self.last_marked_batch) and self.schedule is not None and (
            self.schedule.status == STATUS_ACTIVE
        )

    def restore_undo(self, batch: Sequence[str], schedule_id: int | None, revision: int | None) -> bool:
        """Reinstate a saved undo batch if it belongs to the current snapshot."""
        schedule = self.schedule
        if not batch or schedule is None:
            return False
        if (schedule.id, schedule.revision) != (schedule_id, revision):
            logger.debug("Discarding undo batch for schedule %s rev %s", schedule_id, revision)
            return False
        self.last_marked_batch = list(batch)
        return True

    def start_plan(
        self,
        style_type: str,
        style_config: dict[str, Any],
        start_date: datetime | None = None,
    ) -> ReadingSchedule:
        if self.refresh() is not None:
            raise PreconditionFailed(f"user {self.user_id} already has an active or paused plan")
        parse_style_config(style_type, style_config, self.orders.reference)
        schedule_id = self.store.create_schedule(
            self.user_id,
            style_type,
            style_config,
            start_date or self.clock(),
            self.orders.reference.total_chapters,
        )
        logger.info("Created %s schedule %s for %s", style_type, schedule_id, self.user_id)
        return self.refresh()

    def mark_read(self, batch: Sequence[str] | None = None) -> MarkResult:
        """Mark ``batch`` (the current assignment by default) as read."""
        schedule = self._require_schedule()
        batch = list(batch) if batch is not None else list(self.assignment)
        result = mark_read(schedule, batch, now=self.clock(), orders=self.orders)
        if result.no_op:
            return result
        revision = self.store.apply_atomic_update(schedule.id, result.updated_fields)
        updated = replace(result.schedule, revision=revision)
        self.schedule = updated
        self.assignment = next_assignment(updated, self.orders)
        self.last_marked_batch = None if updated.status == STATUS_COMPLETED else batch
        return replace(result, schedule=updated)

    def undo(self) -> RevertResult:
        """Revert the last marked batch; a no-op when there is none."""
        if not self.last_marked_batch:
            return RevertResult(schedule=self.schedule)
        schedule = self._require_schedule()
        result = revert(schedule, self.last_marked_batch, orders=self.orders)
        revision = self.store.apply_atomic_update(schedule.id, result.updated_fields)
        updated = replace(result.schedule, revision=revision)
        self.schedule = updated
        self.assignment = next_assignment(updated, self.orders)
        self.last_marked_batch = None
        return replace(result, schedule=updated)

    def pause(self) -> ReadingSchedule | None:
        schedule = self._require_schedule()
        if schedule.status != STATUS_ACTIVE:
            raise PreconditionFailed(f"schedule {schedule.id} is {schedule.status}, not active")
        self.store.pause(schedule.id)
        return self.refresh()

    def resume(self) -> ReadingSchedule | None:
        schedule = self._require_schedule()
        if schedule.status != STATUS_PAUSED:
            raise PreconditionFailed(f"schedule {schedule.id} is {schedule.status}, not paused")
        self.store.resume(schedule.id)
        return self.refresh()

    def delete(self) -> None:
        schedule = self._require_schedule()
        self.store.delete_schedule(schedule.id)
        logger.info("Deleted schedule %s for %s", schedule.id, self.user_id)
        self._accept(None)

    def read_today(self) -> bool:
        return self.schedule is not None and read_today(
            self.schedule.read_completion_timestamps, self.clock().date()
        )

    def streak(self) -> int:
        if self.schedule is None:
            return 0
        return streak_length(self.schedule.read_completion_timestamps, self.clock().date())

    def pace(self) -> PaceStatus:
        if self.schedule is None:
            return PaceStatus("none")
        return schedule_status(self.schedule, self.clock().date(), self.orders)
