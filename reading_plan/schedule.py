"""Reading schedule model and plan style configuration."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .constants import TOTAL_CHAPTERS, BibleReference, default_reference
from .errors import ConfigurationError

STYLE_CHAPTERS_PER_DAY = "chaptersPerDay"
STYLE_TOTAL_DURATION = "totalDuration"
STYLE_CHRONOLOGICAL = "chronological"
STYLE_CUSTOM = "custom"
STYLE_TYPES = (
    STYLE_CHAPTERS_PER_DAY,
    STYLE_TOTAL_DURATION,
    STYLE_CHRONOLOGICAL,
    STYLE_CUSTOM,
)

STATUS_ACTIVE = "active"
STATUS_PAUSED = "paused"
STATUS_COMPLETED = "completed"


@dataclass(frozen=True)
class StyleConfig:
    """Validated view of a schedule's ``style_config`` mapping."""

    style_type: str
    chapters: int | None = None
    duration_months: float | None = None
    duration_years: float | None = None
    start_book_abbrev: str | None = None


def _positive_number(config: dict[str, Any], key: str, integer: bool = False) -> Any:
    value = config.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{key} must be a number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        raise ConfigurationError(f"{key} must be a finite number, got {value!r}")
    if integer and int(value) != value:
        raise ConfigurationError(f"{key} must be a whole number, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got {value!r}")
    return int(value) if integer else value


def parse_style_config(
    style_type: str,
    config: dict[str, Any] | None,
    reference: BibleReference | None = None,
) -> StyleConfig:
    """Validate ``config`` for ``style_type`` or raise ConfigurationError."""
    if not isinstance(config, dict):
        raise ConfigurationError(f"style config must be a mapping, got {config!r}")
    if style_type == STYLE_CHAPTERS_PER_DAY:
        return StyleConfig(style_type, chapters=_positive_number(config, "chapters", integer=True))
    if style_type == STYLE_TOTAL_DURATION:
        return StyleConfig(style_type, duration_months=_positive_number(config, "duration_months"))
    if style_type == STYLE_CHRONOLOGICAL:
        return StyleConfig(style_type, duration_years=_positive_number(config, "duration_years"))
    if style_type == STYLE_CUSTOM:
        chapters = _positive_number(config, "chapters", integer=True)
        abbrev = config.get("start_book_abbrev")
        reference = reference or default_reference()
        if not isinstance(abbrev, str) or reference.by_abbrev(abbrev) is None:
            raise ConfigurationError(f"unknown start book {abbrev!r}")
        return StyleConfig(style_type, chapters=chapters, start_book_abbrev=abbrev.strip().lower())
    raise ConfigurationError(f"unknown style type {style_type!r}")


def progress_percent(chapters_read: int, total_chapters: int) -> float:
    if total_chapters <= 0 or chapters_read <= 0:
        return 0.0
    return min(100.0, chapters_read / total_chapters * 100)


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class ReadingSchedule:
    user_id: str
    style_type: str
    style_config: dict[str, Any]
    start_date: datetime
    id: int | None = None
    status: str = STATUS_ACTIVE
    total_chapters_in_bible: int = TOTAL_CHAPTERS
    completed_chapters: set[str] = field(default_factory=set)
    chapters_read_count: int = 0
    progress_percent: float = 0.0
    last_read_reference: str | None = None
    read_completion_timestamps: list[datetime] = field(default_factory=list)
    revision: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "style_type": self.style_type,
            "style_config": dict(self.style_config),
            "start_date": self.start_date.isoformat(),
            "status": self.status,
            "total_chapters_in_bible": self.total_chapters_in_bible,
            "completed_chapters": sorted(self.completed_chapters),
            "chapters_read_count": self.chapters_read_count,
            "progress_percent": self.progress_percent,
            "last_read_reference": self.last_read_reference,
            "read_completion_timestamps": [
                stamp.isoformat() for stamp in self.read_completion_timestamps
            ],
            "revision": self.revision,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReadingSchedule":
        return cls(
            id=data.get("id"),
            user_id=str(data["user_id"]),
            style_type=data["style_type"],
            style_config=dict(data.get("style_config") or {}),
            start_date=_parse_datetime(data["start_date"]),
            status=data.get("status", STATUS_ACTIVE),
            total_chapters_in_bible=int(data.get("total_chapters_in_bible", TOTAL_CHAPTERS)),
            completed_chapters=set(data.get("completed_chapters") or ()),
            chapters_read_count=int(data.get("chapters_read_count", 0)),
            progress_percent=float(data.get("progress_percent", 0.0)),
            last_read_reference=data.get("last_read_reference"),
            read_completion_timestamps=[
                _parse_datetime(stamp) for stamp in data.get("read_completion_timestamps") or ()
            ],
            revision=int(data.get("revision", 0)),
        )


def new_schedule(
    user_id: str,
    style_type: str,
    style_config: dict[str, Any],
    start_date: datetime | None = None,
    total_chapters: int = TOTAL_CHAPTERS,
) -> ReadingSchedule:
    """A fresh active schedule with all counters at zero."""
    return ReadingSchedule(
        user_id=user_id,
        style_type=style_type,
        style_config=dict(style_config),
        start_date=start_date or datetime.now(),
        total_chapters_in_bible=total_chapters,
    )


@dataclass(frozen=True)
class PlanPreset:
    id: str
    title: str
    description: str
    style_type: str
    style_config: dict[str, Any]


PLAN_PRESETS: tuple[PlanPreset, ...] = (
    PlanPreset(
        "chapters-1", "1 chapter per day", "Read the Bible sequentially.",
        STYLE_CHAPTERS_PER_DAY, {"chapters": 1},
    ),
    PlanPreset(
        "chapters-2", "2 chapters per day", "Move through a little faster.",
        STYLE_CHAPTERS_PER_DAY, {"chapters": 2},
    ),
    PlanPreset(
        "duration-6m", "Read in 6 months", "Intensive sequential plan.",
        STYLE_TOTAL_DURATION, {"duration_months": 6},
    ),
    PlanPreset(
        "duration-1y", "Read in 1 year", "Finish sequentially in a year.",
        STYLE_TOTAL_DURATION, {"duration_months": 12},
    ),
    PlanPreset(
        "duration-2y", "Read in 2 years", "A calmer sequential pace.",
        STYLE_TOTAL_DURATION, {"duration_months": 24},
    ),
    PlanPreset(
        "chronological-1y", "Chronological order", "Read events in the order they happened.",
        STYLE_CHRONOLOGICAL, {"duration_years": 1},
    ),
)


def find_preset(preset_id: str) -> PlanPreset | None:
    for preset in PLAN_PRESETS:
        if preset.id == preset_id:
            return preset
    return None
