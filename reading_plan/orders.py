"""Chapter orderings for each plan style."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Iterable

from .chronology import build_chronological_order, load_readings
from .constants import BibleReference, chapter_key, default_reference
from .errors import ConfigurationError
from .schedule import (
    STYLE_CHAPTERS_PER_DAY,
    STYLE_CHRONOLOGICAL,
    STYLE_CUSTOM,
    STYLE_TOTAL_DURATION,
)

logger = logging.getLogger(__name__)


class ChapterOrders:
    """Builds sequential, chronological and custom-rotated chapter orders.

    Orders are tuples of canonical keys and are computed once per instance.
    """

    def __init__(
        self,
        reference: BibleReference | None = None,
        chronological_readings: Iterable[str] | None = None,
    ) -> None:
        self.reference = reference or default_reference()
        self._readings = list(chronological_readings) if chronological_readings is not None else None
        self._sequential: tuple[str, ...] | None = None
        self._chronological: tuple[str, ...] | None = None

    @property
    def sequential(self) -> tuple[str, ...]:
        if self._sequential is None:
            self._sequential = self.reference.sequential_keys()
        return self._sequential

    @property
    def chronological(self) -> tuple[str, ...]:
        if self._chronological is None:
            readings = self._readings if self._readings is not None else load_readings()
            self._chronological = build_chronological_order(readings, self.reference)
            logger.debug("Chronological order has %d chapters", len(self._chronological))
        return self._chronological

    def custom(self, start_book_abbrev: str) -> tuple[str, ...]:
        """Sequential order rotated to begin at the first chapter of a book."""
        if not isinstance(start_book_abbrev, str):
            raise ConfigurationError(f"unknown start book {start_book_abbrev!r}")
        start_key = chapter_key(start_book_abbrev.strip().lower(), 1)
        index = self.index_of(self.sequential, start_key)
        if index is None:
            raise ConfigurationError(f"unknown start book {start_book_abbrev!r}")
        return self.sequential[index:] + self.sequential[:index]

    def order_for(self, style_type: str, style_config: dict[str, Any] | None) -> tuple[str, ...]:
        if style_type == STYLE_CHRONOLOGICAL:
            return self.chronological
        if style_type == STYLE_CUSTOM:
            config = style_config if isinstance(style_config, dict) else {}
            return self.custom(config.get("start_book_abbrev"))
        if style_type in (STYLE_CHAPTERS_PER_DAY, STYLE_TOTAL_DURATION):
            return self.sequential
        raise ConfigurationError(f"unknown style type {style_type!r}")

    def completion_length(self, style_type: str) -> int:
        """Number of chapters a plan of this style must cover to be complete."""
        if style_type == STYLE_CHRONOLOGICAL:
            return len(self.chronological)
        return len(self.sequential)

    def index_of(self, order: tuple[str, ...], key: str | None) -> int | None:
        if key is None:
            return None
        try:
            return order.index(key)
        except ValueError:
            return None


@lru_cache(maxsize=1)
def default_orders() -> ChapterOrders:
    return ChapterOrders(default_reference())
