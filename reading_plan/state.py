"""Local settings and undo session for the reading plan tracker."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigurationError


def app_data_dir() -> Path:
    if "READING_PLAN_HOME" in os.environ:
        return Path(os.environ["READING_PLAN_HOME"])
    appdata = Path.home() / ".reading_plan"
    if "APPDATA" in os.environ:
        appdata = Path(os.environ["APPDATA"]) / "ReadingPlan"
    return appdata


@dataclass
class AppState:
    user_id: str = "local"
    db_path: str | None = None
    last_marked_batch: list[str] = field(default_factory=list)
    last_marked_schedule_id: int | None = None
    last_marked_revision: int | None = None

    def clear_undo(self) -> None:
        self.last_marked_batch = []
        self.last_marked_schedule_id = None
        self.last_marked_revision = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "db_path": self.db_path,
            "undo": {
                "batch": list(self.last_marked_batch),
                "schedule_id": self.last_marked_schedule_id,
                "revision": self.last_marked_revision,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppState":
        undo = data.get("undo") or {}
        return cls(
            user_id=str(data.get("user_id") or "local"),
            db_path=data.get("db_path"),
            last_marked_batch=[str(item) for item in undo.get("batch") or ()],
            last_marked_schedule_id=undo.get("schedule_id"),
            last_marked_revision=undo.get("revision"),
        )


class StateStore:
    """Loads and saves ``settings.json`` in the app data directory."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir = Path(base_dir) if base_dir else app_data_dir()
        self.state_path = self.base_dir / "settings.json"

    def db_path(self, state: AppState, override: str | None = None) -> Path:
        """Schedule database for this run: ``override``, the saved path, or the default."""
        if override or state.db_path:
            path = Path(override or state.db_path)
        else:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            path = self.base_dir / "schedules.sqlite"
        state.db_path = str(path)
        return path

    def load(self) -> AppState:
        try:
            text = self.state_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return AppState()
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{self.state_path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.state_path} must hold a JSON object")
        return AppState.from_dict(data)

    def save(self, state: AppState) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        partial = self.state_path.with_name(self.state_path.name + ".tmp")
        partial.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")
        partial.replace(self.state_path)
