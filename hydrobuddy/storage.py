"""JSON file storage for settings and daily statistics."""

from __future__ import annotations

import json
from datetime import date, timedelta
from pathlib import Path

from platformdirs import user_data_dir

from hydrobuddy.models import AppState, DailyStats, UserSettings

APP_DIR_NAME = "water-reminder"
SETTINGS_FILE = "settings.json"
HISTORY_DAYS = 6


def default_data_dir() -> Path:
    """Per-user data directory for the application."""
    return Path(user_data_dir()) / APP_DIR_NAME


def _stats_filename(day: date) -> str:
    return f"stats_{day.strftime('%Y-%m-%d')}.json"


class DataManager:
    """Loads and saves application state as JSON files in one directory."""

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.data_dir = Path(data_dir) if data_dir is not None else default_data_dir()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _read_json(self, path: Path) -> object | None:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None

    def _write_json(self, path: Path, payload: dict) -> None:
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    def load_settings(self) -> UserSettings:
        """Stored settings, or defaults when missing or unreadable."""
        payload = self._read_json(self.data_dir / SETTINGS_FILE)
        if not isinstance(payload, dict):
            return UserSettings()
        try:
            return UserSettings.from_dict(payload)
        except (ValueError, TypeError):
            return UserSettings()

    def save_settings(self, settings: UserSettings) -> None:
        self._write_json(self.data_dir / SETTINGS_FILE, settings.to_dict())

    def load_daily_stats(self, day: date) -> DailyStats | None:
        """Stats stored for ``day``, or None when missing or unreadable."""
        payload = self._read_json(self.data_dir / _stats_filename(day))
        if not isinstance(payload, dict):
            return None
        try:
            return DailyStats.from_dict(payload)
        except (ValueError, TypeError):
            return None

    def save_daily_stats(self, stats: DailyStats) -> None:
        self._write_json(self.data_dir / _stats_filename(stats.date), stats.to_dict())

    def load_app_state(self, today: date | None = None) -> AppState:
        """Settings, today's stats and the six preceding days, oldest first."""
        settings = self.load_settings()
        today = today or date.today()
        today_stats = self.load_daily_stats(today) or DailyStats.empty(today, settings.daily_goal)

        weekly_stats = []
        for offset in range(1, HISTORY_DAYS + 1):
            day = today - timedelta(days=offset)
            weekly_stats.append(
                self.load_daily_stats(day) or DailyStats.empty(day, settings.daily_goal)
            )
        weekly_stats.sort(key=lambda stats: stats.date)

        last_record_id = max((record.id for record in today_stats.records), default=0)
        return AppState(
            settings=settings,
            today_stats=today_stats,
            weekly_stats=weekly_stats,
            last_record_id=last_record_id,
        )

    def save_app_state(self, state: AppState) -> None:
        self.save_settings(state.settings)
        self.save_daily_stats(state.today_stats)