"""Data model for daily water intake tracking."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

DEFAULT_DAILY_GOAL = 2000
DEFAULT_REMINDER_INTERVAL = 15
DEFAULT_START_TIME = "07:00"
DEFAULT_END_TIME = "22:00"

_FRACTION = re.compile(r"\.(\d+)")


def _field(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"missing field {key!r}") from exc


def _parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp, tolerating 'Z' and nanosecond fractions."""
    if not isinstance(text, str):
        raise ValueError(f"invalid timestamp: {text!r}")
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    return datetime.fromisoformat(text)


def _parse_date(text: str) -> date:
    if not isinstance(text, str):
        raise ValueError(f"invalid date: {text!r}")
    return date.fromisoformat(text)


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class WaterRecord:
    """A single drink: an identifier, an amount in ml and when it happened."""

    id: int
    amount: int
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WaterRecord:
        return cls(
            id=int(_field(data, "id")),
            amount=int(_field(data, "amount")),
            timestamp=_parse_timestamp(_field(data, "timestamp")),
        )


@dataclass
class DailyStats:
    """Intake totals and records for one calendar day."""

    date: date
    total_amount: int
    goal_amount: int
    records: list[WaterRecord] = field(default_factory=list)
    goal_achieved: bool = False

    @classmethod
    def empty(cls, day: date, goal_amount: int) -> DailyStats:
        return cls(date=day, total_amount=0, goal_amount=goal_amount)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "total_amount": self.total_amount,
            "goal_amount": self.goal_amount,
            "records": [record.to_dict() for record in self.records],
            "goal_achieved": self.goal_achieved,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyStats:
        records = _field(data, "records")
        if not isinstance(records, list):
            raise ValueError("records must be a list")
        return cls(
            date=_parse_date(_field(data, "date")),
            total_amount=int(_field(data, "total_amount")),
            goal_amount=int(_field(data, "goal_amount")),
            records=[WaterRecord.from_dict(item) for item in records],
            goal_achieved=bool(_field(data, "goal_achieved")),
        )


@dataclass
class UserSettings:
    """User preferences: goal in ml, reminder interval in minutes, active hours."""

    daily_goal: int = DEFAULT_DAILY_GOAL
    reminder_interval: int = DEFAULT_REMINDER_INTERVAL
    reminder_enabled: bool = True
    start_time: str = DEFAULT_START_TIME
    end_time: str = DEFAULT_END_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "daily_goal": self.daily_goal,
            "reminder_interval": self.reminder_interval,
            "reminder_enabled": self.reminder_enabled,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserSettings:
        return cls(
            daily_goal=int(_field(data, "daily_goal")),
            reminder_interval=int(_field(data, "reminder_interval")),
            reminder_enabled=bool(_field(data, "reminder_enabled")),
            start_time=str(_field(data, "start_time")),
            end_time=str(_field(data, "end_time")),
        )


def _fresh_today() -> DailyStats:
    return DailyStats.empty(date.today(), DEFAULT_DAILY_GOAL)


@dataclass
class AppState:
    """Settings, today's intake and the previous days, oldest first."""

    settings: UserSettings = field(default_factory=UserSettings)
    today_stats: DailyStats = field(default_factory=_fresh_today)
    weekly_stats: list[DailyStats] = field(default_factory=list)
    last_record_id: int = 0

    def add_water_record(self, amount: int) -> WaterRecord:
        """Record a drink of ``amount`` ml now and return the new record."""
        if amount < 0:
            raise ValueError("amount must not be negative")
        self.last_record_id += 1
        record = WaterRecord(id=self.last_record_id, amount=amount, timestamp=_now())
        today = self.today_stats
        today.records.append(record)
        today.total_amount += amount
        today.goal_achieved = today.total_amount >= today.goal_amount
        return record

    def undo_last_record(self) -> bool:
        """Remove the latest record; return False when there is none."""
        today = self.today_stats
        if not today.records:
            return False
        last = today.records.pop()
        today.total_amount = max(0, today.total_amount - last.amount)
        today.goal_achieved = today.total_amount >= today.goal_amount
        return True

    def progress_percentage(self) -> float:
        today = self.today_stats
        if today.goal_amount == 0:
            return 0.0
        return min(today.total_amount / today.goal_amount * 100.0, 100.0)

    def weekly_average(self) -> int:
        if not self.weekly_stats:
            return self.today_stats.total_amount
        return self.weekly_total() // (len(self.weekly_stats) + 1)

    def weekly_total(self) -> int:
        return sum(s.total_amount for s in self.weekly_stats) + self.today_stats.total_amount

    def streak_days(self) -> int:
        """Consecutive days, ending today, on which the goal was met."""
        if not self.today_stats.goal_achieved:
            return 0
        streak = 1
        for stats in reversed(self.weekly_stats):
            if not stats.goal_achieved:
                break
            streak += 1
        return streak

    def max_daily_amount(self) -> int:
        return max(
            (s.total_amount for s in self.weekly_stats),
            default=self.today_stats.total_amount,
        ) if self.weekly_stats and max(
            s.total_amount for s in self.weekly_stats
        ) > self.today_stats.total_amount else self.today_stats.total_amount

    def seven_days_data(self) -> list[int]:
        """Totals for the last seven days, oldest first, today last."""
        data = [0] * 7
        for slot, stats in enumerate(self.weekly_stats[:6]):
            data[slot] = stats.total_amount
        data[6] = self.today_stats.total_amount
        return data