import json
from datetime import date, timedelta

import pytest

from hydrobuddy.models import AppState, DailyStats, UserSettings
from hydrobuddy.storage import DataManager, default_data_dir

TODAY = date(2024, 3, 10)


@pytest.fixture
def manager(tmp_path):
    return DataManager(tmp_path / "data")


def _stats_with_records(day, ids):
    state = AppState(today_stats=DailyStats.empty(day, 2000))
    for _ in ids:
        state.add_water_record(100)
    for record, record_id in zip(state.today_stats.records, ids):
        record.id = record_id
    return state.today_stats


def test_creates_directory(tmp_path):
    target = tmp_path / "nested" / "data"
    DataManager(target)
    assert target.is_dir()


def test_default_data_dir_name():
    assert default_data_dir().name == "water-reminder"


def test_missing_settings_are_defaults(manager):
    assert manager.load_settings() == UserSettings()


def test_settings_round_trip(manager):
    settings = UserSettings(daily_goal=1800, reminder_interval=45, reminder_enabled=False)
    manager.save_settings(settings)
    assert manager.load_settings() == settings


def test_corrupt_settings_fall_back(manager):
    (manager.data_dir / "settings.json").write_text("{not json", encoding="utf-8")
    assert manager.load_settings() == UserSettings()


def test_incomplete_settings_fall_back(manager):
    (manager.data_dir / "settings.json").write_text(
        json.dumps({"daily_goal": 1234}), encoding="utf-8"
    )
    assert manager.load_settings() == UserSettings()


def test_daily_stats_round_trip_and_filename(manager):
    stats = _stats_with_records(date(2024, 3, 5), [1, 2])
    manager.save_daily_stats(stats)
    assert (manager.data_dir / "stats_2024-03-05.json").is_file()
    assert manager.load_daily_stats(date(2024, 3, 5)) == stats


def test_missing_daily_stats_is_none(manager):
    assert manager.load_daily_stats(TODAY) is None


def test_corrupt_daily_stats_is_none(manager):
    (manager.data_dir / "stats_2024-03-10.json").write_text("[]", encoding="utf-8")
    assert manager.load_daily_stats(TODAY) is None


def test_reads_serialized_nanosecond_timestamps(manager):
    payload = {
        "date": "2024-03-10",
        "total_amount": 200,
        "goal_amount": 2000,
        "records": [
            {"id": 5, "amount": 200, "timestamp": "2024-03-10T08:30:00.123456789+08:00"}
        ],
        "goal_achieved": False,
    }
    (manager.data_dir / "stats_2024-03-10.json").write_text(json.dumps(payload), encoding="utf-8")
    stats = manager.load_daily_stats(TODAY)
    assert stats.records[0].id == 5
    assert stats.records[0].timestamp.microsecond == 123456


def test_load_app_state_fills_history(manager):
    manager.save_settings(UserSettings(daily_goal=1500))
    past = DailyStats.empty(TODAY - timedelta(days=2), 1500)
    past.total_amount = 800
    manager.save_daily_stats(past)

    state = manager.load_app_state(TODAY)

    expected_dates = [TODAY - timedelta(days=n) for n in range(6, 0, -1)]
    assert [s.date for s in state.weekly_stats] == expected_dates
    by_date = {s.date: s for s in state.weekly_stats}
    assert by_date[TODAY - timedelta(days=2)].total_amount == 800
    assert all(s.goal_amount == 1500 for s in state.weekly_stats)
    assert state.today_stats.date == TODAY
    assert state.today_stats.goal_amount == 1500
    assert state.last_record_id == 0


def test_load_app_state_last_record_id(manager):
    manager.save_daily_stats(_stats_with_records(TODAY, [3, 7, 4]))
    state = manager.load_app_state(TODAY)
    assert state.last_record_id == 7
    assert [r.id for r in state.today_stats.records] == [3, 7, 4]


def test_save_app_state_round_trip(manager):
    state = manager.load_app_state(TODAY)
    state.settings.reminder_interval = 30
    state.add_water_record(350)
    manager.save_app_state(state)

    reloaded = manager.load_app_state(TODAY)
    assert reloaded.settings == state.settings
    assert reloaded.today_stats == state.today_stats
    assert reloaded.last_record_id == state.last_record_id