import asyncio
import subprocess
from unittest.mock import AsyncMock, patch

import pytest

from hydrobuddy.notification import (
    GOAL_BODY,
    GOAL_SUMMARY,
    REMINDER_SUMMARY,
    NotificationError,
    NotificationManager,
)


def _done(args, returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args, returncode, stdout, stderr)


def _ok(args, **kwargs):
    return _done(args)


def _fail(args, **kwargs):
    return _done(args, 1)


class _Stop(Exception):
    pass


def test_default_interval_and_update():
    manager = NotificationManager(True, "linux")
    assert manager.interval == 15
    assert manager.enabled is True
    manager.update_settings(False, 30)
    assert manager.enabled is False
    assert manager.interval == 30


def test_disabled_sends_nothing():
    manager = NotificationManager(False, "linux")
    with patch.object(subprocess, "run") as run:
        manager.show_water_reminder()
        manager.show_goal_achieved()
    assert run.call_count == 0
    assert manager.enabled is False
    assert manager.interval == 15


def test_goal_achieved_linux_uses_notify_send():
    manager = NotificationManager(True, "linux")
    with patch.object(subprocess, "run", side_effect=_ok) as run:
        manager.show_goal_achieved()
    assert run.call_count == 1
    args = run.call_args.args[0]
    assert args[:3] == ["notify-send", GOAL_SUMMARY, GOAL_BODY]
    assert "--app-name=Water Reminder" in args
    assert "--expire-time=10000" in args
    assert manager.enabled is True


def test_notify_send_failure_raises():
    manager = NotificationManager(True, "linux")

    def no_bus(args, **kwargs):
        return _done(args, 1, stderr="no bus")

    with patch.object(subprocess, "run", side_effect=no_bus):
        with pytest.raises(NotificationError, match="no bus"):
            manager.show_goal_achieved()


def test_notify_send_missing_raises():
    manager = NotificationManager(True, "linux")
    with patch.object(subprocess, "run", side_effect=FileNotFoundError("notify-send")):
        with pytest.raises(NotificationError):
            manager.show_goal_achieved()


def test_unsupported_platform_raises():
    manager = NotificationManager(True, "win32")
    with patch.object(subprocess, "run") as run:
        with pytest.raises(NotificationError):
            manager.show_water_reminder()
    assert run.call_count == 0


def test_activate_linux_wmctrl_first_title():
    manager = NotificationManager(True, "linux")
    with patch.object(subprocess, "run", side_effect=_ok) as run:
        assert manager.activate_window() is True
    assert run.call_count == 1
    assert run.call_args.args[0] == ["wmctrl", "-a", "💧 Water Reminder - 喝水提醒"]


def test_activate_linux_falls_back_to_xdotool():
    calls = []

    def fake(args, **kwargs):
        calls.append(args)
        if args[0] == "wmctrl":
            raise FileNotFoundError("wmctrl")
        return _done(args)

    manager = NotificationManager(True, "linux")
    with patch.object(subprocess, "run", side_effect=fake):
        assert manager.activate_window() is True
    assert [c[0] for c in calls] == ["wmctrl", "xdotool"]
    assert calls[1][:3] == ["xdotool", "search", "--name"]


def test_activate_linux_uses_xwininfo_window_id():
    listing = (
        '     0x1200003 (has no name): ()  10x10+0+0\n'
        '     0x3a00007 "Water Reminder": ("water-reminder" "Water")  400x600+0+0\n'
    )
    calls = []

    def fake(args, **kwargs):
        calls.append(args)
        if args[0] == "wmctrl":
            return _done(args, 1)
        if args[0] == "xwininfo":
            return _done(args, stdout=listing)
        if args[:2] == ["xdotool", "windowactivate"]:
            return _done(args)
        return _done(args, 1)

    manager = NotificationManager(True, "linux")
    with patch.object(subprocess, "run", side_effect=fake):
        assert manager.activate_window() is True
    assert calls[-1] == ["xdotool", "windowactivate", "0x3a00007"]


def test_activate_linux_all_fail():
    manager = NotificationManager(True, "linux")
    with patch.object(subprocess, "run", side_effect=_fail):
        assert manager.activate_window() is False


def test_activate_windows_reports_failure():
    manager = NotificationManager(True, "win32")
    with patch.object(subprocess, "run") as run:
        assert manager.activate_window() is False
    assert run.call_count == 0


def test_activate_macos_applescript():
    manager = NotificationManager(True, "darwin")

    def answer_true(args, **kwargs):
        return _done(args, stdout="true\n")

    with patch.object(subprocess, "run", side_effect=answer_true) as run:
        assert manager.activate_window() is True
    assert run.call_args.args[0][0] == "osascript"


def test_water_reminder_linux_activates_then_notifies():
    manager = NotificationManager(True, "linux")
    with patch.object(subprocess, "run", side_effect=_ok) as run:
        manager.show_water_reminder()
        assert manager.activate_window() is True
    programs = [c.args[0][0] for c in run.call_args_list]
    assert programs == ["wmctrl", "notify-send", "wmctrl"]
    assert run.call_args_list[1].args[0][1] == REMINDER_SUMMARY


@pytest.mark.asyncio
async def test_reminder_loop_waits_interval_then_notifies():
    manager = NotificationManager(True, "linux")
    manager.update_settings(True, 2)
    sleep = AsyncMock(side_effect=[None, _Stop()])
    with patch.object(asyncio, "sleep", sleep), patch.object(
        subprocess, "run", side_effect=_ok
    ) as run:
        with pytest.raises(_Stop):
            await manager.start_reminder_loop()
    assert sleep.await_args_list[0].args == (120,)
    assert run.call_args.args[0][0] == "notify-send"


@pytest.mark.asyncio
async def test_reminder_loop_idles_when_disabled():
    manager = NotificationManager(False, "linux")
    sleep = AsyncMock(side_effect=[None, _Stop()])
    with patch.object(asyncio, "sleep", sleep), patch.object(subprocess, "run") as run:
        with pytest.raises(_Stop):
            await manager.start_reminder_loop()
    assert [c.args for c in sleep.await_args_list] == [(1,), (1,)]
    assert run.call_count == 0


@pytest.mark.asyncio
async def test_reminder_loop_survives_notification_failure():
    manager = NotificationManager(True, "linux")
    manager.update_settings(True, 1)
    sleep = AsyncMock(side_effect=[None, None, _Stop()])
    with patch.object(asyncio, "sleep", sleep), patch.object(
        subprocess, "run", side_effect=_fail
    ):
        with pytest.raises(_Stop):
            await manager.start_reminder_loop()
    assert sleep.await_count == 3