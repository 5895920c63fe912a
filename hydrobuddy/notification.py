"""Desktop notifications, window activation and the periodic reminder loop."""

from __future__ import annotations

import asyncio
import logging
import subprocess
import sys
import threading

logger = logging.getLogger(__name__)

APP_NAME = "Water Reminder"
DEFAULT_INTERVAL = 15
NOTIFICATION_TIMEOUT_MS = 10000
IDLE_POLL_SECONDS = 1

REMINDER_SUMMARY = "💧 喝水提醒"
REMINDER_BODY = "该喝水了！保持良好的饮水习惯对健康很重要。"
GOAL_SUMMARY = "🎉 目标达成！"
GOAL_BODY = "恭喜！您今天已经完成了饮水目标！"

WINDOW_TITLES = (
    "💧 Water Reminder - 喝水提醒",
    "Water Reminder - 喝水提醒",
    "Water Reminder",
    "water-reminder",
)
MAC_APP_NAMES = ("Water Reminder", "water-reminder")

_MAC_ACTIVATE_SCRIPT = """tell application "System Events"
    set appName to "{name}"
    if exists (processes whose name is appName) then
        tell application appName to activate
        return true
    end if
    return false
end tell"""

_MAC_FRONTMOST_SCRIPT = """tell application "System Events"
    set waterApp to first application process whose name contains "water" or name contains "Water"
    if waterApp exists then
        set frontmost of waterApp to true
        return true
    end if
    return false
end tell"""


class NotificationError(Exception):
    """A desktop notification could not be delivered."""


def _normalize_platform(platform: str | None) -> str:
    name = platform if platform is not None else sys.platform
    if name.startswith("linux"):
        return "linux"
    if name in ("darwin", "macos"):
        return "darwin"
    if name in ("win32", "windows", "cygwin"):
        return "win32"
    return name


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class NotificationManager:
    """Thread-safe reminder settings plus the means to notify the user."""

    def __init__(self, enabled: bool = True, platform: str | None = None) -> None:
        self.platform = _normalize_platform(platform)
        self._lock = threading.Lock()
        self._enabled = enabled
        self._interval = DEFAULT_INTERVAL

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    @property
    def interval(self) -> int:
        """Minutes between reminders."""
        with self._lock:
            return self._interval

    def update_settings(self, enabled: bool, interval: int) -> None:
        with self._lock:
            self._enabled = enabled
            self._interval = interval

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        return subprocess.run(args, capture_output=True, text=True, check=False)

    # Window activation

    def activate_window(self) -> bool:
        """Try to bring the application window to the front; True on success."""
        logger.info("activating application window")
        if self.platform == "linux":
            success = self._activate_linux()
        elif self.platform == "darwin":
            success = self._activate_macos()
        else:
            logger.info("window activation is not available on %s", self.platform)
            success = False
        if not success:
            logger.info("all window activation methods failed")
        return success

    def _activate_linux(self) -> bool:
        for title in WINDOW_TITLES:
            try:
                result = self._run(["wmctrl", "-a", title])
            except OSError as exc:
                logger.info("cannot run wmctrl: %s", exc)
                break
            if result.returncode == 0:
                logger.info("wmctrl activated window %r", title)
                return True
            if result.stderr:
                logger.info("wmctrl failed: %s", result.stderr)

        for title in WINDOW_TITLES:
            try:
                result = self._run(["xdotool", "search", "--name", title, "windowactivate"])
            except OSError:
                continue
            if result.returncode == 0:
                logger.info("xdotool activated window %r", title)
                return True

        try:
            listing = self._run(["xwininfo", "-tree", "-root"])
        except OSError as exc:
            logger.info("cannot run xwininfo: %s", exc)
            return False
        for line in (listing.stdout or "").splitlines():
            if "(has no name)" in line:
                continue
            if "Water Reminder" not in line and "water-reminder" not in line:
                continue
            fields = line.split()
            if not fields or not fields[0].startswith("0x"):
                continue
            window_id = fields[0]
            logger.info("found window id %s -> %s", window_id, line.strip())
            try:
                result = self._run(["xdotool", "windowactivate", window_id])
            except OSError as exc:
                logger.info("xdotool activation failed: %s", exc)
                continue
            if result.returncode == 0:
                return True
        return False

    def _activate_macos(self) -> bool:
        for name in MAC_APP_NAMES:
            script = _MAC_ACTIVATE_SCRIPT.format(name=name)
            try:
                result = self._run(["osascript", "-e", script])
            except OSError as exc:
                logger.info("cannot run osascript: %s", exc)
                break
            if result.returncode == 0:
                if (result.stdout or "").strip() == "true":
                    return True
            else:
                logger.info("AppleScript failed: %s", result.stderr)

        try:
            result = self._run(["open", "-a", APP_NAME])
        except OSError as exc:
            logger.info("cannot run open: %s", exc)
        else:
            if result.returncode == 0:
                return True
            logger.info("open failed: %s", result.stderr)

        try:
            result = self._run(["osascript", "-e", _MAC_FRONTMOST_SCRIPT])
        except OSError:
            return False
        return result.returncode == 0 and (result.stdout or "").strip() == "true"

    # Notifications

    def _notify(self, summary: str, body: str) -> None:
        if self.platform == "linux":
            args = [
                "notify-send",
                summary,
                body,
                "--urgency=normal",
                f"--expire-time={NOTIFICATION_TIMEOUT_MS}",
                "--icon=dialog-information",
                f"--app-name={APP_NAME}",
            ]
            tool = "notify-send"
        elif self.platform == "darwin":
            script = (
                f"display notification {_applescript_quote(body)} "
                f"with title {_applescript_quote(summary)} "
                f"subtitle {_applescript_quote(APP_NAME)}"
            )
            args = ["osascript", "-e", script]
            tool = "osascript"
        else:
            raise NotificationError(
                f"desktop notifications are not supported on {self.platform}"
            )
        try:
            result = self._run(args)
        except OSError as exc:
            logger.error("cannot start %s: %s", tool, exc)
            raise NotificationError(f"cannot start {tool}: {exc}") from exc
        if result.returncode != 0:
            logger.error("%s failed: %s", tool, result.stderr)
            raise NotificationError(f"{tool} failed: {result.stderr}")
        logger.info("notification sent (%s)", tool)

    def show_water_reminder(self) -> None:
        """Activate the window and post the drink reminder, when enabled."""
        if not self.enabled:
            return
        logger.info("sending water reminder")
        self.activate_window()
        self._notify(REMINDER_SUMMARY, REMINDER_BODY)

    def show_goal_achieved(self) -> None:
        """Post the goal-reached notification, when enabled."""
        if not self.enabled:
            return
        logger.info("sending goal achieved notification")
        self._notify(GOAL_SUMMARY, GOAL_BODY)

    async def start_reminder_loop(self) -> None:
        """Send a reminder every interval minutes, forever."""
        while True:
            with self._lock:
                enabled, interval = self._enabled, self._interval
            if not enabled or interval == 0:
                await asyncio.sleep(IDLE_POLL_SECONDS)
                continue
            await asyncio.sleep(interval * 60)
            try:
                self.show_water_reminder()
            except NotificationError as exc:
                logger.error("failed to send notification: %s", exc)