"""Application controller: keeps the view state in step with the stored data."""

from __future__ import annotations

import argparse
import asyncio
import logging
import re
import threading
from dataclasses import dataclass, field

from hydrobuddy.models import AppState
from hydrobuddy.notification import NotificationError, NotificationManager
from hydrobuddy.storage import DataManager, default_data_dir
from hydrobuddy.tray import HIDE_LABEL, QUIT_LABEL, SHOW_LABEL, TrayMenu, TrayMessage

logger = logging.getLogger(__name__)

MAX_CUSTOM_AMOUNT = 2000
_U32_LIMIT = 2**32
_UNSIGNED = re.compile(r"\+?[0-9]+")


@dataclass
class RecordView:
    """One row of today's record list as shown to the user."""

    id: int
    amount: int
    time: str


@dataclass
class ViewState:
    """Everything the user interface displays."""

    daily_goal: int = 0
    total_today: int = 0
    progress_percentage: float = 0.0
    reminder_enabled: bool = True
    reminder_interval: int = 0
    current_page: int = 0
    weekly_average: int = 0
    streak_days: int = 0
    max_daily: int = 0
    total_week: int = 0
    seven_days_data: list[int] = field(default_factory=lambda: [0] * 7)
    today_records: list[RecordView] = field(default_factory=list)
    toast_icon: str = ""
    toast_message: str = ""
    show_success_toast: bool = False
    show_custom_input: bool = False
    custom_amount: str = ""
    visible: bool = True


def toast_for(amount: int, progress: float, goal_achieved: bool) -> tuple[str, str]:
    """Icon and message confirming a drink of ``amount`` ml."""
    if goal_achieved:
        return "🎉", f"已喝水 {amount} ml！目标已达成"
    if progress >= 75.0:
        return "💪", f"已喝水 {amount} ml！距离目标很近了"
    if progress >= 50.0:
        return "👍", f"已喝水 {amount} ml！进度过半啦"
    return "💧", f"已喝水 {amount} ml！继续加油"


def _parse_custom_amount(text: str) -> int | None:
    text = text.strip() if False else text
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value < _U32_LIMIT else None


class WaterReminderApp:
    """Handles user actions, updates the state, the view and the stored data."""

    def __init__(
        self,
        data_manager: DataManager,
        notifier: NotificationManager | None = None,
    ) -> None:
        self.data_manager = data_manager
        self.state: AppState = data_manager.load_app_state()
        settings = self.state.settings
        self.notifier = notifier if notifier is not None else NotificationManager(
            settings.reminder_enabled
        )
        self.notifier.update_settings(settings.reminder_enabled, settings.reminder_interval)

        today = self.state.today_stats
        if today.total_amount >= settings.daily_goal:
            today.goal_achieved = True

        self.view = ViewState(
            daily_goal=settings.daily_goal,
            reminder_enabled=settings.reminder_enabled,
            reminder_interval=settings.reminder_interval,
            current_page=0,
        )
        self.refresh()

    def refresh(self) -> None:
        """Copy totals, statistics and today's records into the view."""
        state = self.state
        view = self.view
        view.total_today = state.today_stats.total_amount
        view.progress_percentage = state.progress_percentage()
        view.weekly_average = state.weekly_average()
        view.streak_days = state.streak_days()
        view.max_daily = state.max_daily_amount()
        view.total_week = state.weekly_total()
        view.seven_days_data = state.seven_days_data()
        view.today_records = [
            RecordView(id=r.id, amount=r.amount, time=r.timestamp.strftime("%H:%M"))
            for r in reversed(state.today_stats.records)
        ]

    def _save(self) -> None:
        try:
            self.data_manager.save_app_state(self.state)
        except OSError as exc:
            logger.error("failed to save data: %s", exc)

    def _record_drink(self, amount: int) -> None:
        self.state.add_water_record(amount)
        self.refresh()

        today = self.state.today_stats
        icon, message = toast_for(amount, self.state.progress_percentage(), today.goal_achieved)
        self.view.toast_icon = icon
        self.view.toast_message = message
        self.view.show_success_toast = True

        if today.goal_achieved and today.total_amount - amount < today.goal_amount:
            try:
                self.notifier.show_goal_achieved()
            except NotificationError as exc:
                logger.error("goal notification failed: %s", exc)

        self._save()

    def add_water(self, amount: int) -> None:
        """Record a drink of ``amount`` ml."""
        self._record_drink(amount)

    def undo_last_record(self) -> bool:
        """Remove today's latest drink; False when there is nothing to undo."""
        if not self.state.undo_last_record():
            return False
        self.refresh()
        self._save()
        return True

    def set_daily_goal(self, goal: int) -> None:
        self.state.settings.daily_goal = goal
        self.state.today_stats.goal_amount = goal
        self.view.daily_goal = goal
        self.view.progress_percentage = self.state.progress_percentage()
        self._save()

    def toggle_reminder(self, enabled: bool) -> None:
        settings = self.state.settings
        settings.reminder_enabled = enabled
        self.notifier.update_settings(enabled, settings.reminder_interval)
        self.view.reminder_enabled = enabled
        self._save()

    def set_reminder_interval(self, interval: int) -> None:
        settings = self.state.settings
        settings.reminder_interval = interval
        self.notifier.update_settings(settings.reminder_enabled, interval)
        self.view.reminder_interval = interval
        self._save()

    def show_custom_input_dialog(self) -> None:
        self.view.show_custom_input = True
        self.view.custom_amount = ""

    def hide_custom_input_dialog(self) -> None:
        self.view.show_custom_input = False
        self.view.custom_amount = ""

    def add_custom_water(self) -> bool:
        """Record the amount typed in the custom dialog if it lies in 1..2000 ml."""
        amount = _parse_custom_amount(self.view.custom_amount)
        if amount is None or not 0 < amount <= MAX_CUSTOM_AMOUNT:
            return False
        self._record_drink(amount)
        self.hide_custom_input_dialog()
        return True

    def hide_success_toast(self) -> None:
        self.view.show_success_toast = False

    def switch_page(self, page: int) -> None:
        self.view.current_page = page

    def handle_tray_message(self, message: TrayMessage | None) -> None:
        """Show or hide the window, or exit the application."""
        if message is TrayMessage.SHOW:
            self.view.visible = True
        elif message is TrayMessage.HIDE:
            self.view.visible = False
        elif message is TrayMessage.QUIT:
            raise SystemExit(0)


_HELP = """commands:
  add N         record N ml
  custom N      record N ml through the custom dialog (1-2000)
  undo          remove the latest record
  goal N        set the daily goal in ml
  remind on|off enable or disable reminders
  interval N    set the reminder interval in minutes
  page N        switch page
  stats         print today's progress and statistics
  show | hide   show or hide the window
  quit          exit"""

_TRAY_COMMANDS = {"show": SHOW_LABEL, "hide": HIDE_LABEL, "quit": QUIT_LABEL}


def _print_stats(app: WaterReminderApp) -> None:
    view = app.view
    print(
        f"today: {view.total_today}/{view.daily_goal} ml "
        f"({view.progress_percentage:.0f}%)"
    )
    print(
        f"week total: {view.total_week} ml, average: {view.weekly_average} ml, "
        f"best day: {view.max_daily} ml, streak: {view.streak_days}"
    )
    print("last 7 days: " + " ".join(str(v) for v in view.seven_days_data))
    for record in view.today_records:
        print(f"  #{record.id} {record.time} {record.amount} ml")


def _int_arg(parts: list[str]) -> int | None:
    if len(parts) != 2:
        return None
    try:
        return int(parts[1])
    except ValueError:
        return None


def _dispatch(app: WaterReminderApp, tray: TrayMenu, line: str) -> None:
    parts = line.split()
    if not parts:
        return
    command = parts[0].lower()
    if command in _TRAY_COMMANDS:
        tray.post(_TRAY_COMMANDS[command])
        app.handle_tray_message(tray.handle_events())
        return
    if command == "help":
        print(_HELP)
        return
    if command == "stats":
        _print_stats(app)
        return
    if command == "undo":
        print("undone" if app.undo_last_record() else "nothing to undo")
        return
    if command == "remind" and len(parts) == 2 and parts[1] in ("on", "off"):
        app.toggle_reminder(parts[1] == "on")
        return
    if command == "custom" and len(parts) == 2:
        app.show_custom_input_dialog()
        app.view.custom_amount = parts[1]
        if not app.add_custom_water():
            app.hide_custom_input_dialog()
            print("amount must be between 1 and 2000 ml")
            return
        print(f"{app.view.toast_icon} {app.view.toast_message}")
        app.hide_success_toast()
        return
    value = _int_arg(parts)
    if value is None:
        print("unknown command; type 'help'")
        return
    if command == "add" and value > 0:
        app.add_water(value)
        print(f"{app.view.toast_icon} {app.view.toast_message}")
        app.hide_success_toast()
    elif command == "goal" and value >= 0:
        app.set_daily_goal(value)
    elif command == "interval" and value >= 0:
        app.set_reminder_interval(value)
    elif command == "page":
        app.switch_page(value)
    else:
        print("unknown command; type 'help'")


def main(argv: list[str] | None = None) -> int:
    """Run the reminder with a line-oriented interface on standard input."""
    parser = argparse.ArgumentParser(prog="hydrobuddy", description="Water drinking reminder")
    parser.add_argument(
        "--data-dir",
        default=None,
        help=f"where settings and statistics are stored (default: {default_data_dir()})",
    )
    args = parser.parse_args(argv)

    app = WaterReminderApp(DataManager(args.data_dir))
    tray = TrayMenu()
    threading.Thread(
        target=lambda: asyncio.run(app.notifier.start_reminder_loop()),
        daemon=True,
    ).start()

    _print_stats(app)
    while True:
        try:
            line = input("> ")
        except EOFError:
            return 0
        try:
            _dispatch(app, tray, line)
        except SystemExit:
            return 0