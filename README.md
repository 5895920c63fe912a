# hydrobuddy

hydrobuddy keeps track of how much water you drink each day and reminds you,
at an interval you choose, to have another glass.

## What it does

- Records each drink with its amount in millilitres and the time you had it.
  The latest record of the day can be undone.
- Compares today's total with a daily goal (2000 ml by default) and reports
  the progress as a percentage, capped at 100.
- Keeps statistics over the last seven days: the average, the total, the
  largest day, the day-by-day figures (oldest first, today last), and the
  current streak of days, ending today, on which the goal was met.
- While reminders are switched on, sends a desktop notification every
  interval (15 minutes by default), and another one when today's goal is
  reached.
- Saves settings and each day's statistics as JSON files (`settings.json`,
  `stats_YYYY-MM-DD.json`) in a `water-reminder` folder in the user data
  directory.

## Installation

```
pip install .
```

Notifications on Linux go through `notify-send`. Before each reminder the
program also tries to bring a window titled "Water Reminder" to the front
with `wmctrl`, `xdotool` or `xwininfo`, where they are installed. On macOS it
uses `osascript` for notifications and `osascript` or `open` for activation.
On other systems notifications are not supported and fail with
`hydrobuddy.notification.NotificationError`, which the program logs.

## Running

```
hydrobuddy
hydrobuddy --data-dir /path/to/data
```

The program prints today's progress and statistics, starts the reminder loop
in the background and reads commands from standard input, one per line:

```
add N         record N ml
custom N      record N ml through the custom dialog (1-2000)
undo          remove the latest record
goal N        set the daily goal in ml
remind on|off enable or disable reminders
interval N    set the reminder interval in minutes
page N        switch page
stats         print today's progress and statistics
show | hide   show or hide the window
quit          exit
help          list the commands
```

Every change is saved straight away. End of input also exits.

## Using it as a library

```python
from hydrobuddy.storage import DataManager, default_data_dir

manager = DataManager(default_data_dir())
state = manager.load_app_state()

state.add_water_record(250)
print(state.progress_percentage())
print(state.seven_days_data())

manager.save_app_state(state)
```

- `hydrobuddy.models.AppState` holds the `UserSettings`, today's
  `DailyStats` and the six days before today, with `add_water_record`,
  `undo_last_record`, `progress_percentage`, `weekly_average`,
  `weekly_total`, `streak_days`, `max_daily_amount` and `seven_days_data`.
- `hydrobuddy.storage.DataManager` loads and saves that state; missing or
  unreadable files give default settings and empty days.
- `hydrobuddy.notification.NotificationManager` holds the reminder settings,
  sends notifications and runs the reminder loop (`start_reminder_loop`, a
  coroutine).
- `hydrobuddy.app.WaterReminderApp` wires the state to storage and to a
  notification manager. It keeps a `ViewState` with everything a front end
  shows: totals, statistics, today's records newest first as `RecordView`
  rows, and the confirmation message after each drink (see `toast_for`).
- `hydrobuddy.tray` has `TrayMessage`, a `TrayMenu` queue of menu
  activations and `create_water_drop_icon`, which returns a 32x32 RGBA
  water-drop bitmap.

## What it does not do

There is no graphical window and no real system tray icon. The front end is
the line-oriented command interface above; "show" and "hide" only change the
`visible` flag of the view state, and the tray menu is an in-process queue
fed by those commands. The start and end times in the settings are stored
but not used to limit when reminders are sent.

## Tests

```
pip install ".[test]"
pytest
```