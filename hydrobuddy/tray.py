"""System tray menu messages and the tray icon bitmap."""

from __future__ import annotations

import math
import queue
from enum import Enum

ICON_SIZE = 32
DROP_COLOR = bytes((64, 164, 255, 255))

SHOW_LABEL = "显示水分提醒"
HIDE_LABEL = "隐藏到托盘"
QUIT_LABEL = "退出"
TOOLTIP = "水分提醒"


class TrayMessage(Enum):
    """Actions the tray menu can request from the application."""

    SHOW = "show"
    HIDE = "hide"
    QUIT = "quit"


_MENU_MESSAGES = {
    SHOW_LABEL: TrayMessage.SHOW,
    HIDE_LABEL: TrayMessage.HIDE,
    QUIT_LABEL: TrayMessage.QUIT,
}


def message_for_menu_id(item_id: str) -> TrayMessage | None:
    """Message for a menu item id, or None for unknown items."""
    return _MENU_MESSAGES.get(item_id)


class TrayMenu:
    """Queue of menu activations, polled from the UI thread."""

    items = (SHOW_LABEL, HIDE_LABEL, "", QUIT_LABEL)

    def __init__(self) -> None:
        self._events: queue.SimpleQueue[str] = queue.SimpleQueue()

    def post(self, item_id: str) -> None:
        """Record that the menu item ``item_id`` was activated."""
        self._events.put(item_id)

    def handle_events(self) -> TrayMessage | None:
        """Take one pending activation and translate it, if any."""
        try:
            item_id = self._events.get_nowait()
        except queue.Empty:
            return None
        return message_for_menu_id(item_id)


def _inside_drop(x: int, y: int) -> bool:
    distance = math.hypot(x - 16.0, y - 20.0)
    if y < 20:
        return distance <= 8.0
    tip_factor = (32.0 - y) / 12.0
    return tip_factor > 0.0 and distance <= 8.0 * tip_factor


def create_water_drop_icon() -> bytes:
    """RGBA pixels of a 32x32 blue water drop on a transparent background."""
    data = bytearray(ICON_SIZE * ICON_SIZE * 4)
    for y in range(ICON_SIZE):
        for x in range(ICON_SIZE):
            if _inside_drop(x, y):
                offset = (y * ICON_SIZE + x) * 4
                data[offset:offset + 4] = DROP_COLOR
    return bytes(data)