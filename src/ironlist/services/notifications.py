"""Notification system for IronList.

Builds a summary of upcoming entries and delivers it as a desktop
notification. Delivery is best-effort: failures are logged, never raised.
Supports macOS, Windows, and Linux.
"""

import logging
import subprocess
import sys
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time as clock_time
from typing import Callable, List, Optional, Sequence

from ..entry import Entry
from ..storage import DATE_FORMAT, Storage
from ..utils.datetime import next_daily_run, now_local, seconds_until


logger = logging.getLogger(__name__)

APP_NAME = "IronList"
DEFAULT_LIMIT = 10


@dataclass
class Notification:
    """A notification instance"""
    title: str
    message: str


def upcoming_entries(entries: Sequence[Entry], today: date) -> List[Entry]:
    """Entries dated today or later that are not complete, in input order"""
    return [e for e in entries if e.date >= today and not e.is_complete()]


def build_summary(entries: Sequence[Entry], today: date, limit: int = DEFAULT_LIMIT) -> Notification:
    """Summarise upcoming entries.

    The body lists at most ``limit`` entries, one per line, and notes how
    many were left out.
    """
    upcoming = upcoming_entries(entries, today)
    if not upcoming:
        title = f"{APP_NAME}: no upcoming items"
    else:
        title = f"{APP_NAME}: {len(upcoming)} upcoming item(s)"

    lines = [
        f"- {e.date.strftime(DATE_FORMAT)}: {e.description.strip()} [{e.tag_string('-')}]"
        for e in upcoming[:limit]
    ]
    if len(upcoming) > limit:
        lines.append(f"and {len(upcoming) - limit} more...")
    return Notification(title=title, message="\n".join(lines))


class NotificationDelivery(ABC):
    """Abstract base class for notification delivery methods"""

    @abstractmethod
    def send(self, notification: Notification) -> bool:
        """Send a notification. Returns True if successful."""
        pass


class DesktopNotificationDelivery(NotificationDelivery):
    """Desktop notification delivery using native OS notifications"""

    def __init__(self, platform: Optional[str] = None):
        self.platform = (platform or sys.platform).lower()

    def send(self, notification: Notification) -> bool:
        """Send desktop notification"""
        try:
            if self.platform == "darwin":
                return self._send_macos(notification)
            elif self.platform.startswith("win"):
                return self._send_windows(notification)
            else:
                return self._send_linux(notification)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Failed to send notification: {e}")
            return False

    def _send_macos(self, notification: Notification) -> bool:
        """Send macOS notification using osascript"""
        cmd = [
            "osascript",
            "-e",
            "on run argv",
            "-e",
            "display notification (item 2 of argv) with title (item 1 of argv)",
            "-e",
            "end run",
            notification.title,
            notification.message,
        ]
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=10)
        if result.returncode != 0:
            logger.warning(f"osascript returned {result.returncode}: {result.stderr.strip()}")
            return False
        return True

    def _send_windows(self, notification: Notification) -> bool:
        """Send Windows notification using win10toast"""
        try:
            import win10toast
        except ImportError:
            logger.warning("Desktop notifications on Windows need the win10toast package")
            return False
        toaster = win10toast.ToastNotifier()
        toaster.show_toast(
            title=notification.title,
            msg=notification.message,
            duration=10,
            threaded=True,
        )
        return True

    def _send_linux(self, notification: Notification) -> bool:
        """Send Linux notification using notify-send"""
        result = subprocess.run(
            [
                "notify-send",
                "--app-name", APP_NAME,
                notification.title,
                notification.message,
            ],
            capture_output=True,
            text=True,
            timeout=10,
        )
        if result.returncode != 0:
            logger.warning(f"notify-send returned {result.returncode}: {result.stderr.strip()}")
            return False
        return True


class Notifier:
    """Periodically re-reads the task file and sends a summary.

    With ``interval_minutes`` a summary goes out every N minutes; otherwise
    once a day at ``time_of_day``.
    """

    def __init__(self, storage: Storage, delivery: NotificationDelivery,
                 time_of_day: clock_time, interval_minutes: Optional[int] = None,
                 limit: int = DEFAULT_LIMIT,
                 clock: Callable[[], datetime] = now_local,
                 sleep: Callable[[float], None] = time.sleep):
        self.storage = storage
        self.delivery = delivery
        self.time_of_day = time_of_day
        self.interval_minutes = interval_minutes
        self.limit = limit
        self.clock = clock
        self.sleep = sleep

    def _load_entries(self) -> List[Entry]:
        try:
            return self.storage.load_sorted()
        except OSError as e:
            logger.error(f"Error reading entries for notification: {e}")
            return []

    def run_once(self) -> Notification:
        """Send one summary built from the current file contents."""
        entries = self._load_entries()
        notification = build_summary(entries, self.clock().date(), self.limit)
        if self.delivery.send(notification):
            logger.info(f"Sent notification: {notification.title}")
        return notification

    def seconds_until_next(self, now: Optional[datetime] = None) -> float:
        """Seconds to wait before the next summary."""
        if self.interval_minutes is not None:
            return float(self.interval_minutes * 60)
        now = now or self.clock()
        return seconds_until(now, next_daily_run(now, self.time_of_day))

    def run_forever(self, max_cycles: Optional[int] = None) -> None:
        """Send, sleep, repeat. ``max_cycles`` bounds the loop (None runs until killed)."""
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            self.run_once()
            cycles += 1
            wait = self.seconds_until_next()
            logger.debug(f"Next notification in {wait:.0f}s")
            self.sleep(wait)
