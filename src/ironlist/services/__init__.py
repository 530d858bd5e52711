"""Application services for IronList."""

from .notifications import (
    DesktopNotificationDelivery,
    Notification,
    NotificationDelivery,
    Notifier,
    build_summary,
)
from .scheduler import (
    LaunchdInstaller,
    ScheduleSpec,
    SchedulerError,
    SchedulerInstaller,
    SchtasksInstaller,
    SystemdInstaller,
    get_installer,
)

__all__ = [
    "DesktopNotificationDelivery",
    "Notification",
    "NotificationDelivery",
    "Notifier",
    "build_summary",
    "LaunchdInstaller",
    "ScheduleSpec",
    "SchedulerError",
    "SchedulerInstaller",
    "SchtasksInstaller",
    "SystemdInstaller",
    "get_installer",
]
