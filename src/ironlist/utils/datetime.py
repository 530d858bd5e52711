"""Date and time helpers shared by the notifier and the scheduler installers.

Entries carry plain calendar dates and the notifier works in local wall
clock time, so everything here is deliberately timezone-naive.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional


TIME_FORMAT = "%H:%M"
FALLBACK_SLEEP_SECONDS = 60.0


class TimeFormatError(ValueError):
    """Raised when a time-of-day string is not ``HH:MM``."""


def now_local() -> datetime:
    """Return the current local datetime.

    Returns:
        Naive datetime in the machine's local timezone
    """
    return datetime.now()


def today_local() -> date:
    """Return today's local calendar date."""
    return now_local().date()


def parse_time_of_day(value: str) -> time:
    """Parse a 24-hour ``HH:MM`` string.

    Args:
        value: Time string such as ``"09:00"``

    Returns:
        The parsed time of day

    Raises:
        TimeFormatError: If the string is not a valid 24-hour time
    """
    try:
        return datetime.strptime(value.strip(), TIME_FORMAT).time()
    except ValueError:
        raise TimeFormatError(f"Invalid time format: {value}. Expected HH:MM")


def format_time_of_day(value: time) -> str:
    """Render a time of day as zero-padded ``HH:MM``."""
    return value.strftime(TIME_FORMAT)


def next_daily_run(now: datetime, target: time) -> datetime:
    """Next occurrence of ``target``: later today if still ahead, else tomorrow.

    Args:
        now: Reference datetime
        target: Daily trigger time

    Returns:
        Datetime of the next trigger
    """
    today_run = datetime.combine(now.date(), target)
    if now.time() < target:
        return today_run
    return datetime.combine(now.date() + timedelta(days=1), target)


def seconds_until(now: datetime, target: datetime) -> float:
    """Seconds from ``now`` to ``target``, falling back to a minute if not positive."""
    delta = (target - now).total_seconds()
    if delta <= 0:
        return FALLBACK_SLEEP_SECONDS
    return delta


def minutes_to_seconds(minutes: Optional[int]) -> Optional[int]:
    """Convert an optional interval in minutes to seconds."""
    if minutes is None:
        return None
    return minutes * 60
