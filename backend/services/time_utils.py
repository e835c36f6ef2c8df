"""Wall-clock time helpers for the scheduling core.

Slot identity is the normalized ``HH:MM:SS`` string. No timezone math happens
here; the booking's timezone label is stored for display only.
"""

import re
from datetime import date, time, timedelta

from backend.core.constants import DAY_NAMES

DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
MINUTES_PER_DAY = 24 * 60


def time_to_minutes(value: str) -> int:
    """``"09:30"`` -> 570. Seconds, if present, are ignored."""
    hours, minutes = value.split(':')[:2]
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f'{hours:02d}:{mins:02d}'


def generate_time_slots(start: str, end: str, interval_minutes: int = 30) -> list[str]:
    """Every slot start in ``[start, end)`` stepping by ``interval_minutes``."""
    if interval_minutes <= 0:
        raise ValueError('interval_minutes must be positive')

    end_minutes = time_to_minutes(end)
    return [
        minutes_to_time(current)
        for current in range(time_to_minutes(start), end_minutes, interval_minutes)
    ]


def normalize_time_slot(value: str | time) -> str:
    """Validate a clock time and return its ``HH:MM:SS`` storage form."""
    if isinstance(value, time):
        return value.strftime('%H:%M:00')

    parts = value.strip().split(':')
    if len(parts) not in (2, 3):
        raise ValueError('Invalid time format')
    try:
        hours, minutes = int(parts[0]), int(parts[1])
        seconds = int(parts[2]) if len(parts) == 3 else 0
    except ValueError:
        raise ValueError('Invalid time format') from None

    # Slots sit on a whole-minute grid.
    if not 0 <= hours <= 23 or not 0 <= minutes <= 59 or seconds != 0:
        raise ValueError('Invalid time format')

    return f'{hours:02d}:{minutes:02d}:00'


def to_clock_time(value: str | time) -> time:
    return time.fromisoformat(normalize_time_slot(value))


def parse_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    if not DATE_PATTERN.match(value):
        raise ValueError('Date must be in YYYY-MM-DD format')
    return date.fromisoformat(value)


def is_date_valid(value: str | date, today: date | None = None) -> bool:
    """True when the day is today or later."""
    return parse_date(value) >= (today or date.today())


def is_date_in_future(value: str | date, advance_days: int = 1, today: date | None = None) -> bool:
    return parse_date(value) >= (today or date.today()) + timedelta(days=advance_days)


def get_day_of_week(value: str | date) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return (parse_date(value).weekday() + 1) % 7


def get_day_name(value: str | date) -> str:
    return DAY_NAMES[get_day_of_week(value)]


def is_weekend(value: str | date) -> bool:
    return get_day_of_week(value) in (0, 6)


def is_time_within_hours(value: str, start: str, end: str) -> bool:
    return time_to_minutes(start) <= time_to_minutes(value) < time_to_minutes(end)


def add_buffer_time(value: str, buffer_minutes: int) -> str:
    return minutes_to_time(min(time_to_minutes(value) + buffer_minutes, MINUTES_PER_DAY - 1))


def get_next_available_date(
    start: str | date,
    skip_weekends: bool = False,
    max_days: int = 30,
) -> date | None:
    current = parse_date(start)
    last = current + timedelta(days=max_days)

    while current <= last:
        if not skip_weekends or not is_weekend(current):
            return current
        current += timedelta(days=1)

    return None
