from datetime import date, datetime, time
from typing import Iterable, Optional, Union

OPEN_24_HOURS = "24 Hours"

TIME_FORMATS = ["%I:%M %p", "%I:%M%p", "%H:%M"]


def parse_time_str(t: Optional[str]) -> Optional[time]:
    """Parse '10:15 AM', '10:15AM' or '22:15'. Returns None when unparseable."""
    if not t or not isinstance(t, str):
        return None
    t = t.strip().upper()
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(t, fmt).time()
        except ValueError:
            continue
    return None


def to_minutes(t: Optional[Union[str, time]]) -> Optional[int]:
    if isinstance(t, str):
        t = parse_time_str(t)
    if t is None:
        return None
    return t.hour * 60 + t.minute


def _timing_value(timing, key: str):
    if timing is None:
        return None
    if isinstance(timing, dict):
        return timing.get(key)
    return getattr(timing, key, None)


def is_open_24_hours(timing) -> bool:
    return bool(
        _timing_value(timing, "is_open_24_hours")
        or _timing_value(timing, "open") == OPEN_24_HOURS
        or _timing_value(timing, "close") == OPEN_24_HOURS
    )


def _within(open_minutes: int, close_minutes: int, current: int) -> bool:
    if close_minutes >= open_minutes:
        return open_minutes <= current <= close_minutes
    # closes after midnight
    return current >= open_minutes or current <= close_minutes


def is_open_at(timing, at: time) -> bool:
    """Shop status badge: a shop with missing or unreadable hours shows as closed."""
    if is_open_24_hours(timing):
        return True
    open_minutes = to_minutes(_timing_value(timing, "open"))
    close_minutes = to_minutes(_timing_value(timing, "close"))
    if open_minutes is None or close_minutes is None:
        return False
    return _within(open_minutes, close_minutes, to_minutes(at))


def is_time_allowed(timing, at: Union[str, time]) -> bool:
    """Booking validation: unknown hours never block a booking."""
    if timing is None or is_open_24_hours(timing):
        return True
    open_minutes = to_minutes(_timing_value(timing, "open"))
    close_minutes = to_minutes(_timing_value(timing, "close"))
    current = to_minutes(at)
    if open_minutes is None or close_minutes is None or current is None:
        return True
    return _within(open_minutes, close_minutes, current)


def is_off_day(off_days: Optional[Iterable[str]], day: date) -> bool:
    if not off_days:
        return False
    day_name = day.strftime("%A").lower()
    return any(d.strip().lower() == day_name for d in off_days if isinstance(d, str))
