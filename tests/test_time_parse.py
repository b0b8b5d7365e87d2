from datetime import date, time
import pytest
from scripts.time_parse import (
    parse_time_str, to_minutes, is_open_at, is_time_allowed, is_off_day, OPEN_24_HOURS
)

DAY_SHIFT = {"open": "09:00 AM", "close": "09:00 PM"}
NIGHT_SHIFT = {"open": "10:00 PM", "close": "02:00 AM"}


@pytest.mark.parametrize("text,expected", [
    ("10:15 AM", time(10, 15)),
    ("10:15am", time(10, 15)),
    ("12:00 AM", time(0, 0)),
    ("12:30 PM", time(12, 30)),
    ("22:15", time(22, 15)),
    (" 07:05 pm ", time(19, 5)),
])
def test_parse_time_str(text, expected):
    assert parse_time_str(text) == expected


@pytest.mark.parametrize("text", [None, "", "25:00", "noon", "10-15"])
def test_parse_time_str_invalid(text):
    assert parse_time_str(text) is None


def test_to_minutes():
    assert to_minutes("01:30 PM") == 13 * 60 + 30
    assert to_minutes(time(0, 5)) == 5
    assert to_minutes("bogus") is None


def test_day_shift():
    assert is_open_at(DAY_SHIFT, time(9, 0))
    assert is_open_at(DAY_SHIFT, time(21, 0))
    assert not is_open_at(DAY_SHIFT, time(8, 59))
    assert not is_open_at(DAY_SHIFT, time(22, 0))


def test_overnight_shift_wraps_midnight():
    assert is_open_at(NIGHT_SHIFT, time(23, 30))
    assert is_open_at(NIGHT_SHIFT, time(1, 0))
    assert not is_open_at(NIGHT_SHIFT, time(12, 0))


def test_open_24_hours():
    assert is_open_at({"open": OPEN_24_HOURS, "close": OPEN_24_HOURS}, time(3, 0))
    assert is_open_at({"is_open_24_hours": True}, time(3, 0))
    assert is_time_allowed({"is_open_24_hours": True}, "03:00 AM")


def test_unknown_hours():
    # closed badge, but never blocks a booking
    assert not is_open_at(None, time(12, 0))
    assert not is_open_at({"open": "whenever"}, time(12, 0))
    assert is_time_allowed(None, "12:00 PM")
    assert is_time_allowed({"open": "whenever", "close": "later"}, "12:00 PM")


def test_booking_time_window():
    assert is_time_allowed(DAY_SHIFT, "10:30 AM")
    assert not is_time_allowed(DAY_SHIFT, "11:30 PM")


def test_off_days_case_insensitive():
    sunday = date(2030, 1, 6)
    monday = date(2030, 1, 7)
    assert is_off_day(["sunday"], sunday)
    assert is_off_day(["SUNDAY ", "Tuesday"], sunday)
    assert not is_off_day(["Sunday"], monday)
    assert not is_off_day(None, sunday)
