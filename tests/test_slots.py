"""Slot generation and business-day rules."""
from datetime import date, datetime, timedelta, timezone

import pytest

from barbershop.core import (
    BusinessHours, generate_slots, is_bookable, is_business_day, selectable_dates, sunday_weekday
)

MONDAY = date(2025, 6, 2)
THURSDAY = date(2025, 6, 5)
SUNDAY = date(2025, 6, 8)


def test_monday_half_hour_slots_before_opening():
    hours = BusinessHours(open_hour=9, close_hour=19, slot_minutes=30)
    slots = generate_slots(MONDAY, hours, now=datetime(2025, 6, 2, 8, 0))

    assert len(slots) == 20
    assert slots[0] == "09:00"
    assert slots[1] == "09:30"
    assert slots[-1] == "18:30"


def test_hourly_slots_by_default(hours):
    slots = generate_slots(MONDAY, hours, now=datetime(2025, 6, 2, 8, 0))
    assert slots == [f"{h:02d}:00" for h in range(9, 19)]


@pytest.mark.parametrize("closed_day", [THURSDAY, SUNDAY])
def test_closed_days_have_no_slots(hours, closed_day):
    assert not is_business_day(closed_day, hours)
    assert generate_slots(closed_day, hours, now=datetime(2025, 6, 1, 0, 0)) == []


def test_slot_equal_to_now_is_excluded(hours):
    slots = generate_slots(MONDAY, hours, now=datetime(2025, 6, 2, 10, 0))
    assert slots[0] == "11:00"
    assert "10:00" not in slots


def test_partially_elapsed_slot_is_excluded(hours):
    slots = generate_slots(MONDAY, hours, now=datetime(2025, 6, 2, 10, 1))
    assert slots[0] == "11:00"


def test_after_closing_today_is_empty(hours):
    assert generate_slots(MONDAY, hours, now=datetime(2025, 6, 2, 19, 0)) == []


def test_future_day_ignores_time_of_day(hours):
    tomorrow = MONDAY + timedelta(days=1)
    slots = generate_slots(tomorrow, hours, now=datetime(2025, 6, 2, 18, 45))
    assert len(slots) == 10


def test_past_day_is_empty(hours):
    assert generate_slots(MONDAY, hours, now=datetime(2025, 6, 3, 8, 0)) == []


def test_every_business_day_has_slots_before_closing(hours):
    for offset in range(14):
        day = MONDAY + timedelta(days=offset)
        now = datetime.combine(day, datetime.min.time()) + timedelta(hours=17, minutes=59)
        if is_business_day(day, hours):
            assert generate_slots(day, hours, now) != []


def test_sunday_based_weekday_numbering():
    assert sunday_weekday(SUNDAY) == 0
    assert sunday_weekday(MONDAY) == 1
    assert sunday_weekday(THURSDAY) == 4


def test_selectable_dates_skip_closed_days(hours):
    dates = selectable_dates(MONDAY, 7, hours)

    assert THURSDAY not in dates
    assert SUNDAY not in dates
    assert dates == [
        date(2025, 6, 2), date(2025, 6, 3), date(2025, 6, 4), date(2025, 6, 6), date(2025, 6, 7),
    ]


def test_is_bookable(hours):
    now = datetime(2025, 6, 2, 8, 0)
    assert is_bookable(MONDAY, "10:00", hours, now)
    assert not is_bookable(MONDAY, "10:30", hours, now)
    assert not is_bookable(MONDAY, "19:00", hours, now)
    assert not is_bookable(THURSDAY, "10:00", hours, now)


@pytest.mark.parametrize("kwargs", [
    {"slot_minutes": 45},
    {"open_hour": 19, "close_hour": 9},
    {"closed_days": frozenset({7})},
])
def test_business_hours_rejects_bad_rules(kwargs):
    with pytest.raises(ValueError):
        BusinessHours(**kwargs)


def test_aware_now_is_read_in_shop_time(hours):
    # 06:30 UTC is 09:30 in Nicosia in June
    slots = generate_slots(MONDAY, hours, now=datetime(2025, 6, 2, 6, 30, tzinfo=timezone.utc))
    assert slots[0] == "10:00"
