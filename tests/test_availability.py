"""Availability filter against stored bookings."""
from datetime import date, datetime
from zoneinfo import ZoneInfo
from unittest.mock import Mock

from sqlalchemy.exc import OperationalError

from barbershop.availability import available_slots, filter_available
from barbershop.models import Booking

MONDAY = date(2025, 6, 2)
SHOP_TZ = ZoneInfo("Asia/Nicosia")
CANDIDATES = ["09:00", "10:00", "11:00", "12:00"]


def add_booking(session, barber_id="george", at="10:00", on=MONDAY, verified=True):
    booking = Booking(
        barber_id=barber_id,
        services=["haircut"],
        booking_date=on,
        booking_time=at,
        total_price=10,
        phone_number="99123456",
        country_code="+357",
        is_verified=verified,
        created_at=datetime(2025, 6, 1, 12, 0, tzinfo=SHOP_TZ),
    )
    session.add(booking)
    session.commit()
    return booking


def test_booked_time_is_removed_for_that_barber(session):
    add_booking(session, barber_id="george", at="10:00")
    assert filter_available(session, CANDIDATES, MONDAY, "george") == ["09:00", "11:00", "12:00"]


def test_other_barbers_are_unaffected(session):
    add_booking(session, barber_id="george", at="10:00")
    assert filter_available(session, CANDIDATES, MONDAY, "elias") == CANDIDATES


def test_without_barber_any_booking_removes_the_time(session):
    add_booking(session, barber_id="george", at="10:00")
    add_booking(session, barber_id="elias", at="12:00")
    assert filter_available(session, CANDIDATES, MONDAY) == ["09:00", "11:00"]


def test_unverified_bookings_do_not_block(session):
    add_booking(session, at="10:00", verified=False)
    assert filter_available(session, CANDIDATES, MONDAY, "george") == CANDIDATES


def test_bookings_on_other_dates_do_not_block(session):
    add_booking(session, at="10:00", on=date(2025, 6, 3))
    assert filter_available(session, CANDIDATES, MONDAY, "george") == CANDIDATES


def test_filter_is_idempotent(session):
    add_booking(session, at="11:00")
    first = filter_available(session, CANDIDATES, MONDAY, "george")
    second = filter_available(session, CANDIDATES, MONDAY, "george")
    assert first == second == ["09:00", "10:00", "12:00"]


def test_store_failure_returns_unfiltered_candidates(caplog):
    broken = Mock()
    broken.exec.side_effect = OperationalError("SELECT", {}, Exception("database is down"))

    result = filter_available(broken, CANDIDATES, MONDAY, "george")

    assert result == CANDIDATES
    broken.rollback.assert_called_once()
    assert "returning unfiltered slots" in caplog.text


def test_available_slots_combines_generation_and_filter(session, hours):
    add_booking(session, at="09:00")
    slots = available_slots(session, MONDAY, "george", hours, now=datetime(2025, 6, 2, 8, 0, tzinfo=SHOP_TZ))

    assert "09:00" not in slots
    assert slots[0] == "10:00"
    assert len(slots) == 9
