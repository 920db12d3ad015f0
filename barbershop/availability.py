# barbershop/availability.py

import logging
from datetime import date, datetime
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .core import BusinessHours, generate_slots
from .models import Booking

logger = logging.getLogger(__name__)


def booked_times(session: Session, on_date: date, barber_id: Optional[str] = None) -> set:
    stmt = (
        select(Booking.booking_time)
        .where(Booking.booking_date == on_date)
        .where(Booking.is_verified == True)  # noqa: E712
    )
    if barber_id is not None:
        stmt = stmt.where(Booking.barber_id == barber_id)
    return set(session.exec(stmt).all())


def filter_available(
    session: Session,
    candidates: Sequence[str],
    on_date: date,
    barber_id: Optional[str] = None,
) -> List[str]:
    """
    Drop candidate times that already hold a verified booking.

    Read-only. If the store cannot be queried the candidates are returned
    unfiltered; the confirmation step re-checks the exact slot before writing.
    """
    try:
        taken = booked_times(session, on_date, barber_id)
    except SQLAlchemyError as e:
        logger.warning(f"Availability lookup failed for {on_date} (barber={barber_id}), returning unfiltered slots: {e}")
        session.rollback()
        return list(candidates)

    return [t for t in candidates if t not in taken]


def available_slots(
    session: Session,
    on_date: date,
    barber_id: Optional[str],
    hours: BusinessHours,
    now: datetime,
) -> List[str]:
    return filter_available(session, generate_slots(on_date, hours, now), on_date, barber_id)
