"""
Booking confirmation workflow

One BookingAttempt per request. State lives in the database; the attempt
object only tracks where this request is in

    draft -> code_requested -> verifying -> confirmed | rejected
"""

import logging
import re
from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from .availability import available_slots, filter_available
from .core import BusinessHours, generate_slots, is_bookable, shop_hours
from .data import BARBERS, SERVICES, services_total
from .errors import (
    InvalidCode, PersistenceError, SlotTaken, SlotUnavailable, ValidationError, WorkflowStateError
)
from .models import Booking
from .schemas import BookingData
from .verification import as_utc, issue_code, verify_code

logger = logging.getLogger(__name__)

MIN_PHONE_DIGITS = 8
CODE_PATTERN = re.compile(r"^\d{6}$")
COUNTRY_CODE_PATTERN = re.compile(r"^\+\d{1,4}$")


class BookingState(str, Enum):
    draft = "draft"
    code_requested = "code_requested"
    verifying = "verifying"
    confirmed = "confirmed"
    rejected = "rejected"


def normalize_phone(phone_number: str, country_code: str):
    """Strip formatting and check the number. Returns (phone_number, country_code)."""
    phone = re.sub(r"[\s\-().]", "", phone_number or "")
    country = (country_code or "").strip()
    if not phone or not country:
        raise ValidationError("Phone number and country code are required")
    if not phone.isdigit() or len(phone) < MIN_PHONE_DIGITS:
        raise ValidationError(f"Phone number must have at least {MIN_PHONE_DIGITS} digits")
    if not COUNTRY_CODE_PATTERN.match(country):
        raise ValidationError("Country code must look like +357")
    return phone, country


def parse_booking_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError("bookingDate must be YYYY-MM-DD") from None


def find_confirmed_booking(session: Session, barber_id: str, on_date: date, at_time: str) -> Optional[Booking]:
    return session.exec(
        select(Booking)
        .where(Booking.barber_id == barber_id)
        .where(Booking.booking_date == on_date)
        .where(Booking.booking_time == at_time)
        .where(Booking.is_verified == True)  # noqa: E712
    ).first()


class BookingAttempt:
    def __init__(
        self,
        draft: BookingData,
        phone_number: str,
        country_code: str,
        hours: Optional[BusinessHours] = None,
        state: BookingState = BookingState.draft,
    ):
        self.draft = draft
        self.phone_number = phone_number
        self.country_code = country_code
        self.hours = hours or shop_hours()
        self.state = state
        self.code: Optional[str] = None
        self.booking: Optional[Booking] = None

    @property
    def booking_date(self) -> date:
        return parse_booking_date(self.draft.booking_date)

    def _require(self, *states: BookingState):
        if self.state not in states:
            raise WorkflowStateError(
                f"Cannot do that from state '{self.state.value}'"
            )

    def _reject(self, error):
        self.state = BookingState.rejected
        logger.warning(
            f"Booking attempt rejected ({type(error).__name__}): barber={self.draft.barber_id} "
            f"{self.draft.booking_date} {self.draft.booking_time}"
        )
        raise error

    def validate(self, now: datetime) -> None:
        draft = self.draft
        self.phone_number, self.country_code = normalize_phone(self.phone_number, self.country_code)

        if draft.barber_id not in BARBERS:
            raise ValidationError("Unknown barber")
        if not draft.services:
            raise ValidationError("Select at least one service")
        unknown = [s for s in draft.services if s not in SERVICES]
        if unknown:
            raise ValidationError(f"Unknown service: {', '.join(unknown)}")
        if len(set(draft.services)) != len(draft.services):
            raise ValidationError("services cannot contain duplicates")

        on_date = self.booking_date
        if not is_bookable(on_date, draft.booking_time, self.hours, now):
            raise ValidationError("The selected date and time cannot be booked")

        if abs(draft.total_price - services_total(draft.services)) > 0.005:
            raise ValidationError("totalPrice does not match the selected services")

    def request_code(self, session: Session, sms, now: datetime) -> None:
        """Draft -> CodeRequested. Re-checks the slot, then texts a code."""
        self._require(BookingState.draft)
        self.validate(now)

        on_date = self.booking_date
        candidates = generate_slots(on_date, self.hours, now)
        still_free = filter_available(session, candidates, on_date, self.draft.barber_id)
        if self.draft.booking_time not in still_free:
            self.state = BookingState.draft
            raise SlotUnavailable(available_times=still_free)

        issue_code(session, sms, self.phone_number, self.country_code, now)
        self.state = BookingState.code_requested

    def submit_code(self, code: str) -> None:
        """CodeRequested -> Verifying"""
        self._require(BookingState.code_requested)
        code = (code or "").strip()
        if not CODE_PATTERN.match(code):
            raise ValidationError("Verification code must be 6 digits")
        self.code = code
        self.state = BookingState.verifying

    def confirm(self, session: Session, now: datetime) -> Booking:
        """
        Verifying -> Confirmed | Rejected

        The exact slot is re-read before the code is touched, so a taken slot
        leaves the code unused. Once verify_code() succeeds the code is spent,
        whatever happens to the insert.
        """
        self._require(BookingState.verifying)
        try:
            self.validate(now)
        except ValidationError as e:
            self._reject(e)

        draft = self.draft
        on_date = self.booking_date

        # 1) Conflict re-check
        try:
            existing = find_confirmed_booking(session, draft.barber_id, on_date, draft.booking_time)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Conflict check failed: {e}")
            self._reject(PersistenceError("Failed to check slot availability"))
        if existing is not None:
            self._reject(SlotTaken(available_times=self._refreshed_slots(session, now)))

        # 2) Redeem the code
        try:
            valid = verify_code(session, self.phone_number, self.country_code, self.code, now)
        except PersistenceError as e:
            self._reject(e)
        if not valid:
            self._reject(InvalidCode())

        # 3) Write the booking
        booking = Booking(
            barber_id=draft.barber_id,
            services=list(draft.services),
            booking_date=on_date,
            booking_time=draft.booking_time,
            total_price=services_total(draft.services),
            phone_number=self.phone_number,
            country_code=self.country_code,
            is_verified=True,
            created_at=as_utc(now),
        )
        session.add(booking)
        try:
            session.commit()
            session.refresh(booking)
        except IntegrityError:
            # lost the race to a concurrent writer
            session.rollback()
            self._reject(SlotTaken(available_times=self._refreshed_slots(session, now)))
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Booking creation error: {e}")
            self._reject(PersistenceError("Failed to create booking"))

        self.booking = booking
        self.state = BookingState.confirmed
        logger.info(
            f"Booking {booking.id} confirmed: barber={booking.barber_id} "
            f"{booking.booking_date} {booking.booking_time}"
        )
        return booking

    def _refreshed_slots(self, session: Session, now: datetime):
        return available_slots(session, self.booking_date, self.draft.barber_id, self.hours, now)
