# barbershop/models.py

from typing import Optional, List
from datetime import datetime, timezone, date as Date

from sqlalchemy import DateTime, Index, text
from sqlalchemy.types import JSON, TypeDecorator
from sqlmodel import SQLModel, Field, Column


class UTCDateTime(TypeDecorator):
    """Aware datetimes stored as naive UTC, returned aware in UTC. Naive values are refused."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            raise ValueError("Datetime values must have timezone information")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return value.replace(tzinfo=timezone.utc)


class Booking(SQLModel, table=True):
    __tablename__ = "bookings"
    __table_args__ = (
        # at most one verified booking per barber/date/time
        Index(
            "uq_verified_barber_slot",
            "barber_id", "booking_date", "booking_time",
            unique=True,
            sqlite_where=text("is_verified"),
            postgresql_where=text("is_verified"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    barber_id: str = Field(index=True)
    services: List[str] = Field(sa_column=Column(JSON, nullable=False))
    booking_date: Date = Field(index=True)
    booking_time: str  # "HH:MM"
    total_price: float
    phone_number: str
    country_code: str
    is_verified: bool = False
    created_at: datetime = Field(sa_column=Column(UTCDateTime, nullable=False))


class VerificationCode(SQLModel, table=True):
    __tablename__ = "verification_codes"

    id: Optional[int] = Field(default=None, primary_key=True)

    phone_number: str = Field(index=True)
    country_code: str
    code: str
    expires_at: datetime = Field(sa_column=Column(UTCDateTime, nullable=False, index=True))
    is_used: bool = False
    created_at: datetime = Field(sa_column=Column(UTCDateTime, nullable=False))
