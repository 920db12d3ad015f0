"""Shared test fixtures."""
import re
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from barbershop import models  # noqa: F401
from barbershop.core import BusinessHours
from barbershop.db import get_session
from barbershop.deps import get_hours, get_now
from barbershop.main import app
from barbershop.schemas import BookingData
from barbershop.sms import get_sms_transport

SHOP_TZ = ZoneInfo("Asia/Nicosia")

# Monday 2 June 2025, 08:00 shop time
NOW = datetime(2025, 6, 2, 8, 0, tzinfo=SHOP_TZ)


class FakeSMS:
    """Records messages instead of calling Twilio."""

    def __init__(self):
        self.sent = []
        self.error = None

    def send(self, to: str, body: str) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append((to, body))
        return f"SM{len(self.sent):04d}"

    @property
    def last_code(self) -> str:
        _, body = self.sent[-1]
        return re.search(r"\b\d{6}\b", body).group(0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def sms():
    return FakeSMS()


@pytest.fixture
def hours():
    return BusinessHours(
        open_hour=9,
        close_hour=19,
        slot_minutes=60,
        closed_days=frozenset({0, 4}),
        timezone="Asia/Nicosia",
    )


@pytest.fixture
def draft():
    """Create a booking draft for george on Monday 2 June 2025 at 10:00."""
    def _create(**overrides):
        data = {
            "barber_id": "george",
            "services": ["haircut"],
            "booking_date": "2025-06-02",
            "booking_time": "10:00",
            "total_price": 10,
        }
        data.update(overrides)
        return BookingData(**data)
    return _create


@pytest.fixture
def client(session, sms, hours):
    """Create FastAPI test client with the store, SMS and clock replaced."""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_sms_transport] = lambda: sms
    app.dependency_overrides[get_hours] = lambda: hours
    app.dependency_overrides[get_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()
