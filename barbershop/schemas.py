# barbershop/schemas.py

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime, date
from typing import List, Optional


class CamelModel(BaseModel):
    # JSON uses camelCase keys; Python code may use either
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class BookingData(CamelModel):
    barber_id: str
    services: List[str]
    booking_date: str      # YYYY-MM-DD
    booking_time: str      # HH:MM
    total_price: float


class SendCodeRequest(CamelModel):
    phone_number: str
    country_code: str
    booking_data: Optional[BookingData] = None


class VerifyRequest(CamelModel):
    phone_number: str
    country_code: str
    code: str
    booking_data: BookingData


class BookingPublic(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    barber_id: str
    services: List[str]
    booking_date: date
    booking_time: str
    total_price: float
    phone_number: str
    country_code: str
    is_verified: bool
    created_at: datetime


class SendCodeResponse(BaseModel):
    success: bool = True
    message: str = "Verification code sent successfully"


class VerifyResponse(BaseModel):
    success: bool = True
    message: str = "Booking confirmed successfully"
    booking: BookingPublic


class DeleteResponse(BaseModel):
    success: bool


class SlotsResponse(CamelModel):
    date: date
    barber_id: Optional[str] = None
    available_times: List[str]


class DatesResponse(BaseModel):
    dates: List[date]


class ServicePublic(BaseModel):
    id: str
    name: str
    price: float
    description: str


class BarberPublic(BaseModel):
    id: str
    name: str


class OpeningHours(BaseModel):
    day: str
    open: Optional[str] = None
    close: Optional[str] = None
    closed: bool = False


class BusinessInfo(CamelModel):
    name: str
    timezone: str
    opening_hours: List[OpeningHours]
    slot_minutes: int = Field(description="Slot granularity in minutes")
    services: List[ServicePublic]
    barbers: List[BarberPublic]
    combo_note: str
