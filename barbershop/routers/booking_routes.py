# barbershop/routers/booking_routes.py

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barbershop.booking import BookingAttempt, BookingState, normalize_phone
from barbershop.core import BusinessHours
from barbershop.db import get_session
from barbershop.deps import get_hours, get_now
from barbershop.schemas import (
    BookingPublic, SendCodeRequest, SendCodeResponse, VerifyRequest, VerifyResponse
)
from barbershop.sms import TwilioSMS, get_sms_transport
from barbershop.verification import issue_code

router = APIRouter(
    tags=["booking"],
)


@router.post("/sms/send", response_model=SendCodeResponse)
def send_code(
    body: SendCodeRequest,
    session: Session = Depends(get_session),
    sms: TwilioSMS = Depends(get_sms_transport),
    hours: BusinessHours = Depends(get_hours),
    now: datetime = Depends(get_now),
):
    # With booking details: full draft validation and slot freshness check
    if body.booking_data is not None:
        attempt = BookingAttempt(body.booking_data, body.phone_number, body.country_code, hours=hours)
        attempt.request_code(session, sms, now)
        return SendCodeResponse()

    phone_number, country_code = normalize_phone(body.phone_number, body.country_code)
    issue_code(session, sms, phone_number, country_code, now)
    return SendCodeResponse()


@router.post("/verify", response_model=VerifyResponse)
def verify(
    body: VerifyRequest,
    session: Session = Depends(get_session),
    hours: BusinessHours = Depends(get_hours),
    now: datetime = Depends(get_now),
):
    attempt = BookingAttempt(
        body.booking_data,
        body.phone_number,
        body.country_code,
        hours=hours,
        state=BookingState.code_requested,
    )
    attempt.submit_code(body.code)
    booking = attempt.confirm(session, now)
    return VerifyResponse(booking=BookingPublic.model_validate(booking))
