# barbershop/routers/admin_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from barbershop.auth import ADMIN_SCOPE, authenticate_admin, create_access_token, get_current_admin
from barbershop.db import get_session
from barbershop.errors import PersistenceError
from barbershop.models import Booking
from barbershop.schemas import BookingPublic, DeleteResponse, Token

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["admin"],
)


@router.post("/admin/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends()):
    if not authenticate_admin(form_data.username, form_data.password):
        logger.warning(f"Failed admin login for '{form_data.username}'")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": form_data.username, "scope": ADMIN_SCOPE})
    return {"access_token": token, "token_type": "bearer"}


@router.get("/bookings", response_model=List[BookingPublic])
def list_bookings(
    session: Session = Depends(get_session),
    admin: str = Depends(get_current_admin),
):
    stmt = (
        select(Booking)
        .where(Booking.is_verified == True)  # noqa: E712
        .order_by(Booking.booking_date, Booking.booking_time)
    )
    try:
        return session.exec(stmt).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching bookings: {e}")
        raise PersistenceError("Failed to load bookings") from e


@router.delete("/bookings/{booking_id}", response_model=DeleteResponse)
def delete_booking(
    booking_id: int,
    session: Session = Depends(get_session),
    admin: str = Depends(get_current_admin),
):
    try:
        target = session.get(Booking, booking_id)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to load booking {booking_id}: {e}")
        raise PersistenceError("Failed to load the booking") from e
    if target is None:
        raise HTTPException(status_code=404, detail="Booking not found")

    session.delete(target)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to delete booking {booking_id}: {e}")
        raise PersistenceError("Failed to delete the booking") from e

    logger.info(f"Booking {booking_id} deleted by {admin}")
    return {"success": True}
