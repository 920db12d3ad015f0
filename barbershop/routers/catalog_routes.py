# barbershop/routers/catalog_routes.py

from datetime import datetime, date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from barbershop.availability import available_slots
from barbershop.core import BusinessHours, selectable_dates, wall_clock
from barbershop.data import BARBERS, SERVICES, WEEKDAY_NAMES, shop_settings
from barbershop.db import get_session
from barbershop.deps import get_hours, get_now
from barbershop.errors import ValidationError
from barbershop.schemas import BusinessInfo, DatesResponse, SlotsResponse

router = APIRouter(
    tags=["catalog"],
)


@router.get("/business", response_model=BusinessInfo)
def business_info(hours: BusinessHours = Depends(get_hours)):
    opening_hours = []
    # Monday first, Sunday last
    for day in [1, 2, 3, 4, 5, 6, 0]:
        if day in hours.closed_days:
            opening_hours.append({"day": WEEKDAY_NAMES[day], "closed": True})
        else:
            opening_hours.append({
                "day": WEEKDAY_NAMES[day],
                "open": f"{hours.open_hour:02d}:00",
                "close": f"{hours.close_hour:02d}:00",
            })

    return {
        "name": shop_settings["name"],
        "timezone": shop_settings["timezone"],
        "opening_hours": opening_hours,
        "slot_minutes": hours.slot_minutes,
        "services": [{"id": sid, **s} for sid, s in SERVICES.items()],
        "barbers": [{"id": bid, "name": name} for bid, name in BARBERS.items()],
        "combo_note": shop_settings["combo_note"],
    }


@router.get("/dates", response_model=DatesResponse)
def bookable_dates(
    days: int = Query(14, ge=1, le=90),
    hours: BusinessHours = Depends(get_hours),
    now: datetime = Depends(get_now),
):
    return {"dates": selectable_dates(wall_clock(now, hours).date(), days, hours)}


@router.get("/slots", response_model=SlotsResponse)
def slots(
    on_date: date = Query(..., alias="date"),
    barber_id: Optional[str] = Query(None, alias="barberId"),
    session: Session = Depends(get_session),
    hours: BusinessHours = Depends(get_hours),
    now: datetime = Depends(get_now),
):
    if barber_id is not None and barber_id not in BARBERS:
        raise ValidationError("Unknown barber")

    return {
        "date": on_date,
        "barber_id": barber_id,
        "available_times": available_slots(session, on_date, barber_id, hours, now),
    }
