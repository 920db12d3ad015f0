# barbershop/data.py

from .config import (
    SHOP_NAME, SHOP_TIMEZONE, OPEN_HOUR, CLOSE_HOUR, SLOT_MINUTES, CLOSED_DAYS
)

# prices in EUR
SERVICES = {
    "haircut": {"name": "Haircut", "price": 10, "description": "Professional cut & styling"},
    "beard": {"name": "Beard Trimming", "price": 5, "description": "Precise beard shaping"},
}

BARBERS = {
    "elias": "Elias",
    "george": "George",
    "charalambos": "Charalambos",
}

# Sunday = 0 ... Saturday = 6
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

shop_settings = {
    "name": SHOP_NAME,
    "timezone": SHOP_TIMEZONE,
    "open_hour": OPEN_HOUR,
    "close_hour": CLOSE_HOUR,
    "slot_minutes": SLOT_MINUTES,
    "closed_days": CLOSED_DAYS,
    "combo_note": "Both services for just €15",
}


def services_total(service_ids) -> int:
    return sum(SERVICES[s]["price"] for s in service_ids)
