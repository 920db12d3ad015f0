# barbershop/deps.py

from datetime import datetime

from .core import BusinessHours, shop_hours, shop_now


def get_now() -> datetime:
    return shop_now()


def get_hours() -> BusinessHours:
    return shop_hours()
