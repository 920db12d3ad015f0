# barbershop/core.py

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import FrozenSet, List
from zoneinfo import ZoneInfo

from .data import shop_settings


@dataclass(frozen=True)
class BusinessHours:
    open_hour: int = 9
    close_hour: int = 19
    slot_minutes: int = 60          # 60 or 30
    closed_days: FrozenSet[int] = field(default_factory=lambda: frozenset({0, 4}))  # 0=Sun, 4=Thu
    timezone: str = "Asia/Nicosia"

    def __post_init__(self):
        if self.slot_minutes not in (30, 60):
            raise ValueError("slot_minutes must be 30 or 60")
        if not (0 <= self.open_hour < self.close_hour <= 24):
            raise ValueError("open_hour must be before close_hour")
        for day in self.closed_days:
            if not (0 <= day <= 6):
                raise ValueError("closed_days must be integers between 0 and 6")
        ZoneInfo(self.timezone)


def shop_hours() -> BusinessHours:
    return BusinessHours(
        open_hour=shop_settings["open_hour"],
        close_hour=shop_settings["close_hour"],
        slot_minutes=shop_settings["slot_minutes"],
        closed_days=frozenset(shop_settings["closed_days"]),
        timezone=shop_settings["timezone"],
    )


def shop_now() -> datetime:
    """Current time in the shop's timezone (aware)."""
    return datetime.now(ZoneInfo(shop_settings["timezone"]))


def wall_clock(now: datetime, hours: BusinessHours) -> datetime:
    """Naive shop-local wall time for `now`. Naive input is taken as already local."""
    if now.tzinfo is None:
        return now
    return now.astimezone(ZoneInfo(hours.timezone)).replace(tzinfo=None)


def sunday_weekday(day: date) -> int:
    # date.weekday() is 0=Mon; the shop counts 0=Sun
    return (day.weekday() + 1) % 7


def is_business_day(day: date, hours: BusinessHours) -> bool:
    return sunday_weekday(day) not in hours.closed_days


def generate_slots(day: date, hours: BusinessHours, now: datetime) -> List[str]:
    """
    Candidate start times for `day` as "HH:MM" labels in [open_hour, close_hour),
    keeping only those strictly after `now`. Closed days have no slots.
    """
    if not is_business_day(day, hours):
        return []

    local_now = wall_clock(now, hours)
    slot_delta = timedelta(minutes=hours.slot_minutes)
    current = datetime.combine(day, time(hour=hours.open_hour))
    if hours.close_hour == 24:
        day_end = datetime.combine(day + timedelta(days=1), time())
    else:
        day_end = datetime.combine(day, time(hour=hours.close_hour))

    slots = []
    while current < day_end:
        if current > local_now:
            slots.append(current.strftime("%H:%M"))
        current += slot_delta
    return slots


def selectable_dates(start: date, days: int, hours: BusinessHours) -> List[date]:
    return [
        start + timedelta(days=offset)
        for offset in range(days)
        if is_business_day(start + timedelta(days=offset), hours)
    ]


def is_bookable(day: date, time_label: str, hours: BusinessHours, now: datetime) -> bool:
    return time_label in generate_slots(day, hours, now)
