"""
Timezone utilities for the booking engine.

Every date and time the engine reasons about lives in one fixed zone,
configured by ``settings.timezone``.
"""

from datetime import date, datetime, time
from typing import Callable

import pytz

from .config import settings

Clock = Callable[[], datetime]


def get_zone() -> pytz.BaseTzInfo:
    """Return the configured scheduling timezone."""
    return pytz.timezone(settings.timezone)


def get_local_now() -> datetime:
    """Current aware datetime in the scheduling timezone."""
    return datetime.now(get_zone())


def localize(value: datetime) -> datetime:
    """
    Attach the scheduling timezone to a naive datetime.

    Aware datetimes are converted instead of relabelled.
    """
    zone = get_zone()
    if value.tzinfo is None:
        return zone.localize(value)
    return value.astimezone(zone)


def slot_start(slot_date: date, slot_time: time) -> datetime:
    """Aware start datetime of a slot on a given date."""
    return localize(datetime.combine(slot_date, slot_time))
