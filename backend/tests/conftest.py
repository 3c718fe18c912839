# backend/tests/conftest.py
"""
Shared fixtures for the booking engine tests.

Every test gets its own in-memory SQLite database and a frozen clock set
to Monday 2025-06-09 10:00 in America/New_York. The default template
offers Monday to Friday, 09:00-12:00.
"""

from datetime import date, datetime, timedelta
import os
from typing import Any, Dict, Optional

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytz
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from interview_booking.core.slot_lock import SlotLock
from interview_booking.database import Base
import interview_booking.models  # noqa: F401
from interview_booking.models.booking import Booking
from interview_booking.models.booking_link import BookingLink
from interview_booking.models.template import Template
from interview_booking.services.availability_cache_service import AvailabilityCacheService
from interview_booking.services.availability_calculator import AvailabilityCalculator
from interview_booking.services.availability_service import AvailabilityService
from interview_booking.services.booking_link_service import BookingLinkService
from interview_booking.services.booking_management_service import BookingManagementService
from interview_booking.services.booking_service import BookingService
from interview_booking.services.slot_generator import validate_weekly_schedule
from interview_booking.services.template_service import TemplateService

NEW_YORK = pytz.timezone("America/New_York")
FROZEN_NOW = NEW_YORK.localize(datetime(2025, 6, 9, 10, 0))

WEEKDAY_MORNINGS = {
    day: [{"startTime": "09:00", "endTime": "12:00"}]
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
}


class FrozenClock:
    """Callable clock that only moves when a test moves it."""

    def __init__(self, now: datetime = FROZEN_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)

    def set(self, value: datetime) -> None:
        self.now = value if value.tzinfo else NEW_YORK.localize(value)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def calculator(clock) -> AvailabilityCalculator:
    return AvailabilityCalculator(clock=clock)


@pytest.fixture
def cache_service(db, calculator) -> AvailabilityCacheService:
    return AvailabilityCacheService(db, calculator)


@pytest.fixture
def availability_service(db, calculator, cache_service) -> AvailabilityService:
    return AvailabilityService(db, calculator, cache_service)


@pytest.fixture
def booking_service(db, availability_service, cache_service) -> BookingService:
    return BookingService(db, availability_service, cache_service, SlotLock(None))


@pytest.fixture
def management_service(db, booking_service) -> BookingManagementService:
    return BookingManagementService(db, booking_service)


@pytest.fixture
def template_service(db, cache_service) -> TemplateService:
    return TemplateService(db, cache_service)


@pytest.fixture
def link_service(db, cache_service) -> BookingLinkService:
    return BookingLinkService(db, cache_service)


# Factories


@pytest.fixture
def make_template(db):
    counter = {"n": 0}

    def _make(
        weekly_schedule: Optional[Dict[str, Any]] = None,
        blackout_days=(),
        booking_cutoff_date: Optional[date] = None,
        name: Optional[str] = None,
    ) -> Template:
        counter["n"] += 1
        template = Template(
            name=name or f"Template {counter['n']}",
            weekly_schedule=validate_weekly_schedule(
                WEEKDAY_MORNINGS if weekly_schedule is None else weekly_schedule
            ),
            blackout_days=sorted(blackout_days),
            booking_cutoff_date=booking_cutoff_date,
        )
        db.add(template)
        db.commit()
        return template

    return _make


@pytest.fixture
def make_link(db):
    counter = {"n": 0}

    def _make(
        template: Template,
        slug: Optional[str] = None,
        require_advance_booking: bool = False,
        advance_hours: int = 0,
        is_active: bool = True,
    ) -> BookingLink:
        counter["n"] += 1
        link = BookingLink(
            name=f"Link {counter['n']}",
            template_id=template.id,
            url_slug=slug or f"interview-{counter['n']}",
            duration=30,
            require_advance_booking=require_advance_booking,
            advance_hours=advance_hours,
            is_active=is_active,
        )
        db.add(link)
        db.commit()
        return link

    return _make


@pytest.fixture
def make_booking(db):
    def _make(link: BookingLink, on_date: date, start_time: str, **overrides) -> Booking:
        values = {
            "booking_link_id": link.id,
            "selected_date": on_date,
            "selected_time": start_time,
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
        }
        values.update(overrides)
        booking = Booking(**values)
        db.add(booking)
        db.commit()
        return booking

    return _make


@pytest.fixture
def template(make_template) -> Template:
    return make_template()


@pytest.fixture
def link(make_link, template) -> BookingLink:
    return make_link(template, slug="engineering-screen")


@pytest.fixture
def candidate() -> Dict[str, Any]:
    return {
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": "grace@example.com",
        "phone": "555-0100",
        "role": "Backend Engineer",
        "notes": None,
    }
