# backend/interview_booking/services/availability_cache_service.py
"""
Month availability cache.

Materializes the calculator's per-day summaries one month at a time so
the month overview does not recompute every day on every read.

Policy:
- Entries are computed lazily on first read.
- Entries older than ``cache_stale_after_minutes`` are recomputed on read.
- Booking events patch a single day of an existing entry.
- Template and link changes delete whole months.
- Entries expire outright ``cache_expiry_days`` after their last compute.

The cache is advisory: event-driven invalidation logs and swallows its
own failures so it can never fail the operation that triggered it.
"""

import calendar
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

import pytz
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import CACHE_VERSION
from ..core.exceptions import NotFoundException
from ..models.availability_cache import MonthAvailabilityCache
from ..models.booking_link import CACHE_AFFECTING_FIELDS, BookingLink
from ..models.template import Template
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .availability_calculator import AvailabilityCalculator
from .base import BaseService

Month = Tuple[int, int]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=pytz.utc)
    return value.astimezone(pytz.utc)


def months_from(start: date, count: int) -> List[Month]:
    """``count`` consecutive (year, month) pairs starting with ``start``'s month."""
    months = []
    year, month = start.year, start.month
    for _ in range(count):
        months.append((year, month))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months


class AvailabilityCacheService(BaseService):
    """Owns the month_availability_cache table and its invalidation rules."""

    def __init__(
        self,
        db: Session,
        calculator: AvailabilityCalculator,
        cache_repository=None,
        booking_link_repository=None,
        template_repository=None,
        booking_repository=None,
    ):
        super().__init__(db)
        self.calculator = calculator
        self.cache_repository = (
            cache_repository or RepositoryFactory.create_availability_cache_repository(db)
        )
        self.booking_link_repository = (
            booking_link_repository or RepositoryFactory.create_booking_link_repository(db)
        )
        self.template_repository = (
            template_repository or RepositoryFactory.create_template_repository(db)
        )
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.stale_after = timedelta(minutes=settings.cache_stale_after_minutes)
        self.expire_after = timedelta(days=settings.cache_expiry_days)

    # Helpers

    def _utc_now(self) -> datetime:
        return self.calculator.now().astimezone(pytz.utc)

    def _is_expired(self, entry: MonthAvailabilityCache, now: datetime) -> bool:
        return _as_utc(entry.expires_at) <= now

    def _is_stale(self, entry: MonthAvailabilityCache, now: datetime) -> bool:
        return now - _as_utc(entry.last_updated) > self.stale_after

    def _load_link_and_template(self, booking_link_id: str) -> Tuple[BookingLink, Template]:
        link = self.booking_link_repository.get_by_id(booking_link_id)
        if not link:
            raise NotFoundException("Booking link not found", code="BOOKING_LINK_NOT_FOUND")
        template = self.template_repository.get_by_id(link.template_id)
        if not template:
            raise NotFoundException("Template not found", code="TEMPLATE_NOT_FOUND")
        return link, template

    def _compute_month(self, booking_link_id: str, year: int, month: int) -> Dict[str, Dict[str, Any]]:
        link, template = self._load_link_and_template(booking_link_id)

        booked: Dict[date, List[str]] = defaultdict(list)
        for booking in self.booking_repository.find_confirmed_by_link_and_month(
            booking_link_id, year, month
        ):
            booked[booking.selected_date].append(booking.selected_time)

        days: Dict[str, Dict[str, Any]] = {}
        for day in range(1, calendar.monthrange(year, month)[1] + 1):
            on_date = date(year, month, day)
            summary = self.calculator.day_summary(template, link, on_date, booked.get(on_date, []))
            days[str(day)] = {
                "available": summary.available,
                "slotsCount": summary.available_slots,
            }
        return days

    def _store(self, booking_link_id: str, year: int, month: int) -> MonthAvailabilityCache:
        now = self._utc_now()
        with self.transaction():
            days = self._compute_month(booking_link_id, year, month)
            return self.cache_repository.put_entry(
                booking_link_id,
                year,
                month,
                days,
                last_updated=now,
                expires_at=now + self.expire_after,
            )

    # Read path

    @BaseService.measure_operation("get_month")
    def get_month(self, booking_link_id: str, year: int, month: int) -> MonthAvailabilityCache:
        """Return a fresh entry, recomputing when absent, expired or stale."""
        now = self._utc_now()
        entry = self.cache_repository.get_entry(booking_link_id, year, month)

        if entry is None or self._is_expired(entry, now):
            result = "miss"
        elif self._is_stale(entry, now):
            result = "stale"
        else:
            prometheus_metrics.record_cache_lookup("hit")
            self.logger.debug(f"Month cache hit for {booking_link_id} {year}-{month:02d}")
            return entry

        prometheus_metrics.record_cache_lookup(result)
        self.logger.debug(f"Month cache {result} for {booking_link_id} {year}-{month:02d}")
        return self._store(booking_link_id, year, month)

    def month_availability(self, booking_link_id: str, year: int, month: int) -> List[Dict[str, Any]]:
        """
        Day-by-day availability for a month, served from the cache.

        The cached form keeps only the offerable count, so totalSlots and
        availableSlots both report it.
        """
        entry = self.get_month(booking_link_id, year, month)
        result = []
        for day in range(1, calendar.monthrange(year, month)[1] + 1):
            cached = (entry.days or {}).get(str(day), {"available": False, "slotsCount": 0})
            result.append(
                {
                    "date": date(year, month, day).isoformat(),
                    "available": bool(cached["available"]),
                    "totalSlots": int(cached["slotsCount"]),
                    "availableSlots": int(cached["slotsCount"]),
                }
            )
        return result

    # Targeted updates and invalidation

    @BaseService.measure_operation("update_day")
    def update_day(self, booking_link_id: str, on_date: date) -> bool:
        """
        Recompute one day inside an existing month entry.

        Returns False without doing anything when the month is not cached;
        the next read computes it from scratch.
        """
        entry = self.cache_repository.get_entry(booking_link_id, on_date.year, on_date.month)
        if entry is None or self._is_expired(entry, self._utc_now()):
            self.logger.debug(f"No cache entry for {booking_link_id} {on_date:%Y-%m}, skipping")
            return False

        with self.transaction():
            link, template = self._load_link_and_template(booking_link_id)
            booked_times = [
                b.selected_time
                for b in self.booking_repository.find_confirmed_by_link_and_date(
                    booking_link_id, on_date
                )
            ]
            summary = self.calculator.day_summary(template, link, on_date, booked_times)
            days = dict(entry.days or {})
            days[str(on_date.day)] = {
                "available": summary.available,
                "slotsCount": summary.available_slots,
            }
            self.cache_repository.put_entry(
                booking_link_id,
                on_date.year,
                on_date.month,
                days,
                last_updated=_as_utc(entry.last_updated),
                expires_at=_as_utc(entry.expires_at),
            )
        return True

    @BaseService.measure_operation("invalidate")
    def invalidate(self, booking_link_id: str, months: Iterable[Month]) -> int:
        """Delete specific month entries, forcing recompute on next read."""
        deleted = 0
        with self.transaction():
            for year, month in months:
                if self.cache_repository.delete_entry(booking_link_id, year, month):
                    deleted += 1
        self.logger.debug(f"Invalidated {deleted} cached month(s) for {booking_link_id}")
        return deleted

    def upcoming_months(self, count: Optional[int] = None) -> List[Month]:
        return months_from(self.calculator.today(), count or settings.cache_invalidation_months)

    def invalidate_for_template(self, template_id: str) -> int:
        """Invalidate upcoming months for every link built on a template."""
        try:
            links = self.booking_link_repository.list_by_template(template_id)
            months = self.upcoming_months()
            total = sum(self.invalidate(link.id, months) for link in links)
            self.log_operation(
                "invalidate_for_template",
                template_id=template_id,
                links=len(links),
                deleted=total,
            )
            return total
        except Exception as e:
            self.logger.warning(f"Failed to invalidate cache for template {template_id}: {e}")
            return 0

    def invalidate_for_link_change(
        self,
        booking_link_id: str,
        before: Mapping[str, Any],
        after: Mapping[str, Any],
    ) -> bool:
        """Invalidate a link's upcoming months if an availability field changed."""
        changed = [f for f in CACHE_AFFECTING_FIELDS if before.get(f) != after.get(f)]
        if not changed:
            return False
        try:
            self.invalidate(booking_link_id, self.upcoming_months())
            self.log_operation(
                "invalidate_for_link_change",
                booking_link_id=booking_link_id,
                changed_fields=changed,
            )
            return True
        except Exception as e:
            self.logger.warning(f"Failed to invalidate cache for link {booking_link_id}: {e}")
            return False

    def invalidate_link(self, booking_link_id: str) -> bool:
        """Invalidate a link's upcoming months unconditionally (used before deletion)."""
        try:
            self.invalidate(booking_link_id, self.upcoming_months())
            return True
        except Exception as e:
            self.logger.warning(f"Failed to invalidate cache for link {booking_link_id}: {e}")
            return False

    def invalidate_for_booking_event(
        self,
        booking_link_id: str,
        on_date: date,
        event: str,
        previous_date: Optional[date] = None,
    ) -> None:
        """Patch the day(s) a booking, cancellation or reschedule touched."""
        affected: Set[date] = {on_date}
        if previous_date is not None:
            affected.add(previous_date)
        for day in sorted(affected):
            try:
                self.update_day(booking_link_id, day)
            except Exception as e:
                self.logger.warning(
                    f"Failed to update cached day {day} for {booking_link_id} after {event}: {e}"
                )

    # Maintenance

    @BaseService.measure_operation("warm_cache")
    def warm_cache(self, booking_link_id: str, months_ahead: Optional[int] = None) -> List[str]:
        """Recompute the current month and the following ones."""
        count = settings.cache_warm_months_ahead if months_ahead is None else months_ahead
        warmed = []
        for year, month in months_from(self.calculator.today(), count):
            self._store(booking_link_id, year, month)
            warmed.append(f"{year}-{month:02d}")
        self.log_operation("warm_cache", booking_link_id=booking_link_id, months=warmed)
        return warmed

    def get_cache_stats(self, booking_link_id: str) -> Dict[str, Any]:
        now = self._utc_now()
        months = []
        counts = {"cached": 0, "stale": 0, "missing": 0}
        for year, month in months_from(self.calculator.today(), settings.cache_stats_months):
            entry = self.cache_repository.get_entry(booking_link_id, year, month)
            if entry is None or self._is_expired(entry, now):
                state = "missing"
            elif self._is_stale(entry, now):
                state = "stale"
            else:
                state = "cached"
            counts[state] += 1
            months.append(
                {
                    "month": f"{year}-{month:02d}",
                    "state": state,
                    "lastUpdated": (
                        _as_utc(entry.last_updated).isoformat() if state != "missing" else None
                    ),
                }
            )
        return {
            "bookingLinkId": booking_link_id,
            "cacheVersion": CACHE_VERSION,
            "cachedMonths": counts["cached"],
            "staleMonths": counts["stale"],
            "missingMonths": counts["missing"],
            "months": months,
        }

    @BaseService.measure_operation("purge_expired")
    def purge_expired(self) -> int:
        with self.transaction():
            deleted = self.cache_repository.delete_expired(self._utc_now())
        if deleted:
            self.logger.info(f"Purged {deleted} expired month cache entries")
        return deleted
