# backend/interview_booking/core/slot_lock.py
"""
Short-lived Redis mutex over a single slot key.

The database's partial unique index is what guarantees one confirmed
booking per slot. This lock only keeps concurrent writers for the same
slot from racing all the way to the database. It fails open: when Redis
is unreachable the write proceeds and the index decides.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
import logging
import time
from typing import Iterator, Optional

from redis import Redis

from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)


def slot_lock_key(booking_link_id: str, slot_date: date, slot_time: str) -> str:
    return f"slot:{booking_link_id}:{slot_date.isoformat()}:{slot_time}:mutex"


class SlotLock:
    """Acquire and release per-slot locks on an optional Redis client."""

    def __init__(self, client: Optional[Redis] = None, ttl_s: int = 30) -> None:
        self.client = client
        self.ttl_s = ttl_s

    @classmethod
    def from_url(cls, redis_url: Optional[str], ttl_s: int = 30) -> "SlotLock":
        """Build a lock backed by ``redis_url``; a missing URL disables locking."""
        if not redis_url:
            return cls(None, ttl_s)
        try:
            client = Redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
            client.ping()
        except Exception as exc:
            logger.warning("slot_lock_redis_unavailable: %s", exc)
            return cls(None, ttl_s)
        return cls(client, ttl_s)

    def acquire(self, key: str) -> bool:
        if self.client is None:
            prometheus_metrics.record_slot_lock("acquire", "redis_unavailable")
            return True
        try:
            acquired = bool(self.client.set(key, str(time.time()), nx=True, ex=self.ttl_s))
        except Exception as exc:
            prometheus_metrics.record_slot_lock("acquire", "error")
            logger.warning(
                "slot_lock_acquire_failed",
                extra={"key": key, "error": str(exc), "error_type": type(exc).__name__},
            )
            return True
        prometheus_metrics.record_slot_lock("acquire", "success" if acquired else "blocked")
        return acquired

    def release(self, key: str) -> None:
        if self.client is None:
            return
        try:
            deleted = self.client.delete(key)
            prometheus_metrics.record_slot_lock("release", "success" if deleted else "not_found")
        except Exception as exc:
            prometheus_metrics.record_slot_lock("release", "error")
            logger.warning(
                "slot_lock_release_failed",
                extra={"key": key, "error": str(exc), "error_type": type(exc).__name__},
            )

    @contextmanager
    def hold(self, key: str) -> Iterator[bool]:
        """Yield whether the lock was acquired, releasing it on exit."""
        acquired = self.acquire(key)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(key)
