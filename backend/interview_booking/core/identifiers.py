# backend/interview_booking/core/identifiers.py
"""
Entity identifier helpers.

Identifiers have the shape PREFIX_TIMESTAMP_RANDOM:
- PREFIX: 2-5 uppercase letters/digits naming the entity kind
- TIMESTAMP: 13-digit creation time in epoch milliseconds
- RANDOM: 4-12 letters/digits

The prefix is the only referential check the storage layer gets, so every
cross-entity reference is parsed into an EntityId of the expected kind
before it is trusted.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import re
import secrets
import string
import time
from typing import Optional

from .exceptions import ValidationException

_PREFIX_RE = re.compile(r"^[A-Z0-9]{2,5}$")
_TIMESTAMP_RE = re.compile(r"^\d{13}$")
_RANDOM_RE = re.compile(r"^[A-Za-z0-9]{4,12}$")
_RANDOM_ALPHABET = string.ascii_letters + string.digits


class EntityKind(str, Enum):
    """Entity kinds and their identifier prefixes."""

    TEMPLATE = "TPL"
    BOOKING_LINK = "BL"
    BOOKING = "BKG"
    TIME_SLOT = "TS"

    @property
    def random_length(self) -> int:
        return _RANDOM_LENGTHS[self]

    @classmethod
    def from_prefix(cls, prefix: str) -> Optional["EntityKind"]:
        try:
            return cls(prefix)
        except ValueError:
            return None


_RANDOM_LENGTHS = {
    EntityKind.TEMPLATE: 8,
    EntityKind.BOOKING_LINK: 8,
    EntityKind.BOOKING: 10,
    EntityKind.TIME_SLOT: 6,
}


def _random_string(length: int) -> str:
    return "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(length))


def generate(prefix: str, random_length: int = 6) -> str:
    """
    Generate an identifier for an arbitrary prefix.

    Raises:
        ValueError: If the prefix or random length is outside the allowed shape
    """
    if not _PREFIX_RE.match(prefix or ""):
        raise ValueError("Prefix must be 2-5 uppercase letters or digits")
    if not 4 <= random_length <= 12:
        raise ValueError("Random part length must be between 4 and 12")

    timestamp_ms = int(time.time() * 1000)
    return f"{prefix}_{timestamp_ms}_{_random_string(random_length)}"


def _split(value: object) -> Optional[tuple[str, str, str]]:
    if not isinstance(value, str):
        return None
    parts = value.split("_")
    if len(parts) != 3:
        return None
    prefix, timestamp, random_part = parts
    if not _PREFIX_RE.match(prefix):
        return None
    if not _TIMESTAMP_RE.match(timestamp):
        return None
    if not _RANDOM_RE.match(random_part):
        return None
    return prefix, timestamp, random_part


def is_valid_id(value: object) -> bool:
    """Check the three-part shape and each part's charset and length."""
    return _split(value) is not None


def is_entity_type(value: object, prefix: str) -> bool:
    parts = _split(value)
    return parts is not None and parts[0] == prefix


def is_template_id(value: object) -> bool:
    return is_entity_type(value, EntityKind.TEMPLATE.value)


def is_booking_link_id(value: object) -> bool:
    return is_entity_type(value, EntityKind.BOOKING_LINK.value)


def is_booking_id(value: object) -> bool:
    return is_entity_type(value, EntityKind.BOOKING.value)


def get_entity_type(value: object) -> Optional[EntityKind]:
    parts = _split(value)
    if parts is None:
        return None
    return EntityKind.from_prefix(parts[0])


def extract_timestamp(value: object) -> Optional[datetime]:
    """Return the creation time embedded in an identifier, in UTC."""
    parts = _split(value)
    if parts is None:
        return None
    return datetime.fromtimestamp(int(parts[1]) / 1000, tz=timezone.utc)


@dataclass(frozen=True)
class EntityId:
    """An identifier that has been validated and tagged with its kind."""

    kind: EntityKind
    timestamp_ms: int
    random: str

    @property
    def value(self) -> str:
        return f"{self.kind.value}_{self.timestamp_ms}_{self.random}"

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=timezone.utc)

    def __str__(self) -> str:
        return self.value

    @classmethod
    def new(cls, kind: EntityKind) -> "EntityId":
        return cls.parse(generate(kind.value, kind.random_length), kind)

    @classmethod
    def parse(cls, raw: object, expected_kind: Optional[EntityKind] = None) -> "EntityId":
        """
        Validate a raw identifier once at the boundary.

        Args:
            raw: Incoming identifier
            expected_kind: Kind the caller requires, if any

        Raises:
            ValidationException: If the shape is invalid, the prefix is unknown,
                or the kind differs from the expected one
        """
        parts = _split(raw)
        if parts is None:
            raise ValidationException("Invalid ID format", code="INVALID_ID")

        prefix, timestamp, random_part = parts
        kind = EntityKind.from_prefix(prefix)
        if kind is None:
            raise ValidationException(
                f"Unknown identifier prefix: {prefix}",
                code="INVALID_ID",
            )
        if expected_kind is not None and kind is not expected_kind:
            raise ValidationException(
                f"Invalid {expected_kind.name.lower().replace('_', ' ')} ID",
                code="INVALID_ID",
                details={"expected": expected_kind.value, "actual": kind.value},
            )
        return cls(kind=kind, timestamp_ms=int(timestamp), random=random_part)


def generate_template_id() -> str:
    return EntityId.new(EntityKind.TEMPLATE).value


def generate_booking_link_id() -> str:
    return EntityId.new(EntityKind.BOOKING_LINK).value


def generate_booking_id() -> str:
    return EntityId.new(EntityKind.BOOKING).value


def generate_time_slot_id() -> str:
    return EntityId.new(EntityKind.TIME_SLOT).value
