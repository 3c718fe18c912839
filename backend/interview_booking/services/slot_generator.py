# backend/interview_booking/services/slot_generator.py
"""
Schedule slot generation.

Turns a template's weekly schedule and a calendar date into the ordered
list of fixed-length slots offered that day. Everything here is pure:
no I/O, no clock, and the same inputs always produce the same slots.
"""

from dataclasses import dataclass
from datetime import date, time
import re
from typing import Any, Dict, Iterable, List, Mapping

from ..core.constants import DEFAULT_SLOT_DURATION, TIME_PATTERN, WEEKDAYS
from ..core.exceptions import ValidationException

_TIME_RE = re.compile(TIME_PATTERN)


@dataclass(frozen=True)
class TimeSlot:
    """One bookable interval [start_time, end_time) on a date."""

    id: str
    start_time: str
    end_time: str
    available: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "available": self.available,
        }


def is_valid_time(value: object) -> bool:
    return isinstance(value, str) and _TIME_RE.match(value) is not None


def normalize_time(value: str) -> str:
    """
    Validate a 24-hour time and zero-pad it to HH:MM.

    Raises:
        ValidationException: If the value is not a valid time
    """
    if not is_valid_time(value):
        raise ValidationException(
            f"Invalid time format: {value}. Expected HH:MM",
            code="INVALID_TIME",
        )
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"


def to_minutes(value: str) -> int:
    hours, minutes = normalize_time(value).split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def parse_time(value: str) -> time:
    hours, minutes = normalize_time(value).split(":")
    return time(int(hours), int(minutes))


def weekday_key(on_date: date) -> str:
    """Map a date to its schedule key ('monday'..'sunday')."""
    return WEEKDAYS[on_date.weekday()]


def slot_id(on_date: date, start_time: str) -> str:
    """Deterministic slot id so the same slot always has the same id."""
    return f"TS_{on_date.strftime('%Y%m%d')}_{start_time.replace(':', '')}"


def _ranges_in_order(ranges: Iterable[Mapping[str, str]]) -> List[tuple]:
    bounds = [(to_minutes(r["startTime"]), to_minutes(r["endTime"])) for r in ranges]
    return sorted(bounds)


def generate_slots(
    weekly_schedule: Mapping[str, Iterable[Mapping[str, str]]],
    on_date: date,
    duration_minutes: int = DEFAULT_SLOT_DURATION,
) -> List[TimeSlot]:
    """
    Slice the ranges configured for ``on_date``'s weekday into slots.

    A slot [t, t + duration) is emitted only when it fits entirely inside
    its range; a trailing remainder shorter than one slot is dropped.
    """
    slots: List[TimeSlot] = []
    for start, end in _ranges_in_order(weekly_schedule.get(weekday_key(on_date), []) or []):
        current = start
        while current + duration_minutes <= end:
            start_label = format_minutes(current)
            slots.append(
                TimeSlot(
                    id=slot_id(on_date, start_label),
                    start_time=start_label,
                    end_time=format_minutes(current + duration_minutes),
                )
            )
            current += duration_minutes
    return slots


def validate_weekly_schedule(schedule: Mapping[str, Any]) -> Dict[str, List[Dict[str, str]]]:
    """
    Validate and normalize a weekly schedule for storage.

    Every weekday key is present in the result. Ranges are zero-padded,
    sorted by start time, must have ``endTime > startTime`` and must not
    overlap within a day.

    Raises:
        ValidationException: On unknown weekdays, bad times, or overlaps
    """
    unknown = set(schedule) - set(WEEKDAYS)
    if unknown:
        raise ValidationException(
            f"Unknown weekday(s) in schedule: {', '.join(sorted(unknown))}",
            code="INVALID_SCHEDULE",
        )

    normalized: Dict[str, List[Dict[str, str]]] = {}
    for day in WEEKDAYS:
        ranges = []
        for raw in schedule.get(day) or []:
            try:
                start, end = normalize_time(raw["startTime"]), normalize_time(raw["endTime"])
            except (KeyError, TypeError):
                raise ValidationException(
                    f"Each {day} range needs startTime and endTime",
                    code="INVALID_SCHEDULE",
                )
            if to_minutes(end) <= to_minutes(start):
                raise ValidationException(
                    f"End time must be after start time on {day} ({start}-{end})",
                    code="INVALID_SCHEDULE",
                )
            ranges.append({"startTime": start, "endTime": end})

        ranges.sort(key=lambda r: r["startTime"])
        for previous, current in zip(ranges, ranges[1:]):
            if to_minutes(current["startTime"]) < to_minutes(previous["endTime"]):
                raise ValidationException(
                    f"Overlapping ranges on {day}: "
                    f"{previous['startTime']}-{previous['endTime']} and "
                    f"{current['startTime']}-{current['endTime']}",
                    code="INVALID_SCHEDULE",
                )
        normalized[day] = ranges
    return normalized
