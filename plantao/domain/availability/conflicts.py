"""Availability conflict detection.

Slots are compared per calendar day on zero-padded "HH:MM" strings, which
order lexicographically the same way as the times they represent.
"""

import re
from datetime import date, datetime
from typing import Iterable, Optional, Protocol

TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


class SlotValidationError(ValueError):
    """Candidate slot is malformed and must not reach the conflict scan"""


class SlotLike(Protocol):
    date: date
    start_time: str
    end_time: str


def normalize_time(value: str) -> str:
    """Return ``value`` as zero-padded HH:MM, e.g. "8:00" → "08:00"."""
    match = TIME_PATTERN.match((value or "").strip())
    if not match:
        raise SlotValidationError(f"Invalid time '{value}'. Use HH:MM (24-hour format)")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise SlotValidationError(f"Invalid time '{value}'. Use HH:MM (24-hour format)")

    return f"{hour:02d}:{minute:02d}"


def validate_time_range(start: str, end: str) -> tuple[str, str]:
    start, end = normalize_time(start), normalize_time(end)
    if start >= end:
        raise SlotValidationError("Start time must be before end time")
    return start, end


def calendar_day(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def intervals_conflict(start: str, end: str, slot_start: str, slot_end: str) -> bool:
    return (
        (slot_start <= start < slot_end)
        or (slot_start < end <= slot_end)
        or (start <= slot_start and end >= slot_end)
    )


def find_conflict(
    day: date,
    start: str,
    end: str,
    existing: Iterable[SlotLike],
    ignore: Optional[SlotLike] = None,
) -> Optional[SlotLike]:
    """First slot in ``existing`` that overlaps the candidate, or None."""
    day = calendar_day(day)
    for slot in existing:
        if slot is ignore:
            continue
        if calendar_day(slot.date) != day:
            continue
        if intervals_conflict(start, end, slot.start_time, slot.end_time):
            return slot
    return None


def has_conflict(day: date, start: str, end: str, existing: Iterable[SlotLike]) -> bool:
    return find_conflict(day, start, end, existing) is not None
