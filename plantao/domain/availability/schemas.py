"""Availability domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel

from ...models import TimeSlot


class TimeSlotCreate(BaseModel):
    """One submission may declare the same interval on several dates"""

    dates: list[dt.date]
    startTime: str
    endTime: str
    specialties: list[str]


class TimeSlotUpdate(BaseModel):
    date: Optional[dt.date] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    specialties: Optional[list[str]] = None


class TimeSlotResponse(BaseModel):
    id: int
    date: dt.date
    startTime: str
    endTime: str
    specialties: list[str]
    createdAt: Optional[dt.datetime] = None
    updatedAt: Optional[dt.datetime] = None

    @classmethod
    def from_model(cls, slot: TimeSlot) -> "TimeSlotResponse":
        return cls(
            id=slot.id,
            date=slot.date,
            startTime=slot.start_time,
            endTime=slot.end_time,
            specialties=slot.specialties or [],
            createdAt=slot.created_at,
            updatedAt=slot.updated_at,
        )


class SkippedDate(BaseModel):
    date: dt.date
    reason: str


class TimeSlotBatchResponse(BaseModel):
    created: list[TimeSlotResponse]
    skipped: list[SkippedDate]
    message: str
