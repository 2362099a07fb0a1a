"""Availability service - Business logic for time slots"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import TimeSlot, User
from ...utils.sanitization import sanitize_string
from .conflicts import SlotValidationError, find_conflict, validate_time_range
from .repository import AvailabilityRepository
from .schemas import SkippedDate, TimeSlotCreate, TimeSlotUpdate

logger = logging.getLogger(__name__)


def _clean_specialties(specialties: list[str]) -> list[str]:
    """Strip, drop blanks and duplicates, keep the submitted order"""
    cleaned = []
    for specialty in specialties:
        value = sanitize_string(specialty)
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


class AvailabilityService:
    """Service layer for availability business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()

    def get_slots(self, user: User) -> list[TimeSlot]:
        return self.repo.get_slots(self.db, user.id)

    def get_slot(self, slot_id: int, user: User) -> TimeSlot:
        slot = self.repo.get_slot(self.db, slot_id, user.id)
        if not slot:
            raise HTTPException(status_code=404, detail="Time slot not found")
        return slot

    def add_slots(self, data: TimeSlotCreate, user: User) -> tuple[list[TimeSlot], list[SkippedDate]]:
        """
        Declare the same interval on every requested date.

        Dates that overlap an existing slot (or one accepted earlier in the
        same request) are skipped and reported; the rest are inserted together.
        """
        if not data.dates:
            raise HTTPException(status_code=400, detail="Select at least one date")

        specialties = _clean_specialties(data.specialties)
        if not specialties:
            raise HTTPException(status_code=400, detail="Select at least one specialty")

        try:
            start, end = validate_time_range(data.startTime, data.endTime)
        except SlotValidationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        existing = self.repo.get_slots(self.db, user.id)
        accepted: list[TimeSlot] = []
        skipped: list[SkippedDate] = []

        for day in sorted(set(data.dates)):
            if find_conflict(day, start, end, existing + accepted):
                logger.info(f"⏭️ Skipping {day} for doctor {user.id}: overlaps {start}-{end}")
                skipped.append(
                    SkippedDate(
                        date=day,
                        reason=f"Availability already declared on {day.isoformat()} in this interval",
                    )
                )
                continue

            accepted.append(
                TimeSlot(
                    doctor_id=user.id,
                    date=day,
                    start_time=start,
                    end_time=end,
                    specialties=list(specialties),
                )
            )

        if not accepted:
            return [], skipped

        try:
            created = self.repo.add_slots(self.db, accepted)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to add time slots for doctor {user.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save availability") from e

        logger.info(f"📅 Added {len(created)} time slot(s) for doctor {user.id}")
        return created, skipped

    def update_slot(self, slot_id: int, data: TimeSlotUpdate, user: User) -> TimeSlot:
        slot = self.get_slot(slot_id, user)

        day = data.date or slot.date
        try:
            start, end = validate_time_range(
                data.startTime or slot.start_time, data.endTime or slot.end_time
            )
        except SlotValidationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        updates = {"date": day, "start_time": start, "end_time": end}
        if data.specialties is not None:
            specialties = _clean_specialties(data.specialties)
            if not specialties:
                raise HTTPException(status_code=400, detail="Select at least one specialty")
            updates["specialties"] = specialties

        existing = self.repo.get_slots(self.db, user.id)
        if find_conflict(day, start, end, existing, ignore=slot):
            raise HTTPException(
                status_code=409,
                detail=f"Availability already declared on {day.isoformat()} in this interval",
            )

        try:
            return self.repo.update_slot(self.db, slot, **updates)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update time slot {slot_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update availability") from e

    def delete_slot(self, slot_id: int, user: User) -> dict:
        slot = self.get_slot(slot_id, user)
        try:
            self.repo.delete_slot(self.db, slot)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete time slot {slot_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove availability") from e
        return {"message": "Time slot removed successfully"}
