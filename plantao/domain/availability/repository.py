"""Availability repository - Database operations for time slots"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import TimeSlot


class AvailabilityRepository:
    """Repository for time slot database operations"""

    @staticmethod
    def get_slots(db: Session, doctor_id: int) -> list[TimeSlot]:
        """All slots of a doctor, ordered by date then start time"""
        return (
            db.query(TimeSlot)
            .filter(TimeSlot.doctor_id == doctor_id)
            .order_by(TimeSlot.date, TimeSlot.start_time)
            .all()
        )

    @staticmethod
    def get_slot(db: Session, slot_id: int, doctor_id: int) -> Optional[TimeSlot]:
        return (
            db.query(TimeSlot)
            .filter(TimeSlot.id == slot_id, TimeSlot.doctor_id == doctor_id)
            .first()
        )

    @staticmethod
    def count_slots(db: Session, doctor_id: int) -> int:
        return db.query(TimeSlot).filter(TimeSlot.doctor_id == doctor_id).count()

    @staticmethod
    def add_slots(db: Session, slots: list[TimeSlot]) -> list[TimeSlot]:
        """Insert all slots in a single transaction"""
        db.add_all(slots)
        db.commit()
        for slot in slots:
            db.refresh(slot)
        return slots

    @staticmethod
    def update_slot(db: Session, slot: TimeSlot, **updates) -> TimeSlot:
        for key, value in updates.items():
            if value is not None and hasattr(slot, key):
                setattr(slot, key, value)

        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def delete_slot(db: Session, slot: TimeSlot) -> None:
        db.delete(slot)
        db.commit()
