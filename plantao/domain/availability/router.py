"""Availability router - FastAPI endpoints for time slots"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_doctor
from ...database import get_db
from ...models import User
from .schemas import TimeSlotBatchResponse, TimeSlotCreate, TimeSlotResponse, TimeSlotUpdate
from .service import AvailabilityService
from .specialties import MEDICAL_SPECIALTIES

router = APIRouter(prefix="/availability", tags=["Availability"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


@router.get("", response_model=list[TimeSlotResponse])
async def get_time_slots(
    current_user: User = Depends(get_current_doctor),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Get all time slots of the current doctor"""
    return [TimeSlotResponse.from_model(slot) for slot in service.get_slots(current_user)]


@router.get("/specialties", response_model=list[str])
async def get_specialties():
    return MEDICAL_SPECIALTIES


@router.post("", response_model=TimeSlotBatchResponse)
async def add_time_slots(
    data: TimeSlotCreate,
    current_user: User = Depends(get_current_doctor),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Declare availability on one or more dates"""
    created, skipped = service.add_slots(data, current_user)
    return TimeSlotBatchResponse(
        created=[TimeSlotResponse.from_model(slot) for slot in created],
        skipped=skipped,
        message=f"{len(created)} time slot(s) added, {len(skipped)} skipped",
    )


@router.put("/{slot_id}", response_model=TimeSlotResponse)
async def update_time_slot(
    slot_id: int,
    data: TimeSlotUpdate,
    current_user: User = Depends(get_current_doctor),
    service: AvailabilityService = Depends(get_availability_service),
):
    return TimeSlotResponse.from_model(service.update_slot(slot_id, data, current_user))


@router.delete("/{slot_id}")
async def delete_time_slot(
    slot_id: int,
    current_user: User = Depends(get_current_doctor),
    service: AvailabilityService = Depends(get_availability_service),
):
    return service.delete_slot(slot_id, current_user)
