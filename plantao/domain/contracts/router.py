"""Contract router - FastAPI endpoints for contracts and attendance"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_doctor
from ...database import get_db
from ...models import User
from ...storage import R2ObjectStore, get_object_store
from .schemas import AttendanceResponse, AttendanceStatusResponse, ContractResponse
from .service import ContractService

router = APIRouter(prefix="/contracts", tags=["Contracts"])


def get_contract_service(
    db: Session = Depends(get_db),
    store: R2ObjectStore = Depends(get_object_store),
) -> ContractService:
    """Dependency injection for ContractService"""
    return ContractService(db, store)


@router.get("", response_model=list[ContractResponse])
async def get_contracts(
    status: Optional[str] = Query(None, description="upcoming, completed or canceled"),
    current_user: User = Depends(get_current_doctor),
    service: ContractService = Depends(get_contract_service),
):
    return [ContractResponse.from_model(c) for c in service.get_contracts(current_user, status)]


@router.get("/{contract_id}", response_model=ContractResponse)
async def get_contract(
    contract_id: int,
    current_user: User = Depends(get_current_doctor),
    service: ContractService = Depends(get_contract_service),
):
    return ContractResponse.from_model(service.get_contract(contract_id, current_user))


@router.get("/{contract_id}/attendance", response_model=AttendanceStatusResponse)
async def get_attendance_status(
    contract_id: int,
    current_user: User = Depends(get_current_doctor),
    service: ContractService = Depends(get_contract_service),
):
    """Which attendance action the doctor can take next"""
    return service.attendance_status(contract_id, current_user)


@router.post("/{contract_id}/cancel", response_model=ContractResponse)
async def cancel_contract(
    contract_id: int,
    current_user: User = Depends(get_current_doctor),
    service: ContractService = Depends(get_contract_service),
):
    return ContractResponse.from_model(service.cancel_contract(contract_id, current_user))


@router.post("/{contract_id}/check-in", response_model=AttendanceResponse)
async def check_in(
    contract_id: int,
    frame: UploadFile = File(...),
    latitude: Optional[float] = Form(None),
    longitude: Optional[float] = Form(None),
    current_user: User = Depends(get_current_doctor),
    service: ContractService = Depends(get_contract_service),
):
    """Check in with a camera frame and the device position"""
    contract, result = await service.check_in(
        contract_id, current_user, frame, latitude, longitude
    )
    return AttendanceResponse(
        message="Check-in recorded",
        distanceMeters=result.distance_m,
        contract=ContractResponse.from_model(contract),
    )


@router.post("/{contract_id}/check-out", response_model=AttendanceResponse)
async def check_out(
    contract_id: int,
    frame: UploadFile = File(...),
    latitude: Optional[float] = Form(None),
    longitude: Optional[float] = Form(None),
    current_user: User = Depends(get_current_doctor),
    service: ContractService = Depends(get_contract_service),
):
    contract, result = await service.check_out(
        contract_id, current_user, frame, latitude, longitude
    )
    return AttendanceResponse(
        message="Check-out recorded; contract completed",
        distanceMeters=result.distance_m,
        contract=ContractResponse.from_model(contract),
    )
