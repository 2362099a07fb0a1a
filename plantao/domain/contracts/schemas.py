"""Contract domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel

from ...models import Contract


class ContractResponse(BaseModel):
    id: int
    proposalId: int
    doctorId: int
    hospitalId: str
    hospital: str
    specialty: str
    date: dt.date
    time: str
    duration: str
    location: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    value: float
    status: str
    attendance: str
    checkInTime: Optional[dt.datetime] = None
    checkOutTime: Optional[dt.datetime] = None
    canceledAt: Optional[dt.datetime] = None
    createdAt: Optional[dt.datetime] = None
    updatedAt: Optional[dt.datetime] = None

    @classmethod
    def from_model(cls, contract: Contract) -> "ContractResponse":
        return cls(
            id=contract.id,
            proposalId=contract.proposal_id,
            doctorId=contract.doctor_id,
            hospitalId=contract.hospital_id,
            hospital=contract.hospital,
            specialty=contract.specialty,
            date=contract.date,
            time=contract.time,
            duration=contract.duration,
            location=contract.location,
            latitude=contract.latitude,
            longitude=contract.longitude,
            value=contract.value,
            status=contract.status,
            attendance=contract.attendance,
            checkInTime=contract.check_in_time,
            checkOutTime=contract.check_out_time,
            canceledAt=contract.canceled_at,
            createdAt=contract.created_at,
            updatedAt=contract.updated_at,
        )


class ExpectedLocation(BaseModel):
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radiusMeters: float


class AttendanceStatusResponse(BaseModel):
    """What the check-in screen should offer next for a contract"""

    contractId: int
    status: str
    attendance: str
    nextAction: str  # check_in, check_out, none
    checkInTime: Optional[dt.datetime] = None
    checkOutTime: Optional[dt.datetime] = None
    expectedLocation: ExpectedLocation


class AttendanceResponse(BaseModel):
    message: str
    distanceMeters: Optional[float] = None
    contract: ContractResponse
