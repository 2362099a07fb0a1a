"""Proposal domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import Proposal
from ..availability.conflicts import SlotValidationError, normalize_time


class HospitalProfile(BaseModel):
    name: str
    description: Optional[str] = None
    founded: Optional[str] = None
    employees: Optional[str] = None
    specialties: list[str] = []


class ProposalCreate(BaseModel):
    """Shift offer published by a hospital account"""

    doctorId: Optional[int] = None
    hospital: Optional[str] = None
    specialty: str
    date: dt.date
    time: str
    duration: str
    location: str
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    description: Optional[str] = None
    requirements: Optional[str] = None
    value: float = Field(..., ge=0)
    hospitalProfile: Optional[HospitalProfile] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        try:
            return normalize_time(v)
        except SlotValidationError as e:
            raise ValueError(str(e)) from e


class ProposalResponse(BaseModel):
    id: int
    doctorId: Optional[int]
    hospitalId: str
    hospital: str
    specialty: str
    date: dt.date
    time: str
    duration: str
    location: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: Optional[str]
    requirements: Optional[str]
    value: float
    status: str
    hospitalProfile: Optional[HospitalProfile] = None
    createdAt: Optional[dt.datetime] = None
    updatedAt: Optional[dt.datetime] = None

    @classmethod
    def from_model(cls, proposal: Proposal) -> "ProposalResponse":
        return cls(
            id=proposal.id,
            doctorId=proposal.doctor_id,
            hospitalId=proposal.hospital_id,
            hospital=proposal.hospital,
            specialty=proposal.specialty,
            date=proposal.date,
            time=proposal.time,
            duration=proposal.duration,
            location=proposal.location,
            latitude=proposal.latitude,
            longitude=proposal.longitude,
            description=proposal.description,
            requirements=proposal.requirements,
            value=proposal.value,
            status=proposal.status,
            hospitalProfile=proposal.hospital_profile,
            createdAt=proposal.created_at,
            updatedAt=proposal.updated_at,
        )
