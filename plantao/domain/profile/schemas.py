"""Profile domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_br_phone, validate_cpf, validate_email


class PersonalInfo(BaseModel):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    cpf: Optional[str] = None
    birthdate: Optional[dt.date] = None
    gender: Optional[str] = None
    address: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        if v:
            return validate_br_phone(v)
        return v

    @field_validator("cpf")
    @classmethod
    def check_cpf(cls, v):
        if v:
            return validate_cpf(v)
        return v


class ProfessionalInfo(BaseModel):
    crm: Optional[str] = None
    graduation: Optional[str] = None
    graduationYear: Optional[int] = Field(None, ge=1900, le=2100)
    specialties: list[str] = []
    serviceType: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0)
    bio: Optional[str] = Field(None, max_length=2000)


class FinancialInfo(BaseModel):
    hourlyRate: Optional[float] = Field(None, ge=0)
    bank: Optional[str] = None
    agency: Optional[str] = None
    account: Optional[str] = None
    accountType: Optional[str] = None
    pix: Optional[str] = None


class ProfileResponse(BaseModel):
    personal: dict = {}
    professional: dict = {}
    financial: dict = {}
    photoUrl: Optional[str] = None
    documents: dict[str, str] = {}
    documentsSubmittedAt: Optional[dt.datetime] = None
    updatedAt: Optional[dt.datetime] = None


class UploadResponse(BaseModel):
    key: str
    url: str
    message: str


class DocumentStatusResponse(BaseModel):
    uploaded: list[str]
    missing: dict[str, list[str]]
    complete: bool
    submittedAt: Optional[dt.datetime] = None
