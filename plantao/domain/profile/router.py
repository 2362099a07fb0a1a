"""Profile router - FastAPI endpoints for the doctor profile"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_doctor
from ...database import get_db
from ...models import User
from ...storage import R2ObjectStore, get_object_store
from .documents import DOCUMENT_CATALOGUE
from .schemas import (
    DocumentStatusResponse,
    FinancialInfo,
    PersonalInfo,
    ProfessionalInfo,
    ProfileResponse,
    UploadResponse,
)
from .service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])


def get_profile_service(
    db: Session = Depends(get_db),
    store: R2ObjectStore = Depends(get_object_store),
) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db, store)


@router.get("", response_model=Optional[ProfileResponse])
async def get_profile(
    current_user: User = Depends(get_current_doctor),
    service: ProfileService = Depends(get_profile_service),
):
    """Current doctor's profile, or null if nothing was saved yet"""
    profile = service.get_profile(current_user)
    return service.to_response(profile) if profile else None


@router.put("/personal", response_model=ProfileResponse)
async def update_personal(
    data: PersonalInfo,
    current_user: User = Depends(get_current_doctor),
    service: ProfileService = Depends(get_profile_service),
):
    return service.to_response(service.update_section(current_user, "personal", data))


@router.put("/professional", response_model=ProfileResponse)
async def update_professional(
    data: ProfessionalInfo,
    current_user: User = Depends(get_current_doctor),
    service: ProfileService = Depends(get_profile_service),
):
    return service.to_response(service.update_section(current_user, "professional", data))


@router.put("/financial", response_model=ProfileResponse)
async def update_financial(
    data: FinancialInfo,
    current_user: User = Depends(get_current_doctor),
    service: ProfileService = Depends(get_profile_service),
):
    return service.to_response(service.update_section(current_user, "financial", data))


@router.post("/photo", response_model=UploadResponse)
async def upload_photo(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_doctor),
    service: ProfileService = Depends(get_profile_service),
):
    key, url = await service.upload_photo(current_user, file)
    return UploadResponse(key=key, url=url, message="Profile photo updated")


@router.get("/documents/catalogue")
async def get_document_catalogue():
    return {group.value: documents for group, documents in DOCUMENT_CATALOGUE.items()}


@router.get("/documents/status", response_model=DocumentStatusResponse)
async def get_document_status(
    current_user: User = Depends(get_current_doctor),
    service: ProfileService = Depends(get_profile_service),
):
    return service.document_status(current_user)


@router.post("/documents/submit", response_model=DocumentStatusResponse)
async def submit_documents(
    current_user: User = Depends(get_current_doctor),
    service: ProfileService = Depends(get_profile_service),
):
    return service.submit_documents(current_user)


@router.post("/documents/{doc_type}", response_model=UploadResponse)
async def upload_document(
    doc_type: str,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_doctor),
    service: ProfileService = Depends(get_profile_service),
):
    key, url = await service.upload_document(current_user, doc_type, file)
    return UploadResponse(key=key, url=url, message="Document uploaded")
