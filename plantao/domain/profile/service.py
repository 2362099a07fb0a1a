"""Profile service - Business logic for doctor profiles and documents"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, UploadFile
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import DoctorProfile, User
from ...shared.uploads import DOCUMENT_TYPES, IMAGE_TYPES, read_upload
from ...storage import R2ObjectStore, StorageError
from ...utils.sanitization import sanitize_dict
from .documents import group_of, missing_required
from .repository import ProfileRepository
from .schemas import DocumentStatusResponse, ProfileResponse

logger = logging.getLogger(__name__)

SECTIONS = ("personal", "professional", "financial")


class ProfileService:
    """Service layer for doctor profile business logic"""

    def __init__(self, db: Session, store: R2ObjectStore):
        self.db = db
        self.store = store
        self.repo = ProfileRepository()

    def _url(self, key: str) -> str:
        try:
            return self.store.get_url(key)
        except StorageError as e:
            raise HTTPException(status_code=502, detail="Failed to sign file URL") from e

    def _save(self, profile: DoctorProfile, user: User, what: str) -> DoctorProfile:
        try:
            return self.repo.save(self.db, profile)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to save {what} for doctor {user.id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to save {what}") from e

    def to_response(self, profile: DoctorProfile) -> ProfileResponse:
        return ProfileResponse(
            personal=profile.personal or {},
            professional=profile.professional or {},
            financial=profile.financial or {},
            photoUrl=self._url(profile.photo_key) if profile.photo_key else None,
            documents={doc: self._url(key) for doc, key in (profile.documents or {}).items()},
            documentsSubmittedAt=profile.documents_submitted_at,
            updatedAt=profile.updated_at,
        )

    def get_profile(self, user: User) -> Optional[DoctorProfile]:
        return self.repo.get_profile(self.db, user.id)

    def update_section(self, user: User, section: str, data: BaseModel) -> DoctorProfile:
        """Replace one profile section, creating the profile on first write"""
        if section not in SECTIONS:
            raise ValueError(f"Unknown profile section '{section}'")

        profile = self.repo.get_or_create_profile(self.db, user.id)
        setattr(profile, section, sanitize_dict(data.model_dump(mode="json")))

        if section == "personal" and data.name and not user.full_name:
            user.full_name = data.name

        profile = self._save(profile, user, f"{section} information")
        logger.info(f"📝 Doctor {user.id} updated {section} information")
        return profile

    async def upload_photo(self, user: User, file: UploadFile) -> tuple[str, str]:
        upload = await read_upload(file, IMAGE_TYPES)
        key = f"profile-photos/{user.firebase_uid}/{int(time.time() * 1000)}{upload.extension}"
        try:
            self.store.upload(key, upload.data, upload.content_type)
        except StorageError as e:
            raise HTTPException(status_code=502, detail="Failed to upload photo") from e

        profile = self.repo.get_or_create_profile(self.db, user.id)
        profile.photo_key = key
        self._save(profile, user, "profile photo")
        return key, self._url(key)

    async def upload_document(self, user: User, doc_type: str, file: UploadFile) -> tuple[str, str]:
        if group_of(doc_type) is None:
            raise HTTPException(status_code=400, detail=f"Unknown document type '{doc_type}'")

        upload = await read_upload(file, DOCUMENT_TYPES)
        key = f"documents/{user.firebase_uid}/{doc_type}/{int(time.time() * 1000)}{upload.extension}"
        try:
            self.store.upload(key, upload.data, upload.content_type)
        except StorageError as e:
            raise HTTPException(status_code=502, detail="Failed to upload document") from e

        profile = self.repo.get_or_create_profile(self.db, user.id)
        profile.documents = {**(profile.documents or {}), doc_type: key}
        self._save(profile, user, "document")
        logger.info(f"📄 Doctor {user.id} uploaded document {doc_type}")
        return key, self._url(key)

    def document_status(self, user: User) -> DocumentStatusResponse:
        profile = self.get_profile(user)
        uploaded = sorted((profile.documents or {}).keys()) if profile else []
        missing = missing_required(uploaded)
        return DocumentStatusResponse(
            uploaded=uploaded,
            missing=missing,
            complete=not missing,
            submittedAt=profile.documents_submitted_at if profile else None,
        )

    def submit_documents(self, user: User) -> DocumentStatusResponse:
        """Mark the bundle as submitted once every mandatory document is present"""
        profile = self.get_profile(user)
        missing = missing_required((profile.documents or {}) if profile else {})
        if missing:
            listed = ", ".join(doc for docs in missing.values() for doc in docs)
            raise HTTPException(status_code=400, detail=f"Missing required documents: {listed}")

        profile.documents_submitted_at = datetime.now(timezone.utc).replace(tzinfo=None)
        self._save(profile, user, "document submission")
        logger.info(f"📬 Doctor {user.id} submitted credentialing documents")
        return self.document_status(user)
