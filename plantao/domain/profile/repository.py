"""Profile repository - Database operations for doctor profiles"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import DoctorProfile


class ProfileRepository:
    """Repository for doctor profile database operations"""

    @staticmethod
    def get_profile(db: Session, user_id: int) -> Optional[DoctorProfile]:
        return db.query(DoctorProfile).filter(DoctorProfile.user_id == user_id).first()

    @staticmethod
    def get_or_create_profile(db: Session, user_id: int) -> DoctorProfile:
        """Fetch the profile row, adding an empty one to the session if missing"""
        profile = ProfileRepository.get_profile(db, user_id)
        if profile is None:
            profile = DoctorProfile(
                user_id=user_id, personal={}, professional={}, financial={}, documents={}
            )
            db.add(profile)
        return profile

    @staticmethod
    def save(db: Session, profile: DoctorProfile) -> DoctorProfile:
        db.commit()
        db.refresh(profile)
        return profile
