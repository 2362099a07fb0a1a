"""Identity and location gate run before every check-in and check-out"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import CHECKIN_RADIUS_METERS
from ...models import Contract, FacialCapture, User
from ...shared.uploads import ValidatedFile
from ...storage import R2ObjectStore, StorageError
from .geo import GeolocationError, OutOfRangeError, check_proximity

logger = logging.getLogger(__name__)


@dataclass
class GateResult:
    capture_key: str
    distance_m: Optional[float]


class FaceVerifier:
    """
    Archives the captured camera frame for the doctor.

    There is no face matching; a stored frame is the proof of presence.
    """

    def __init__(self, db: Session, store: R2ObjectStore):
        self.db = db
        self.store = store

    def capture(self, user: User, frame: ValidatedFile, contract_id: int, action: str) -> str:
        key = f"facial-data/{user.firebase_uid}/{int(time.time() * 1000)}{frame.extension}"
        try:
            self.store.upload(key, frame.data, frame.content_type)
        except StorageError as e:
            raise HTTPException(status_code=502, detail="Failed to store facial capture") from e

        self.db.add(
            FacialCapture(user_id=user.id, contract_id=contract_id, action=action, image_key=key)
        )
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to record facial capture for user {user.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to record facial capture") from e

        logger.info(f"📸 Facial capture stored for user {user.id} ({action}): {key}")
        return key


class CheckInGate:
    """Location first, then the identity capture; either failure stops the action"""

    def __init__(
        self,
        db: Session,
        store: R2ObjectStore,
        radius_m: float = CHECKIN_RADIUS_METERS,
    ):
        self.faces = FaceVerifier(db, store)
        self.radius_m = radius_m

    def verify(
        self,
        user: User,
        contract: Contract,
        frame: ValidatedFile,
        latitude: Optional[float],
        longitude: Optional[float],
        action: str = "check_in",
    ) -> GateResult:
        try:
            distance = check_proximity(
                latitude, longitude, contract.latitude, contract.longitude, self.radius_m
            )
        except GeolocationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except OutOfRangeError as e:
            logger.warning(
                f"📍 Doctor {user.id} is {e.distance_m:.0f} m from contract {contract.id}"
            )
            raise HTTPException(status_code=403, detail=str(e)) from e

        key = self.faces.capture(user, frame, contract.id, action)
        return GateResult(capture_key=key, distance_m=distance)
