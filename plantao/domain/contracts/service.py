"""Contract service - Business logic for contracts and attendance"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import CHECKIN_RADIUS_METERS
from ...models import Contract, User
from ...shared.uploads import IMAGE_TYPES, read_upload
from ...storage import R2ObjectStore
from ..checkin.verification import CheckInGate, GateResult
from ..lifecycle import (
    ContractStatus,
    LifecycleError,
    ensure_can_cancel,
    ensure_can_check_in,
    ensure_can_check_out,
    next_attendance_action,
)
from .repository import ContractRepository
from .schemas import AttendanceStatusResponse, ExpectedLocation

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    # Stored naive, in UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ContractService:
    """Service layer for contract business logic"""

    def __init__(self, db: Session, store: R2ObjectStore):
        self.db = db
        self.repo = ContractRepository()
        self.store = store

    def get_contracts(self, user: User, status: Optional[str] = None) -> list[Contract]:
        if status:
            try:
                status = ContractStatus(status).value
            except ValueError as e:
                raise HTTPException(status_code=400, detail=f"Invalid status '{status}'") from e
        return self.repo.get_contracts(self.db, user.id, status)

    def get_contract(self, contract_id: int, user: User) -> Contract:
        contract = self.repo.get_contract(self.db, contract_id, user.id)
        if not contract:
            raise HTTPException(status_code=404, detail="Contract not found")
        return contract

    def attendance_status(self, contract_id: int, user: User) -> AttendanceStatusResponse:
        contract = self.get_contract(contract_id, user)
        action = next_attendance_action(contract.status, contract.attendance)
        return AttendanceStatusResponse(
            contractId=contract.id,
            status=contract.status,
            attendance=contract.attendance,
            nextAction=action.value,
            checkInTime=contract.check_in_time,
            checkOutTime=contract.check_out_time,
            expectedLocation=ExpectedLocation(
                address=contract.location,
                latitude=contract.latitude,
                longitude=contract.longitude,
                radiusMeters=CHECKIN_RADIUS_METERS,
            ),
        )

    def cancel_contract(self, contract_id: int, user: User) -> Contract:
        contract = self.get_contract(contract_id, user)
        try:
            ensure_can_cancel(contract.status, contract.attendance)
        except LifecycleError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        self._apply(
            lambda: self.repo.cancel(self.db, contract.id, _utcnow()),
            contract,
            "cancel",
        )
        logger.info(f"🛑 Contract {contract_id} canceled by doctor {user.id}")
        return contract

    async def check_in(
        self,
        contract_id: int,
        user: User,
        frame: UploadFile,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> tuple[Contract, GateResult]:
        contract = self.get_contract(contract_id, user)
        try:
            ensure_can_check_in(contract.status, contract.attendance)
        except LifecycleError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        result = await self._verify(user, contract, frame, latitude, longitude, "check_in")

        now = _utcnow()
        self._apply(
            lambda: self.repo.record_check_in(self.db, contract.id, now, latitude, longitude),
            contract,
            "check in",
        )
        logger.info(f"🟢 Doctor {user.id} checked in to contract {contract_id} at {now}")
        return contract, result

    async def check_out(
        self,
        contract_id: int,
        user: User,
        frame: UploadFile,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> tuple[Contract, GateResult]:
        """Record the check-out and complete the contract in the same write"""
        contract = self.get_contract(contract_id, user)
        try:
            ensure_can_check_out(
                contract.status, contract.attendance, contract.check_in_time, _utcnow()
            )
        except LifecycleError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        result = await self._verify(user, contract, frame, latitude, longitude, "check_out")

        now = _utcnow()
        try:
            ensure_can_check_out(contract.status, contract.attendance, contract.check_in_time, now)
        except LifecycleError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        self._apply(
            lambda: self.repo.record_check_out(self.db, contract.id, now, latitude, longitude),
            contract,
            "check out",
        )
        logger.info(f"🔴 Doctor {user.id} checked out of contract {contract_id} at {now}")
        return contract, result

    async def _verify(
        self,
        user: User,
        contract: Contract,
        frame: UploadFile,
        latitude: Optional[float],
        longitude: Optional[float],
        action: str,
    ) -> GateResult:
        validated = await read_upload(frame, IMAGE_TYPES)
        return CheckInGate(self.db, self.store).verify(
            user, contract, validated, latitude, longitude, action
        )

    def _apply(self, update, contract: Contract, action: str) -> None:
        """Run a compare-and-set update; 409 when another request got there first"""
        try:
            applied = update()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to {action} contract {contract.id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to {action}") from e

        self.db.refresh(contract)
        if not applied:
            logger.warning(f"⚠️ Stale {action} on contract {contract.id} ({contract.status}/{contract.attendance})")
            raise HTTPException(
                status_code=409, detail=f"Contract changed state; cannot {action} now"
            )
