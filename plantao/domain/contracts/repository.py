"""Contract repository - Database operations for contracts"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from ...models import Contract, Proposal
from ..lifecycle import Attendance, ContractStatus

# Shift fields a contract inherits from the accepted proposal
PROPOSAL_FIELDS = (
    "hospital_id",
    "hospital",
    "specialty",
    "date",
    "time",
    "duration",
    "location",
    "latitude",
    "longitude",
    "value",
)


class ContractRepository:
    """Repository for contract database operations"""

    @staticmethod
    def build_from_proposal(proposal: Proposal, doctor_id: int) -> Contract:
        """New contract for an accepted proposal; caller adds and commits"""
        return Contract(
            proposal_id=proposal.id,
            doctor_id=doctor_id,
            status=ContractStatus.UPCOMING.value,
            attendance=Attendance.PENDING.value,
            **{field: getattr(proposal, field) for field in PROPOSAL_FIELDS},
        )

    @staticmethod
    def get_contracts(
        db: Session, doctor_id: int, status: Optional[str] = None
    ) -> list[Contract]:
        query = db.query(Contract).filter(Contract.doctor_id == doctor_id)
        if status:
            query = query.filter(Contract.status == status)
        return query.order_by(Contract.date, Contract.time).all()

    @staticmethod
    def get_contract(db: Session, contract_id: int, doctor_id: int) -> Optional[Contract]:
        return (
            db.query(Contract)
            .filter(Contract.id == contract_id, Contract.doctor_id == doctor_id)
            .first()
        )

    @staticmethod
    def record_check_in(
        db: Session, contract_id: int, when: datetime, latitude: float, longitude: float
    ) -> bool:
        """Compare-and-set pending → checked_in; commits. False if the state moved."""
        updated = (
            db.query(Contract)
            .filter(
                Contract.id == contract_id,
                Contract.status == ContractStatus.UPCOMING.value,
                Contract.attendance == Attendance.PENDING.value,
            )
            .update(
                {
                    Contract.attendance: Attendance.CHECKED_IN.value,
                    Contract.check_in_time: when,
                    Contract.check_in_latitude: latitude,
                    Contract.check_in_longitude: longitude,
                    Contract.updated_at: func.now(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated == 1

    @staticmethod
    def record_check_out(
        db: Session, contract_id: int, when: datetime, latitude: float, longitude: float
    ) -> bool:
        """Compare-and-set checked_in → checked_out and complete the contract; commits."""
        updated = (
            db.query(Contract)
            .filter(
                Contract.id == contract_id,
                Contract.status == ContractStatus.UPCOMING.value,
                Contract.attendance == Attendance.CHECKED_IN.value,
                Contract.check_in_time < when,
            )
            .update(
                {
                    Contract.attendance: Attendance.CHECKED_OUT.value,
                    Contract.status: ContractStatus.COMPLETED.value,
                    Contract.check_out_time: when,
                    Contract.check_out_latitude: latitude,
                    Contract.check_out_longitude: longitude,
                    Contract.updated_at: func.now(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated == 1

    @staticmethod
    def cancel(db: Session, contract_id: int, when: datetime) -> bool:
        updated = (
            db.query(Contract)
            .filter(
                Contract.id == contract_id,
                Contract.status == ContractStatus.UPCOMING.value,
                Contract.attendance == Attendance.PENDING.value,
            )
            .update(
                {
                    Contract.status: ContractStatus.CANCELED.value,
                    Contract.canceled_at: when,
                    Contract.updated_at: func.now(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated == 1
