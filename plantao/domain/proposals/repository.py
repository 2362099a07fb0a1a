"""Proposal repository - Database operations for proposals"""

from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from ...models import Proposal
from ..lifecycle import ProposalStatus


def _visible_to(doctor_id: int):
    """Assigned to the doctor, or an open offer nobody has taken yet"""
    return or_(
        Proposal.doctor_id == doctor_id,
        and_(Proposal.doctor_id.is_(None), Proposal.status == ProposalStatus.PENDING.value),
    )


class ProposalRepository:
    """Repository for proposal database operations"""

    @staticmethod
    def get_proposals(
        db: Session, doctor_id: int, status: Optional[str] = None
    ) -> list[Proposal]:
        query = db.query(Proposal).filter(Proposal.doctor_id == doctor_id)
        if status:
            query = query.filter(Proposal.status == status)
        return query.order_by(Proposal.date, Proposal.time).all()

    @staticmethod
    def get_matching_proposals(db: Session, doctor_id: int, specialty: str) -> list[Proposal]:
        return (
            db.query(Proposal)
            .filter(
                Proposal.specialty == specialty,
                Proposal.status == ProposalStatus.PENDING.value,
                or_(Proposal.doctor_id.is_(None), Proposal.doctor_id == doctor_id),
            )
            .order_by(Proposal.date, Proposal.time)
            .all()
        )

    @staticmethod
    def get_proposal(db: Session, proposal_id: int, doctor_id: int) -> Optional[Proposal]:
        return (
            db.query(Proposal)
            .filter(Proposal.id == proposal_id, _visible_to(doctor_id))
            .first()
        )

    @staticmethod
    def create_proposal(db: Session, **proposal_data) -> Proposal:
        proposal = Proposal(status=ProposalStatus.PENDING.value, **proposal_data)
        db.add(proposal)
        db.commit()
        db.refresh(proposal)
        return proposal

    @staticmethod
    def transition_pending(
        db: Session, proposal_id: int, doctor_id: int, target: ProposalStatus
    ) -> bool:
        """
        Move a pending proposal to ``target`` and assign it to the doctor.

        Compare-and-set on the pending status; does not commit. Returns False
        when another request already moved the proposal out of pending.
        """
        updated = (
            db.query(Proposal)
            .filter(
                Proposal.id == proposal_id,
                Proposal.status == ProposalStatus.PENDING.value,
                or_(Proposal.doctor_id.is_(None), Proposal.doctor_id == doctor_id),
            )
            .update(
                {
                    Proposal.status: target.value,
                    Proposal.doctor_id: doctor_id,
                    Proposal.updated_at: func.now(),
                },
                synchronize_session=False,
            )
        )
        return updated == 1
