"""Proposal service - Business logic for shift proposals"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Contract, Proposal, User
from ...utils.sanitization import sanitize_dict, sanitize_string
from ..contracts.repository import ContractRepository
from ..lifecycle import LifecycleError, ProposalStatus, ensure_proposal_transition
from .repository import ProposalRepository
from .schemas import ProposalCreate

logger = logging.getLogger(__name__)


class ProposalService:
    """Service layer for proposal business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProposalRepository()
        self.contracts = ContractRepository()

    def get_proposals(self, user: User, status: Optional[str] = None) -> list[Proposal]:
        if status:
            try:
                status = ProposalStatus(status).value
            except ValueError as e:
                raise HTTPException(status_code=400, detail=f"Invalid status '{status}'") from e
        return self.repo.get_proposals(self.db, user.id, status)

    def get_matching_proposals(self, user: User, specialty: str) -> list[Proposal]:
        specialty = sanitize_string(specialty)
        if not specialty:
            raise HTTPException(status_code=400, detail="Specialty is required")
        return self.repo.get_matching_proposals(self.db, user.id, specialty)

    def get_proposal(self, proposal_id: int, user: User) -> Proposal:
        proposal = self.repo.get_proposal(self.db, proposal_id, user.id)
        if not proposal:
            raise HTTPException(status_code=404, detail="Proposal not found")
        return proposal

    def accept_proposal(self, proposal_id: int, user: User) -> Contract:
        """
        Accept a pending proposal and create its contract atomically.

        The status change and the contract insert share one commit; a
        concurrent accept or reject loses the compare-and-set and gets 409.
        """
        proposal = self.get_proposal(proposal_id, user)
        try:
            ensure_proposal_transition(proposal.status, ProposalStatus.ACCEPTED)
        except LifecycleError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        try:
            if not self.repo.transition_pending(
                self.db, proposal.id, user.id, ProposalStatus.ACCEPTED
            ):
                self.db.rollback()
                raise HTTPException(status_code=409, detail="Proposal is no longer pending")

            contract = self.contracts.build_from_proposal(proposal, user.id)
            self.db.add(contract)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Duplicate contract for proposal {proposal_id}: {e}")
            raise HTTPException(
                status_code=409, detail="A contract already exists for this proposal"
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to accept proposal {proposal_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to accept proposal") from e

        self.db.refresh(contract)
        self.db.refresh(proposal)
        logger.info(f"✅ Proposal {proposal_id} accepted by doctor {user.id}, contract {contract.id}")
        return contract

    def reject_proposal(self, proposal_id: int, user: User) -> Proposal:
        proposal = self.get_proposal(proposal_id, user)
        try:
            ensure_proposal_transition(proposal.status, ProposalStatus.REJECTED)
        except LifecycleError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        try:
            if not self.repo.transition_pending(
                self.db, proposal.id, user.id, ProposalStatus.REJECTED
            ):
                self.db.rollback()
                raise HTTPException(status_code=409, detail="Proposal is no longer pending")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to reject proposal {proposal_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to reject proposal") from e

        self.db.refresh(proposal)
        logger.info(f"🚫 Proposal {proposal_id} rejected by doctor {user.id}")
        return proposal

    def create_proposal(self, data: ProposalCreate, hospital: User) -> Proposal:
        """Publish a shift offer from a hospital account"""
        if data.doctorId is not None:
            doctor = self.db.query(User).filter(User.id == data.doctorId).first()
            if not doctor or doctor.user_type != "doctor":
                raise HTTPException(status_code=404, detail="Doctor not found")

        specialty = sanitize_string(data.specialty)
        location = sanitize_string(data.location)
        duration = sanitize_string(data.duration)
        if not specialty or not location or not duration:
            raise HTTPException(
                status_code=400, detail="Specialty, location and duration are required"
            )

        try:
            proposal = self.repo.create_proposal(
                self.db,
                doctor_id=data.doctorId,
                hospital_id=hospital.firebase_uid,
                hospital=sanitize_string(data.hospital) or hospital.full_name or hospital.email,
                specialty=specialty,
                date=data.date,
                time=data.time,
                duration=duration,
                location=location,
                latitude=data.latitude,
                longitude=data.longitude,
                description=sanitize_string(data.description) if data.description else None,
                requirements=sanitize_string(data.requirements) if data.requirements else None,
                value=data.value,
                hospital_profile=(
                    sanitize_dict(data.hospitalProfile.model_dump())
                    if data.hospitalProfile
                    else None
                ),
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create proposal for hospital {hospital.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create proposal") from e

        logger.info(f"📨 Proposal {proposal.id} published by hospital {hospital.id}")
        return proposal
