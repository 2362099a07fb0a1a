"""Proposal router - FastAPI endpoints for shift proposals"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_doctor, get_current_hospital
from ...database import get_db
from ...models import User
from ..contracts.schemas import ContractResponse
from .schemas import ProposalCreate, ProposalResponse
from .service import ProposalService

router = APIRouter(prefix="/proposals", tags=["Proposals"])


def get_proposal_service(db: Session = Depends(get_db)) -> ProposalService:
    """Dependency injection for ProposalService"""
    return ProposalService(db)


@router.get("", response_model=list[ProposalResponse])
async def get_proposals(
    status: Optional[str] = Query(None, description="pending, accepted or rejected"),
    current_user: User = Depends(get_current_doctor),
    service: ProposalService = Depends(get_proposal_service),
):
    """Get proposals addressed to the current doctor"""
    return [ProposalResponse.from_model(p) for p in service.get_proposals(current_user, status)]


@router.get("/matching", response_model=list[ProposalResponse])
async def get_matching_proposals(
    specialty: str = Query(..., min_length=1),
    current_user: User = Depends(get_current_doctor),
    service: ProposalService = Depends(get_proposal_service),
):
    """Pending offers of a specialty that the doctor may still take"""
    proposals = service.get_matching_proposals(current_user, specialty)
    return [ProposalResponse.from_model(p) for p in proposals]


@router.post("", response_model=ProposalResponse, status_code=201)
async def create_proposal(
    data: ProposalCreate,
    current_user: User = Depends(get_current_hospital),
    service: ProposalService = Depends(get_proposal_service),
):
    return ProposalResponse.from_model(service.create_proposal(data, current_user))


@router.get("/{proposal_id}", response_model=ProposalResponse)
async def get_proposal(
    proposal_id: int,
    current_user: User = Depends(get_current_doctor),
    service: ProposalService = Depends(get_proposal_service),
):
    return ProposalResponse.from_model(service.get_proposal(proposal_id, current_user))


@router.post("/{proposal_id}/accept", response_model=ContractResponse)
async def accept_proposal(
    proposal_id: int,
    current_user: User = Depends(get_current_doctor),
    service: ProposalService = Depends(get_proposal_service),
):
    """Accept a pending proposal; returns the contract it creates"""
    return ContractResponse.from_model(service.accept_proposal(proposal_id, current_user))


@router.post("/{proposal_id}/reject", response_model=ProposalResponse)
async def reject_proposal(
    proposal_id: int,
    current_user: User = Depends(get_current_doctor),
    service: ProposalService = Depends(get_proposal_service),
):
    return ProposalResponse.from_model(service.reject_proposal(proposal_id, current_user))
