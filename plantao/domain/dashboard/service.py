"""Dashboard service - Summary figures for the doctor home screen"""

import re

from sqlalchemy.orm import Session

from ...models import Contract, User
from ..availability.repository import AvailabilityRepository
from ..contracts.repository import ContractRepository
from ..contracts.schemas import ContractResponse
from ..lifecycle import ContractStatus, ProposalStatus
from ..proposals.repository import ProposalRepository
from ..proposals.schemas import ProposalResponse
from .schemas import DashboardSummary, MonthlyHours

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_LEADING_INT = re.compile(r"^\s*(\d+)")


def duration_hours(duration: str) -> int:
    """Leading integer of a duration label ("12h" -> 12); 0 when there is none"""
    match = _LEADING_INT.match(duration or "")
    return int(match.group(1)) if match else 0


def monthly_hours(contracts: list[Contract]) -> list[MonthlyHours]:
    """Hours per calendar month, oldest month first"""
    totals: dict[tuple[int, int], int] = {}
    for contract in sorted(contracts, key=lambda c: c.date):
        month = (contract.date.year, contract.date.month)
        totals[month] = totals.get(month, 0) + duration_hours(contract.duration)
    return [
        MonthlyHours(name=f"{MONTH_NAMES[month - 1]} {year}", hours=hours)
        for (year, month), hours in totals.items()
    ]


class DashboardService:
    def __init__(self, db: Session):
        self.db = db
        self.slots = AvailabilityRepository()
        self.proposals = ProposalRepository()
        self.contracts = ContractRepository()

    def summary(self, user: User) -> DashboardSummary:
        pending = self.proposals.get_proposals(self.db, user.id, ProposalStatus.PENDING.value)
        upcoming = self.contracts.get_contracts(self.db, user.id, ContractStatus.UPCOMING.value)
        completed = self.contracts.get_contracts(self.db, user.id, ContractStatus.COMPLETED.value)

        recent = sorted(pending, key=lambda p: (p.date, p.time), reverse=True)[:3]

        return DashboardSummary(
            availableDays=self.slots.count_slots(self.db, user.id),
            newProposals=len(pending),
            activeContracts=len(upcoming),
            hoursWorked=sum(duration_hours(c.duration) for c in completed),
            upcomingShifts=[ContractResponse.from_model(c) for c in upcoming[:2]],
            recentProposals=[ProposalResponse.from_model(p) for p in recent],
            monthlyHours=monthly_hours(completed),
        )
