"""Dashboard schemas"""

from pydantic import BaseModel

from ..contracts.schemas import ContractResponse
from ..proposals.schemas import ProposalResponse


class MonthlyHours(BaseModel):
    name: str  # "Jun 2025"
    hours: int


class DashboardSummary(BaseModel):
    availableDays: int
    newProposals: int
    activeContracts: int
    hoursWorked: int
    upcomingShifts: list[ContractResponse]
    recentProposals: list[ProposalResponse]
    monthlyHours: list[MonthlyHours]
