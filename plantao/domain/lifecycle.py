"""
Status lifecycles for proposals and contracts.

Proposal:   pending → accepted | rejected
Contract:   upcoming → completed | canceled
Attendance: pending → checked_in → checked_out

Terminal states have no outgoing transitions. The functions here only
decide; persisting the new state is the caller's job.
"""

from datetime import datetime
from enum import Enum
from typing import Optional


class LifecycleError(ValueError):
    """Requested transition is not allowed from the current state"""


class ProposalStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ContractStatus(str, Enum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELED = "canceled"


class Attendance(str, Enum):
    PENDING = "pending"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


class AttendanceAction(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    NONE = "none"


PROPOSAL_TRANSITIONS = {
    ProposalStatus.PENDING: {ProposalStatus.ACCEPTED, ProposalStatus.REJECTED},
    ProposalStatus.ACCEPTED: set(),
    ProposalStatus.REJECTED: set(),
}


def ensure_proposal_transition(current: str, target: ProposalStatus) -> None:
    try:
        state = ProposalStatus(current)
    except ValueError as e:
        raise LifecycleError(f"Unknown proposal status '{current}'") from e

    if target not in PROPOSAL_TRANSITIONS[state]:
        raise LifecycleError(f"Proposal is already {state.value}")


def ensure_can_check_in(status: str, attendance: str) -> None:
    if status != ContractStatus.UPCOMING:
        raise LifecycleError(f"Contract is {status}; check-in is no longer possible")
    if attendance != Attendance.PENDING:
        raise LifecycleError("Check-in has already been recorded")


def ensure_can_check_out(
    status: str,
    attendance: str,
    check_in_time: Optional[datetime],
    now: datetime,
) -> None:
    if status != ContractStatus.UPCOMING:
        raise LifecycleError(f"Contract is {status}; check-out is no longer possible")
    if attendance == Attendance.PENDING or check_in_time is None:
        raise LifecycleError("Check-out requires a recorded check-in")
    if attendance != Attendance.CHECKED_IN:
        raise LifecycleError("Check-out has already been recorded")
    if now <= check_in_time:
        raise LifecycleError("Check-out must be later than check-in")


def ensure_can_cancel(status: str, attendance: str) -> None:
    if status != ContractStatus.UPCOMING:
        raise LifecycleError(f"Contract is already {status}")
    if attendance != Attendance.PENDING:
        raise LifecycleError("A contract cannot be canceled after check-in")


def next_attendance_action(status: str, attendance: str) -> AttendanceAction:
    if status != ContractStatus.UPCOMING:
        return AttendanceAction.NONE
    if attendance == Attendance.PENDING:
        return AttendanceAction.CHECK_IN
    if attendance == Attendance.CHECKED_IN:
        return AttendanceAction.CHECK_OUT
    return AttendanceAction.NONE
