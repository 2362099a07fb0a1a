from datetime import datetime, timedelta

import pytest

from plantao.domain.lifecycle import (
    AttendanceAction,
    LifecycleError,
    ProposalStatus,
    ensure_can_cancel,
    ensure_can_check_in,
    ensure_can_check_out,
    ensure_proposal_transition,
    next_attendance_action,
)

NOW = datetime(2025, 6, 10, 19, 0)


def test_pending_proposal_can_be_accepted_or_rejected():
    ensure_proposal_transition("pending", ProposalStatus.ACCEPTED)
    ensure_proposal_transition("pending", ProposalStatus.REJECTED)


@pytest.mark.parametrize("current", ["accepted", "rejected"])
@pytest.mark.parametrize("target", [ProposalStatus.ACCEPTED, ProposalStatus.REJECTED])
def test_terminal_proposals_cannot_move(current, target):
    with pytest.raises(LifecycleError, match="already"):
        ensure_proposal_transition(current, target)


def test_unknown_proposal_status_is_rejected():
    with pytest.raises(LifecycleError):
        ensure_proposal_transition("archived", ProposalStatus.ACCEPTED)


def test_check_in_requires_upcoming_pending_contract():
    ensure_can_check_in("upcoming", "pending")

    with pytest.raises(LifecycleError):
        ensure_can_check_in("upcoming", "checked_in")
    with pytest.raises(LifecycleError):
        ensure_can_check_in("canceled", "pending")


def test_check_out_without_check_in_is_refused():
    with pytest.raises(LifecycleError, match="requires a recorded check-in"):
        ensure_can_check_out("upcoming", "pending", None, NOW)


def test_check_out_must_be_after_check_in():
    ensure_can_check_out("upcoming", "checked_in", NOW - timedelta(hours=12), NOW)

    with pytest.raises(LifecycleError, match="later than check-in"):
        ensure_can_check_out("upcoming", "checked_in", NOW, NOW)
    with pytest.raises(LifecycleError, match="later than check-in"):
        ensure_can_check_out("upcoming", "checked_in", NOW + timedelta(minutes=1), NOW)


def test_completed_contract_cannot_check_out_again():
    with pytest.raises(LifecycleError):
        ensure_can_check_out("completed", "checked_out", NOW - timedelta(hours=1), NOW)


def test_cancel_only_before_check_in():
    ensure_can_cancel("upcoming", "pending")

    with pytest.raises(LifecycleError, match="after check-in"):
        ensure_can_cancel("upcoming", "checked_in")
    with pytest.raises(LifecycleError, match="already"):
        ensure_can_cancel("completed", "checked_out")


@pytest.mark.parametrize(
    "status,attendance,expected",
    [
        ("upcoming", "pending", AttendanceAction.CHECK_IN),
        ("upcoming", "checked_in", AttendanceAction.CHECK_OUT),
        ("completed", "checked_out", AttendanceAction.NONE),
        ("canceled", "pending", AttendanceAction.NONE),
    ],
)
def test_next_attendance_action(status, attendance, expected):
    assert next_attendance_action(status, attendance) == expected
