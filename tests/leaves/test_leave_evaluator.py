from __future__ import annotations

from datetime import date, datetime

import pytest

from conftest import make_leave, make_user
from src.hr_tool.hr_tool.core.enums import LeaveStatus, LeaveType
from src.hr_tool.hr_tool.core.exceptions import (
    InsufficientBalanceError,
    InvalidStateError,
    OverlapError,
    ValidationError,
)
from src.hr_tool.hr_tool.leaves.evaluator import LeaveRequestEvaluator, count_leave_days


def _apply(user, existing=(), start="2025-03-10", end="2025-03-12", leave_type="Casual", reason=None):
    return LeaveRequestEvaluator().evaluate_new_request(
        user,
        existing,
        start_date=start,
        end_date=end,
        leave_type=leave_type,
        reason=reason,
    )


def test_same_day_leave_counts_one_day():
    req = _apply(make_user(), start="2025-03-10", end="2025-03-10")
    assert req.total_days == 1


def test_inclusive_day_count_over_three_days():
    req = _apply(make_user(), start=date(2025, 3, 10), end=date(2025, 3, 12))
    assert req.total_days == 3
    assert req.status == LeaveStatus.PENDING
    assert req.leave_type == LeaveType.CASUAL
    assert req.request_id is None


def test_time_of_day_is_ignored_when_counting():
    req = _apply(make_user(), start=datetime(2025, 3, 10, 23, 30), end=datetime(2025, 3, 12, 0, 15))
    assert (req.start_date, req.end_date, req.total_days) == (date(2025, 3, 10), date(2025, 3, 12), 3)


def test_iso_timestamps_are_normalized_to_dates():
    req = _apply(make_user(), start="2025-03-10T18:30:00.000Z", end="2025-03-11T00:00:00.000Z")
    assert req.total_days == 2


def test_day_count_spans_month_boundary():
    assert count_leave_days(date(2025, 2, 27), date(2025, 3, 2)) == 4


@pytest.mark.parametrize("field", ["start", "end", "leave_type"])
def test_missing_required_field_is_rejected(field):
    kwargs = {"start": "2025-03-10", "end": "2025-03-12", "leave_type": "Sick"}
    kwargs[field] = None
    with pytest.raises(ValidationError):
        _apply(make_user(), **kwargs)


def test_unknown_leave_type_is_rejected():
    with pytest.raises(ValidationError):
        _apply(make_user(), leave_type="Vacation")


def test_reversed_range_is_rejected():
    with pytest.raises(ValidationError):
        _apply(make_user(), start="2025-03-12", end="2025-03-10")


def test_malformed_date_is_rejected():
    with pytest.raises(ValidationError):
        _apply(make_user(), start="10/03/2025")


def test_balance_below_requested_days_fails_with_counts():
    with pytest.raises(InsufficientBalanceError) as exc:
        _apply(make_user(balance=2), start="2025-03-10", end="2025-03-12")
    assert exc.value.available == 2
    assert exc.value.requested == 3


def test_balance_equal_to_requested_days_succeeds():
    req = _apply(make_user(balance=3), start="2025-03-10", end="2025-03-12")
    assert req.status == LeaveStatus.PENDING
    assert req.total_days == 3


def test_overlapping_pending_request_is_rejected():
    existing = [make_leave(date(2025, 4, 1), date(2025, 4, 5), request_id=1)]
    with pytest.raises(OverlapError):
        _apply(make_user(), existing, start="2025-04-03", end="2025-04-10")


def test_adjacent_request_does_not_overlap():
    existing = [make_leave(date(2025, 4, 1), date(2025, 4, 5), request_id=1)]
    req = _apply(make_user(), existing, start="2025-04-06", end="2025-04-10")
    assert req.total_days == 5


def test_overlapping_approved_request_is_rejected():
    existing = [make_leave(date(2025, 4, 1), date(2025, 4, 5), status=LeaveStatus.APPROVED, request_id=1)]
    with pytest.raises(OverlapError):
        _apply(make_user(), existing, start="2025-04-05", end="2025-04-05")


@pytest.mark.parametrize("status", [LeaveStatus.REJECTED, LeaveStatus.CANCELLED])
def test_finished_requests_do_not_block_the_same_dates(status):
    existing = [make_leave(date(2025, 4, 1), date(2025, 4, 5), status=status, request_id=1)]
    req = _apply(make_user(), existing, start="2025-04-01", end="2025-04-05")
    assert req.total_days == 5


def test_other_users_requests_are_ignored():
    existing = [make_leave(date(2025, 4, 1), date(2025, 4, 5), user_id=99, request_id=1)]
    req = _apply(make_user(user_id=1), existing, start="2025-04-01", end="2025-04-05")
    assert req.user_id == 1


def test_balance_is_checked_before_overlap():
    existing = [make_leave(date(2025, 4, 1), date(2025, 4, 5), request_id=1)]
    with pytest.raises(InsufficientBalanceError):
        _apply(make_user(balance=1), existing, start="2025-04-01", end="2025-04-05")


def test_blank_reason_is_stored_as_none():
    assert _apply(make_user(), reason="   ").reason is None
    assert _apply(make_user(), reason=" family ").reason == "family"


def test_approval_computes_remaining_balance():
    req = make_leave(date(2025, 5, 1), date(2025, 5, 5), request_id=7)
    change = LeaveRequestEvaluator().evaluate_status_change(req, LeaveStatus.APPROVED, make_user(balance=5))

    assert change.request.status == LeaveStatus.APPROVED
    assert change.remaining_balance == 0
    assert change.balance_delta == -5
    # Input value untouched.
    assert req.status == LeaveStatus.PENDING


def test_approval_rechecks_current_balance():
    req = make_leave(date(2025, 5, 1), date(2025, 5, 5), request_id=7)
    with pytest.raises(InsufficientBalanceError) as exc:
        LeaveRequestEvaluator().evaluate_status_change(req, "Approved", make_user(balance=4))
    assert (exc.value.available, exc.value.requested) == (4, 5)


@pytest.mark.parametrize("decision", ["Rejected", "Cancelled"])
def test_reject_and_cancel_leave_balance_alone(decision):
    req = make_leave(date(2025, 5, 1), date(2025, 5, 5), request_id=7)
    change = LeaveRequestEvaluator().evaluate_status_change(req, decision, make_user(balance=1))

    assert change.request.status == LeaveStatus(decision)
    assert change.remaining_balance == 1
    assert change.balance_delta == 0


@pytest.mark.parametrize("current", [LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED])
@pytest.mark.parametrize("decision", ["Approved", "Rejected", "Cancelled"])
def test_finalized_request_cannot_be_decided_again(current, decision):
    req = make_leave(date(2025, 5, 1), date(2025, 5, 2), status=current, request_id=7)
    with pytest.raises(InvalidStateError):
        LeaveRequestEvaluator().evaluate_status_change(req, decision, make_user(balance=20))


@pytest.mark.parametrize("decision", ["Pending", "Done", None])
def test_invalid_decision_is_rejected(decision):
    req = make_leave(date(2025, 5, 1), date(2025, 5, 2), request_id=7)
    with pytest.raises(ValidationError):
        LeaveRequestEvaluator().evaluate_status_change(req, decision, make_user())


def test_status_transition_table():
    assert LeaveStatus.PENDING.can_transition_to(LeaveStatus.APPROVED)
    assert not LeaveStatus.PENDING.can_transition_to(LeaveStatus.PENDING)
    assert not LeaveStatus.APPROVED.can_transition_to(LeaveStatus.CANCELLED)
    assert all(s.is_terminal for s in LeaveStatus if s != LeaveStatus.PENDING)


def test_non_text_reason_is_rejected():
    with pytest.raises(ValidationError):
        _apply(make_user(), reason=42)
