"""Leave accounting rules.

The evaluator is a pure decision layer: it receives the user and the
records the caller loaded, and returns new values. Persisting them (and
serializing concurrent decisions on one request) is the repository's job.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import inclusive_day_count, ranges_overlap, to_calendar_date
from ..core.enums import ACTIVE_LEAVE_STATUSES, LeaveStatus, LeaveType
from ..core.exceptions import InsufficientBalanceError, InvalidStateError, OverlapError, ValidationError
from ..users.model import User
from .model import LeaveRequest, StatusChange

DECISIONS = frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED})


def parse_leave_type(value: LeaveType | str | None) -> LeaveType:
    if value is None or value == "":
        raise ValidationError("Leave type is required")
    try:
        return LeaveType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in LeaveType)
        raise ValidationError(f"Leave type must be one of: {allowed}")


def parse_decision(value: LeaveStatus | str | None) -> LeaveStatus:
    try:
        decision = LeaveStatus(value)
    except ValueError:
        raise ValidationError("Invalid status")
    if decision not in DECISIONS:
        raise ValidationError("Invalid status")
    return decision


def count_leave_days(start_date: date, end_date: date) -> int:
    """Inclusive whole-day length of a leave; reversed ranges are rejected."""
    if end_date < start_date:
        raise ValidationError("End date must be on or after start date")
    total_days = inclusive_day_count(start_date, end_date)
    if total_days <= 0:
        raise ValidationError("End date must be on or after start date")
    return total_days


class LeaveRequestEvaluator:
    def evaluate_new_request(
        self,
        user: User,
        existing_requests: Iterable[LeaveRequest],
        *,
        start_date: date | datetime | str | None,
        end_date: date | datetime | str | None,
        leave_type: LeaveType | str | None,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        """Validate a new application and build the Pending request for it.

        Raises ValidationError, InsufficientBalanceError or OverlapError.
        """

        if reason is not None and not isinstance(reason, str):
            raise ValidationError("Reason must be text")
        leave_type = parse_leave_type(leave_type)
        start = to_calendar_date(start_date, "Start date")
        end = to_calendar_date(end_date, "End date")
        total_days = count_leave_days(start, end)

        if user.leave_balance < total_days:
            raise InsufficientBalanceError(available=user.leave_balance, requested=total_days)

        for existing in existing_requests:
            if existing.user_id != user.user_id or existing.status not in ACTIVE_LEAVE_STATUSES:
                continue
            if ranges_overlap(existing.start_date, existing.end_date, start, end):
                raise OverlapError("You already have a Pending or Approved leave during this period")

        return LeaveRequest(
            user_id=user.user_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            total_days=total_days,
            status=LeaveStatus.PENDING,
            reason=(reason or "").strip() or None,
        )

    def evaluate_status_change(
        self,
        leave_request: LeaveRequest,
        decision: LeaveStatus | str,
        owner: User,
    ) -> StatusChange:
        """Decide a Pending request. Identity/permission checks belong to the caller."""

        decision = parse_decision(decision)

        if not leave_request.status.can_transition_to(decision):
            raise InvalidStateError(f"Leave request is already {leave_request.status.value}")

        if decision == LeaveStatus.APPROVED:
            # Balance may have changed since the request was filed.
            if owner.leave_balance < leave_request.total_days:
                raise InsufficientBalanceError(
                    available=owner.leave_balance,
                    requested=leave_request.total_days,
                    message=(
                        f"Insufficient leave balance. User has {owner.leave_balance} days, "
                        f"request needs {leave_request.total_days}."
                    ),
                )
            return StatusChange(
                request=replace(leave_request, status=decision),
                remaining_balance=owner.leave_balance - leave_request.total_days,
                balance_delta=-leave_request.total_days,
            )

        return StatusChange(
            request=replace(leave_request, status=decision),
            remaining_balance=owner.leave_balance,
        )
