from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    EMPLOYEE = "employee"
    ADMIN = "admin"


class LeaveType(str, Enum):
    CASUAL = "Casual"
    SICK = "Sick"
    PAID = "Paid"


class LeaveStatus(str, Enum):
    """Leave request workflow state.

    Pending is the only non-terminal state; it can move to any of the three
    terminal states and nothing leaves a terminal state.
    """

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self != LeaveStatus.PENDING

    def can_transition_to(self, target: "LeaveStatus") -> bool:
        return target in _TRANSITIONS.get(self, frozenset())


_TRANSITIONS = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}),
}

# Requests in these states block new requests over the same dates.
ACTIVE_LEAVE_STATUSES = frozenset({LeaveStatus.PENDING, LeaveStatus.APPROVED})


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
