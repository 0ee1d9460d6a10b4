from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: leave application.

    ``request_id`` and ``created_at`` stay unset until the record store
    persists the request.
    """

    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    status: LeaveStatus
    reason: Optional[str] = None
    request_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "user_id": self.user_id,
            "leave_type": self.leave_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_days": self.total_days,
            "status": self.status.value,
            "reason": self.reason or "",
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M") if self.created_at else None,
        }


@dataclass(frozen=True)
class StatusChange:
    """Outcome of a status decision, applied by the caller.

    ``balance_delta`` is what must be added to the owner's balance
    (negative on approval, zero otherwise).
    """

    request: LeaveRequest
    remaining_balance: int
    balance_delta: int = 0
