from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        """All requests of a user, newest first."""

        raise NotImplementedError

    def list_for_user_in_range(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        """Requests of any status whose [start, end] intersects the window."""

        raise NotImplementedError

    def list_with_owner(self, *, status: Optional[LeaveStatus] = None, limit: int = 500) -> Sequence[dict]:
        """Return UI rows (joined with user)."""

        raise NotImplementedError

    def create(self, request: LeaveRequest) -> int:
        raise NotImplementedError

    def apply_status_change(
        self,
        *,
        request_id: int,
        user_id: int,
        status: LeaveStatus,
        balance_delta: int = 0,
    ) -> bool:
        """Atomically move a Pending request to ``status`` and add ``balance_delta``.

        Returns False when the request is no longer Pending.
        """

        raise NotImplementedError
