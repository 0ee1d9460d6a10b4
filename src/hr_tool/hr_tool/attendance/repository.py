from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, *, user_id: int, work_date: date, status: AttendanceStatus) -> int:
        """Insert a mark; a second mark for the same (user, date) raises ValidationError."""

        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        """Newest first."""

        raise NotImplementedError

    def list_for_user_in_range(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_with_owner(self, *, limit: int = 500) -> Sequence[dict]:
        """Return UI rows (joined with user), newest first."""

        raise NotImplementedError
