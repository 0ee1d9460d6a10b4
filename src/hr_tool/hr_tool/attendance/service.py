from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def mark(self, *, user_id: int, status: str, today: Optional[date] = None) -> AttendanceRecord:
        """Mark today's attendance once; the date comes from the server clock."""
        try:
            status = AttendanceStatus(status)
        except ValueError:
            raise ValidationError("Invalid status")

        today = today or now_local().date()
        if self._attendance.get_for_user_and_date(int(user_id), today):
            raise ValidationError("Attendance already marked for today")

        attendance_id = self._attendance.create(user_id=int(user_id), work_date=today, status=status)
        logger.info("Attendance marked: user_id=%s date=%s status=%s", user_id, today, status.value)
        return AttendanceRecord(attendance_id=attendance_id, user_id=int(user_id), work_date=today, status=status)

    def history(self, *, user_id: int) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user(int(user_id))

    def list_all(self, *, current_role: Role) -> Sequence[dict]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Not authorized as an admin")
        return self._attendance.list_with_owner(limit=DEFAULT_LIST_LIMIT)
