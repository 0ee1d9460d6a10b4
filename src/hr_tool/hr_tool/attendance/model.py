from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark per user per calendar day."""

    attendance_id: int
    user_id: int
    work_date: date
    status: AttendanceStatus
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "user_id": self.user_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
        }
