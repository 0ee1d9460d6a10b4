from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType
from ..leaves.model import LeaveRequest
from ..users.model import User


@dataclass(frozen=True)
class AttendanceSummary:
    total_days: int
    recorded_days: int
    present: int
    absent: int
    percentage: float


@dataclass(frozen=True)
class LeaveSummary:
    total: int
    total_approved_days: int
    casual: int
    sick: int
    paid: int
    approved: int
    pending: int
    rejected: int


@dataclass(frozen=True)
class MonthlyReport:
    user_id: int
    full_name: str
    email: str
    attendance: AttendanceSummary
    leaves: LeaveSummary

    def to_dict(self) -> dict:
        return asdict(self)


def attendance_percentage(present: int, recorded_days: int) -> float:
    """Share of present days in percent, 2 decimals; 0 when nothing was recorded."""
    if recorded_days <= 0:
        return 0.0
    return round(present / recorded_days * 100, 2)


class MonthlyReportAggregator:
    """Summarize one user's month from records the caller already filtered."""

    def build_report(
        self,
        user: User,
        attendance_records: Iterable[AttendanceRecord],
        leave_requests: Iterable[LeaveRequest],
        month_days_count: int,
    ) -> MonthlyReport:
        present = absent = 0
        for rec in attendance_records:
            if rec.status == AttendanceStatus.PRESENT:
                present += 1
            elif rec.status == AttendanceStatus.ABSENT:
                absent += 1
        recorded_days = present + absent

        by_type = {t: 0 for t in LeaveType}
        by_status = {s: 0 for s in LeaveStatus}
        total = 0
        approved_days = 0
        for leave in leave_requests:
            total += 1
            by_type[leave.leave_type] += 1
            by_status[leave.status] += 1
            if leave.status == LeaveStatus.APPROVED:
                approved_days += int(leave.total_days or 0)

        return MonthlyReport(
            user_id=user.user_id,
            full_name=user.full_name,
            email=user.email,
            attendance=AttendanceSummary(
                total_days=int(month_days_count),
                recorded_days=recorded_days,
                present=present,
                absent=absent,
                percentage=attendance_percentage(present, recorded_days),
            ),
            leaves=LeaveSummary(
                total=total,
                total_approved_days=approved_days,
                casual=by_type[LeaveType.CASUAL],
                sick=by_type[LeaveType.SICK],
                paid=by_type[LeaveType.PAID],
                approved=by_status[LeaveStatus.APPROVED],
                pending=by_status[LeaveStatus.PENDING],
                rejected=by_status[LeaveStatus.REJECTED],
            ),
        )
