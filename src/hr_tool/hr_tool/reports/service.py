from __future__ import annotations

from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_window, now_local
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..leaves.repository import LeaveRepository
from ..users.repository import UserRepository
from .aggregator import MonthlyReportAggregator


class MonthlyReportService:
    def __init__(
        self,
        users: UserRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        *,
        aggregator: Optional[MonthlyReportAggregator] = None,
    ):
        self._users = users
        self._attendance = attendance
        self._leaves = leaves
        self._aggregator = aggregator or MonthlyReportAggregator()

    def build_monthly_report(
        self,
        *,
        current_role: Role,
        year: Optional[int | str] = None,
        month: Optional[int | str] = None,
        today: Optional[date] = None,
    ) -> dict:
        """Report for every employee over one calendar month (default: current month)."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Not authorized as an admin")

        today = today or now_local().date()
        try:
            report_year = int(year) if year else today.year
            report_month = int(month) if month else today.month
        except (TypeError, ValueError):
            raise ValidationError("Month and year must be numbers")

        start, end = month_window(report_year, report_month)
        month_days = (end - start).days + 1

        reports = []
        for user in self._users.list_by_role(Role.EMPLOYEE):
            attendance = self._attendance.list_for_user_in_range(user.user_id, start_date=start, end_date=end)
            leaves = self._leaves.list_for_user_in_range(user.user_id, start_date=start, end_date=end)
            reports.append(self._aggregator.build_report(user, attendance, leaves, month_days).to_dict())

        return {
            "month": f"{report_month:02d}",
            "year": str(report_year),
            "month_name": start.strftime("%B"),
            "reports": reports,
        }
