from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .notifications.notifier import LeaveNotifier, MailConfig, NullLeaveNotifier, SmtpLeaveNotifier
from .reports.service import MonthlyReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    leaves_repo: LeaveRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    leave_service: LeaveService
    attendance_service: AttendanceService
    report_service: MonthlyReportService


def build_notifier(mail_config: Optional[dict]) -> LeaveNotifier:
    if not mail_config:
        return NullLeaveNotifier()
    return SmtpLeaveNotifier(
        MailConfig(
            server=str(mail_config.get("server", "smtp.gmail.com")),
            port=int(mail_config.get("port", 587)),
            username=mail_config.get("username"),
            password=mail_config.get("password"),
            use_tls=bool(mail_config.get("use_tls", True)),
        )
    )


def build_services(
    *,
    users_repo: UserRepository,
    leaves_repo: LeaveRepository,
    attendance_repo: AttendanceRepository,
    notifier: Optional[LeaveNotifier] = None,
) -> Container:
    """Wire services over any repository implementation (MySQL or in-memory)."""
    return Container(
        users_repo=users_repo,
        leaves_repo=leaves_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        leave_service=LeaveService(leaves_repo, users_repo, notifier=notifier),
        attendance_service=AttendanceService(attendance_repo),
        report_service=MonthlyReportService(users_repo, attendance_repo, leaves_repo),
    )


def build_container(*, db_config: dict, mail_config: Optional[dict] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        users_repo=MySQLUserRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        notifier=build_notifier(mail_config),
    )
