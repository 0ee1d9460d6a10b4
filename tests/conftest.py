from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hr_tool.hr_tool.attendance.model import AttendanceRecord
from src.hr_tool.hr_tool.container import build_services
from src.hr_tool.hr_tool.core.enums import AttendanceStatus, LeaveStatus, LeaveType, Role
from src.hr_tool.hr_tool.core.exceptions import InsufficientBalanceError, ValidationError
from src.hr_tool.hr_tool.leaves.model import LeaveRequest
from src.hr_tool.hr_tool.users.model import User


def make_user(user_id: int = 1, *, balance: int = 20, role: Role = Role.EMPLOYEE, email: Optional[str] = None) -> User:
    return User(
        user_id=user_id,
        full_name=f"User {user_id}",
        email=email or f"user{user_id}@example.com",
        password_hash="x",
        role=role,
        date_of_joining=date(2025, 1, 1),
        leave_balance=balance,
    )


def make_leave(
    start: date,
    end: date,
    *,
    user_id: int = 1,
    status: LeaveStatus = LeaveStatus.PENDING,
    leave_type: LeaveType = LeaveType.CASUAL,
    request_id: Optional[int] = None,
) -> LeaveRequest:
    return LeaveRequest(
        request_id=request_id,
        user_id=user_id,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        total_days=(end - start).days + 1,
        status=status,
    )


class InMemoryUsers:
    def __init__(self, users=()):
        self._by_id: dict[int, User] = {u.user_id: u for u in users}

    def add(self, user: User) -> User:
        self._by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id):
        return self._by_id.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self._by_id.values() if u.email == email), None)

    def create_user(self, *, full_name, email, password_hash, role, date_of_joining, leave_balance):
        if self.get_by_email(email):
            raise ValidationError("User already exists")
        user_id = max(self._by_id, default=0) + 1
        self._by_id[user_id] = User(
            user_id=user_id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            date_of_joining=date_of_joining,
            leave_balance=leave_balance,
        )
        return user_id

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda u: u.full_name)

    def list_by_role(self, role):
        return [u for u in self.list_all() if u.role == role]

    def add_to_balance(self, user_id, delta):
        user = self._by_id[int(user_id)]
        if user.leave_balance + delta < 0:
            raise InsufficientBalanceError(available=user.leave_balance, requested=-delta)
        self._by_id[int(user_id)] = replace(user, leave_balance=user.leave_balance + delta)


class InMemoryLeaves:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._by_id: dict[int, LeaveRequest] = {}
        self.status_changes: list[dict] = []

    def add(self, request: LeaveRequest) -> LeaveRequest:
        return self.get_by_id(self.create(request))

    def get_by_id(self, request_id):
        return self._by_id.get(int(request_id))

    def list_for_user(self, user_id):
        items = [r for r in self._by_id.values() if r.user_id == int(user_id)]
        return sorted(items, key=lambda r: r.request_id, reverse=True)

    def list_for_user_in_range(self, user_id, *, start_date, end_date):
        return [
            r
            for r in self._by_id.values()
            if r.user_id == int(user_id) and r.start_date <= end_date and r.end_date >= start_date
        ]

    def list_with_owner(self, *, status=None, limit=500):
        rows = []
        for r in sorted(self._by_id.values(), key=lambda r: r.request_id, reverse=True):
            if status is not None and r.status != status:
                continue
            owner = self._users.get_by_id(r.user_id)
            row = r.to_dict()
            row["full_name"] = owner.full_name
            row["email"] = owner.email
            rows.append(row)
        return rows[:limit]

    def create(self, request):
        request_id = max(self._by_id, default=0) + 1
        self._by_id[request_id] = replace(request, request_id=request_id, created_at=datetime(2025, 1, 1, 9, 0))
        return request_id

    def apply_status_change(self, *, request_id, user_id, status, balance_delta=0):
        current = self._by_id.get(int(request_id))
        if not current or current.user_id != int(user_id) or current.status != LeaveStatus.PENDING:
            return False
        if balance_delta:
            self._users.add_to_balance(user_id, balance_delta)
        self._by_id[int(request_id)] = replace(current, status=status)
        self.status_changes.append({"request_id": int(request_id), "status": status, "balance_delta": balance_delta})
        return True


class InMemoryAttendance:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._by_user_date: dict[tuple[int, date], AttendanceRecord] = {}

    def get_for_user_and_date(self, user_id, work_date):
        return self._by_user_date.get((int(user_id), work_date))

    def create(self, *, user_id, work_date, status):
        key = (int(user_id), work_date)
        if key in self._by_user_date:
            raise ValidationError("Attendance already marked for today")
        attendance_id = len(self._by_user_date) + 1
        self._by_user_date[key] = AttendanceRecord(
            attendance_id=attendance_id, user_id=int(user_id), work_date=work_date, status=status
        )
        return attendance_id

    def add(self, user_id: int, work_date: date, status: AttendanceStatus) -> None:
        self.create(user_id=user_id, work_date=work_date, status=status)

    def list_for_user(self, user_id):
        items = [r for r in self._by_user_date.values() if r.user_id == int(user_id)]
        return sorted(items, key=lambda r: r.work_date, reverse=True)

    def list_for_user_in_range(self, user_id, *, start_date, end_date):
        return [r for r in self.list_for_user(user_id) if start_date <= r.work_date <= end_date]

    def list_with_owner(self, *, limit=500):
        rows = []
        for r in sorted(self._by_user_date.values(), key=lambda r: r.work_date, reverse=True):
            owner = self._users.get_by_id(r.user_id)
            row = r.to_dict()
            row["full_name"] = owner.full_name
            row["email"] = owner.email
            rows.append(row)
        return rows[:limit]


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.sent: list[tuple] = []
        self.fail = fail

    def notify_status_change(self, user, request, remaining_balance):
        if self.fail:
            raise RuntimeError("smtp down")
        self.sent.append((user.email, request.status, remaining_balance))


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def leaves_repo(users_repo):
    return InMemoryLeaves(users_repo)


@pytest.fixture
def attendance_repo(users_repo):
    return InMemoryAttendance(users_repo)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def container(users_repo, leaves_repo, attendance_repo, notifier):
    return build_services(
        users_repo=users_repo,
        leaves_repo=leaves_repo,
        attendance_repo=attendance_repo,
        notifier=notifier,
    )
