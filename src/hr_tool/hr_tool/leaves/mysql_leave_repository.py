from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import InsufficientBalanceError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import LeaveRequest
from .repository import LeaveRepository

_LEAVE_COLUMNS = "request_id, user_id, leave_type, start_date, end_date, total_days, status, reason, created_at"


def _to_leave(row: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(row["request_id"]),
        user_id=int(row["user_id"]),
        leave_type=LeaveType(row["leave_type"]),
        start_date=normalize_mysql_date(row["start_date"]),
        end_date=normalize_mysql_date(row["end_date"]),
        total_days=int(row["total_days"]),
        status=LeaveStatus(row["status"]),
        reason=row.get("reason"),
        created_at=row.get("created_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_leave(row) if row else None

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leave_requests
                WHERE user_id=%s
                ORDER BY created_at DESC, request_id DESC
                """,
                (int(user_id),),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_for_user_in_range(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leave_requests
                WHERE user_id=%s AND start_date<=%s AND end_date>=%s
                ORDER BY start_date
                """,
                (int(user_id), end_date, start_date),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_with_owner(self, *, status: Optional[LeaveStatus] = None, limit: int = 500) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.request_id, r.user_id, u.full_name, u.email,
                       r.leave_type, r.start_date, r.end_date, r.total_days,
                       r.status, r.reason, r.created_at
                FROM leave_requests r
                JOIN users u ON u.user_id = r.user_id
                WHERE {where}
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                row = _to_leave(r).to_dict()
                row["full_name"] = r["full_name"]
                row["email"] = r["email"]
                out.append(row)
            return out

    def create(self, request: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_type, start_date, end_date, total_days, status, reason)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(request.user_id),
                    request.leave_type.value,
                    request.start_date,
                    request.end_date,
                    int(request.total_days),
                    request.status.value,
                    request.reason,
                ),
            )
            return int(cur.lastrowid)

    def apply_status_change(
        self,
        *,
        request_id: int,
        user_id: int,
        status: LeaveStatus,
        balance_delta: int = 0,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Lock the owner row so concurrent approvals for the same user serialize.
            cur.execute("SELECT leave_balance FROM users WHERE user_id=%s FOR UPDATE", (int(user_id),))
            owner = fetchone(cur)
            if not owner:
                raise NotFoundError("User not found")

            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s
                WHERE request_id=%s AND user_id=%s AND status=%s
                """,
                (status.value, int(request_id), int(user_id), LeaveStatus.PENDING.value),
            )
            if cur.rowcount == 0:
                return False

            if balance_delta:
                balance = int(owner["leave_balance"])
                if balance + int(balance_delta) < 0:
                    # Raising inside the cursor block rolls back the status update too.
                    raise InsufficientBalanceError(available=balance, requested=-int(balance_delta))
                cur.execute(
                    "UPDATE users SET leave_balance = leave_balance + %s WHERE user_id=%s",
                    (int(balance_delta), int(user_id)),
                )
            return True
