from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(row["attendance_id"]),
        user_id=int(row["user_id"]),
        work_date=normalize_mysql_date(row["work_date"]),
        status=AttendanceStatus(row["status"]),
        created_at=row.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, work_date, status, created_at
                FROM attendance
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def create(self, *, user_id: int, work_date: date, status: AttendanceStatus) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO attendance(user_id, work_date, status) VALUES(%s,%s,%s)",
                    (int(user_id), work_date, status.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            # uq_attendance_user_date: lost a race with another mark for the same day.
            raise ValidationError("Attendance already marked for today")

    def list_for_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, work_date, status, created_at
                FROM attendance
                WHERE user_id=%s
                ORDER BY work_date DESC
                """,
                (int(user_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_user_in_range(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, work_date, status, created_at
                FROM attendance
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(user_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_with_owner(self, *, limit: int = 500) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.attendance_id, a.user_id, u.full_name, u.email, a.work_date, a.status
                FROM attendance a
                JOIN users u ON u.user_id = a.user_id
                ORDER BY a.work_date DESC, a.attendance_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                row = _to_record(r).to_dict()
                row["full_name"] = r["full_name"]
                row["email"] = r["email"]
                out.append(row)
            return out
