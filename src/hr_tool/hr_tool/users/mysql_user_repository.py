from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, full_name, email, password_hash, role, date_of_joining, leave_balance"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        date_of_joining=normalize_mysql_date(row["date_of_joining"]),
        leave_balance=int(row["leave_balance"]),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        date_of_joining: date,
        leave_balance: int,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(full_name, email, password_hash, role, date_of_joining, leave_balance)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (full_name, email, password_hash, role.value, date_of_joining, int(leave_balance)),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            raise ValidationError("User already exists")

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY full_name")
            return [_to_user(r) for r in fetchall(cur)]

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE role=%s ORDER BY full_name", (role.value,))
            return [_to_user(r) for r in fetchall(cur)]
