from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import DEFAULT_ADMIN_LEAVE_BALANCE, DEFAULT_EMPLOYEE_LEAVE_BALANCE, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    full_name: str
    email: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError("Invalid credentials")
        user = self._users.get_by_email(email.strip().lower())
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # Unknown hash method stored for this account.
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, email=user.email, role=user.role)


class UserService:
    """Use case: register and look up users."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _create(self, *, full_name: str, email: str, password: str, role: Role, today: Optional[date]) -> int:
        full_name = require_non_empty(full_name, "Full name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("User already exists")

        balance = DEFAULT_ADMIN_LEAVE_BALANCE if role == Role.ADMIN else DEFAULT_EMPLOYEE_LEAVE_BALANCE
        return self._users.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            date_of_joining=today or date.today(),
            leave_balance=balance,
        )

    def register_employee(self, *, full_name: str, email: str, password: str, today: Optional[date] = None) -> User:
        """Public registration always creates an employee."""
        user_id = self._create(full_name=full_name, email=email, password=password, role=Role.EMPLOYEE, today=today)
        logger.info("Registered employee user_id=%s", user_id)
        return self.get_profile(user_id)

    def ensure_admin(self, *, email: str, password: str, full_name: str = "System Admin") -> bool:
        """Create the admin account once. Returns True when it was created."""
        if self._users.get_by_email(require_email(email)):
            return False
        self._create(full_name=full_name, email=email, password=password, role=Role.ADMIN, today=None)
        logger.info("Admin seeded: %s", email)
        return True

    def get_profile(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, current_role: Role) -> Sequence[User]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Not authorized as an admin")
        return self._users.list_all()
