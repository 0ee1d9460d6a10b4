from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

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
        """Insert a user; must reject a duplicate email with ValidationError."""

        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError
