from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object; the leave balance is only changed through an approved
    leave decision applied by the leave repository.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    date_of_joining: date
    leave_balance: int

    def public_view(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role.value,
            "date_of_joining": self.date_of_joining.isoformat(),
            "leave_balance": self.leave_balance,
        }
