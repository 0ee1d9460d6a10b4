from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class InsufficientBalanceError(DomainError):
    """Raised when a user's leave balance cannot cover the requested days."""

    def __init__(self, available: int, requested: int, message: str | None = None):
        self.available = int(available)
        self.requested = int(requested)
        super().__init__(
            message
            or f"Insufficient leave balance. You have {self.available} days available, "
            f"but requested {self.requested} days."
        )


class OverlapError(DomainError):
    """Raised when a pending or approved leave already covers part of the range."""


class InvalidStateError(DomainError):
    """Raised when a leave status transition is attempted from a final state."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
