"""Flask helpers shared by the feature controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InsufficientBalanceError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def error_response(message: str, status: int, **extra):
    body = {"message": message}
    body.update(extra)
    return jsonify(body), status


def current_role() -> Role:
    return Role(session.get("role"))


def current_user_id() -> int:
    return int(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Not authorized, please log in", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Not authorized, please log in", 401)
        if session.get("role") != Role.ADMIN.value:
            return error_response("Not authorized as an admin", 403)
        return view(*args, **kwargs)

    return wrapper


def handle_domain_error(e: DomainError):
    """Map a business-rule exception to a JSON error response."""
    if isinstance(e, NotFoundError):
        return error_response(str(e), 404)
    if isinstance(e, AuthorizationError):
        return error_response(str(e), 403)
    if isinstance(e, InsufficientBalanceError):
        return error_response(str(e), 400, available=e.available, requested=e.requested)
    return error_response(str(e), 400)


def handle_unexpected_error(e: Exception, what: str):
    logger.exception("Server error while %s", what)
    return error_response(f"Server error while {what}", 500)
