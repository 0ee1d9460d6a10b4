from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    handle_domain_error,
    handle_unexpected_error,
    login_required,
)
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @login_required
    def mark_attendance():
        data = request.get_json(silent=True) or {}
        try:
            record = container.attendance_service.mark(user_id=current_user_id(), status=data.get("status"))
        except DomainError as e:
            return handle_domain_error(e)
        except Exception as e:
            return handle_unexpected_error(e, "marking attendance")
        return jsonify(record.to_dict()), 201

    @app.route("/api/attendance/my-attendance", methods=["GET"], endpoint="my_attendance")
    @login_required
    def my_attendance():
        records = container.attendance_service.history(user_id=current_user_id())
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance", methods=["GET"], endpoint="all_attendance")
    @admin_required
    def all_attendance():
        try:
            rows = container.attendance_service.list_all(current_role=current_role())
        except DomainError as e:
            return handle_domain_error(e)
        return jsonify(list(rows))
