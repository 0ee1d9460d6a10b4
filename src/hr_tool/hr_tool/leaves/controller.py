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
    @app.route("/api/leaves", methods=["POST"], endpoint="apply_leave")
    @login_required
    def apply_leave():
        data = request.get_json(silent=True) or {}
        try:
            leave = container.leave_service.apply(
                current_role=current_role(),
                user_id=current_user_id(),
                leave_type=data.get("leave_type") or data.get("leaveType"),
                start_date=data.get("start_date") or data.get("startDate"),
                end_date=data.get("end_date") or data.get("endDate"),
                reason=data.get("reason") or "",
            )
        except DomainError as e:
            return handle_domain_error(e)
        except Exception as e:
            return handle_unexpected_error(e, "applying for leave")
        return jsonify(leave.to_dict()), 201

    @app.route("/api/leaves/my", methods=["GET"], endpoint="my_leaves")
    @login_required
    def my_leaves():
        leaves = container.leave_service.list_mine(user_id=current_user_id())
        return jsonify([leave.to_dict() for leave in leaves])

    @app.route("/api/leaves", methods=["GET"], endpoint="all_leaves")
    @admin_required
    def all_leaves():
        try:
            rows = container.leave_service.list_all(current_role=current_role(), status=request.args.get("status"))
        except DomainError as e:
            return handle_domain_error(e)
        return jsonify(list(rows))

    @app.route("/api/leaves/<int:request_id>", methods=["PUT"], endpoint="update_leave_status")
    @admin_required
    def update_leave_status(request_id: int):
        data = request.get_json(silent=True) or {}
        try:
            change = container.leave_service.decide(
                current_role=current_role(),
                request_id=request_id,
                decision=data.get("status"),
            )
        except DomainError as e:
            return handle_domain_error(e)
        except Exception as e:
            return handle_unexpected_error(e, "updating leave status")

        body = change.request.to_dict()
        body["remaining_balance"] = change.remaining_balance
        return jsonify(body)

    @app.route("/api/leaves/<int:request_id>/cancel", methods=["PUT"], endpoint="cancel_leave")
    @login_required
    def cancel_leave(request_id: int):
        try:
            leave = container.leave_service.cancel(user_id=current_user_id(), request_id=request_id)
        except DomainError as e:
            return handle_domain_error(e)
        except Exception as e:
            return handle_unexpected_error(e, "cancelling leave")
        return jsonify(leave.to_dict())
