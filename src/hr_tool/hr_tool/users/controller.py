from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    error_response,
    handle_domain_error,
    handle_unexpected_error,
    login_required,
)
from ..container import Container
from ..core.exceptions import AuthenticationError, DomainError


def register(app: Flask, container: Container) -> None:
    def _start_session(user_id: int, full_name: str, role: str) -> None:
        session.clear()
        session["user_id"] = user_id
        session["name"] = full_name
        session["role"] = role

    @app.route("/api/auth/register", methods=["POST"], endpoint="register_user")
    def register_user():
        data = request.get_json(silent=True) or {}
        try:
            user = container.user_service.register_employee(
                full_name=data.get("full_name") or data.get("fullName") or "",
                email=data.get("email", ""),
                password=data.get("password", ""),
            )
        except DomainError as e:
            return handle_domain_error(e)
        except Exception as e:
            return handle_unexpected_error(e, "registering user")

        _start_session(user.user_id, user.full_name, user.role.value)
        return jsonify(user.public_view()), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        try:
            s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except AuthenticationError as e:
            return error_response(str(e), 400)
        except Exception as e:
            return handle_unexpected_error(e, "logging in")

        _start_session(s_user.user_id, s_user.full_name, s_user.role.value)
        return jsonify(
            {
                "user_id": s_user.user_id,
                "full_name": s_user.full_name,
                "email": s_user.email,
                "role": s_user.role.value,
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    @login_required
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            user = container.user_service.get_profile(current_user_id())
        except DomainError as e:
            return handle_domain_error(e)
        return jsonify(user.public_view())

    @app.route("/api/auth/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        try:
            users = container.user_service.list_users(current_role=current_role())
        except DomainError as e:
            return handle_domain_error(e)
        return jsonify([u.public_view() for u in users])
