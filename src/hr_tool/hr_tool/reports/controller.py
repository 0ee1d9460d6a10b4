from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, current_role, handle_domain_error, handle_unexpected_error
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/monthly", methods=["GET"], endpoint="monthly_report")
    @admin_required
    def monthly_report():
        try:
            data = container.report_service.build_monthly_report(
                current_role=current_role(),
                year=request.args.get("year"),
                month=request.args.get("month"),
            )
        except DomainError as e:
            return handle_domain_error(e)
        except Exception as e:
            return handle_unexpected_error(e, "generating report")
        return jsonify(data)
