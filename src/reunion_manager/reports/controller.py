from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import handles_errors, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @login_required
    @handles_errors("Failed to fetch dashboard data")
    def dashboard():
        return jsonify(container.report_service.get_dashboard_summary().to_dict())

    @app.route("/api/budget-summary", methods=["GET"], endpoint="api_budget_summary")
    @login_required
    @handles_errors("Failed to fetch budget summary")
    def budget_summary():
        return jsonify(container.report_service.get_budget_summary().to_dict())
