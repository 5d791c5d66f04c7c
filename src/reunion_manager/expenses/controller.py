from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import (
    admin_required,
    current_user,
    handles_errors,
    json_body,
    login_required,
    superadmin_required,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.expense_service

    @app.route("/api/expenses", methods=["GET"], endpoint="api_list_expenses")
    @login_required
    @handles_errors("Failed to fetch expenses")
    def list_expenses():
        expenses = service.list_expenses(
            category=request.args.get("category"),
            limit=request.args.get("limit"),
            offset=request.args.get("offset"),
        )
        return jsonify([e.to_dict() for e in expenses])

    @app.route("/api/expenses", methods=["POST"], endpoint="api_create_expense")
    @admin_required
    @handles_errors("Failed to create expense")
    def create_expense():
        expense = service.create_expense(current_user(), json_body())
        return jsonify(expense.to_dict()), 201

    @app.route("/api/expenses/<int:expense_id>", methods=["PUT"], endpoint="api_update_expense")
    @admin_required
    @handles_errors("Failed to update expense")
    def update_expense(expense_id: int):
        return jsonify(service.update_expense(expense_id, json_body()).to_dict())

    @app.route("/api/expenses/<int:expense_id>", methods=["DELETE"], endpoint="api_delete_expense")
    @superadmin_required
    @handles_errors("Failed to delete expense")
    def delete_expense(expense_id: int):
        service.delete_expense(expense_id)
        return "", 204
