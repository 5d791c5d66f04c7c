from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, handles_errors, json_body, login_required, superadmin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.budget_service

    @app.route("/api/budget", methods=["GET"], endpoint="api_list_budget")
    @login_required
    @handles_errors("Failed to fetch budget items")
    def list_budget_items():
        return jsonify([b.to_dict() for b in service.list_items()])

    @app.route("/api/budget", methods=["POST"], endpoint="api_create_budget")
    @admin_required
    @handles_errors("Failed to create budget item")
    def create_budget_item():
        return jsonify(service.create_item(json_body()).to_dict()), 201

    @app.route("/api/budget/<int:budget_item_id>", methods=["PUT"], endpoint="api_update_budget")
    @admin_required
    @handles_errors("Failed to update budget item")
    def update_budget_item(budget_item_id: int):
        return jsonify(service.update_item(budget_item_id, json_body()).to_dict())

    @app.route("/api/budget/<int:budget_item_id>", methods=["DELETE"], endpoint="api_delete_budget")
    @superadmin_required
    @handles_errors("Failed to delete budget item")
    def delete_budget_item(budget_item_id: int):
        service.delete_item(budget_item_id)
        return "", 204
