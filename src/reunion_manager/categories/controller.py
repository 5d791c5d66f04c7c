from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, handles_errors, json_body, login_required, superadmin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.category_service

    @app.route("/api/categories", methods=["GET"], endpoint="api_list_categories")
    @login_required
    @handles_errors("Failed to fetch categories")
    def list_categories():
        return jsonify([c.to_dict() for c in service.list_categories()])

    @app.route("/api/categories", methods=["POST"], endpoint="api_create_category")
    @admin_required
    @handles_errors("Failed to create category")
    def create_category():
        return jsonify(service.create_category(json_body()).to_dict()), 201

    @app.route("/api/categories/<int:category_id>", methods=["PUT"], endpoint="api_update_category")
    @admin_required
    @handles_errors("Failed to update category")
    def update_category(category_id: int):
        return jsonify(service.update_category(category_id, json_body()).to_dict())

    @app.route("/api/categories/<int:category_id>", methods=["DELETE"], endpoint="api_delete_category")
    @superadmin_required
    @handles_errors("Failed to delete category")
    def delete_category(category_id: int):
        service.delete_category(category_id)
        return "", 204
