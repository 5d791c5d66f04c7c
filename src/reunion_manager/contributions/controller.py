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
    service = container.contribution_service

    @app.route("/api/contributions", methods=["GET"], endpoint="api_list_contributions")
    @login_required
    @handles_errors("Failed to fetch contributions")
    def list_contributions():
        contributions = service.list_contributions(
            student_id=request.args.get("studentId"),
            limit=request.args.get("limit"),
            offset=request.args.get("offset"),
        )
        return jsonify([c.to_dict() for c in contributions])

    @app.route("/api/contributions/with-students", methods=["GET"], endpoint="api_contributions_with_students")
    @login_required
    @handles_errors("Failed to fetch contributions with students")
    def list_with_students():
        rows = service.list_with_students(
            student_id=request.args.get("studentId"),
            search=request.args.get("search"),
            limit=request.args.get("limit"),
            offset=request.args.get("offset"),
        )
        return jsonify(rows)

    @app.route("/api/contributions", methods=["POST"], endpoint="api_create_contribution")
    @admin_required
    @handles_errors("Failed to create contribution")
    def create_contribution():
        contribution = service.create_contribution(current_user(), json_body())
        return jsonify(contribution.to_dict()), 201

    @app.route("/api/contributions/<int:contribution_id>", methods=["PUT"], endpoint="api_update_contribution")
    @admin_required
    @handles_errors("Failed to update contribution")
    def update_contribution(contribution_id: int):
        return jsonify(service.update_contribution(contribution_id, json_body()).to_dict())

    @app.route("/api/contributions/<int:contribution_id>", methods=["DELETE"], endpoint="api_delete_contribution")
    @superadmin_required
    @handles_errors("Failed to delete contribution")
    def delete_contribution(contribution_id: int):
        service.delete_contribution(contribution_id)
        return "", 204

    @app.route("/api/contributions/recalculate", methods=["POST"], endpoint="api_recalculate_contributions")
    @superadmin_required
    @handles_errors("Failed to recalculate contribution totals")
    def recalculate():
        changed = service.recalculate_student_totals()
        return jsonify({"message": f"Recalculated totals for {changed} students", "changed": changed})
