from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import (
    admin_required,
    current_user,
    handles_errors,
    json_body,
    json_error,
    login_required,
    superadmin_required,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    @app.route("/api/students", methods=["GET"], endpoint="api_list_students")
    @login_required
    @handles_errors("Failed to fetch students")
    def list_students():
        students = service.list_students(
            current_user(),
            section=request.args.get("section"),
            search=request.args.get("search"),
            limit=request.args.get("limit"),
            offset=request.args.get("offset"),
        )
        return jsonify([s.to_dict() for s in students])

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="api_get_student")
    @login_required
    @handles_errors("Failed to fetch student")
    def get_student(student_id: int):
        return jsonify(service.get_student(current_user(), student_id).to_dict())

    @app.route("/api/students", methods=["POST"], endpoint="api_create_student")
    @admin_required
    @handles_errors("Failed to create student")
    def create_student():
        student = service.create_student(current_user(), json_body())
        return jsonify(student.to_dict()), 201

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="api_update_student")
    @admin_required
    @handles_errors("Failed to update student")
    def update_student(student_id: int):
        student = service.update_student(current_user(), student_id, json_body())
        return jsonify(student.to_dict())

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="api_delete_student")
    @superadmin_required
    @handles_errors("Failed to delete student")
    def delete_student(student_id: int):
        service.delete_student(current_user(), student_id)
        return "", 204

    @app.route("/api/students/import", methods=["POST"], endpoint="api_import_students")
    @admin_required
    @handles_errors("Failed to import students")
    def import_students():
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return json_error("No file uploaded", 400)

        result = service.import_file(current_user(), upload.stream, upload.filename)
        app.logger.info("Imported %d students (%d skipped)", len(result.students), len(result.skipped))
        return (
            jsonify(
                {
                    "message": f"Successfully imported {len(result.students)} students",
                    "students": [s.to_dict() for s in result.students],
                    "skipped": result.skipped,
                }
            ),
            201,
        )
