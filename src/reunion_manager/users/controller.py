from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import (
    current_user,
    handles_errors,
    json_body,
    json_error,
    superadmin_required,
)
from ..container import Container
from .model import SessionUser


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    @handles_errors("Login failed")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = True
        session.update(s_user.to_session())

        app.logger.info("User %s logged in", s_user.username)
        return jsonify(s_user.to_dict())

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out successfully"})

    @app.route("/api/user", methods=["GET"], endpoint="api_current_user")
    def get_current_user():
        user = current_user()
        if user is None:
            return json_error("Not authenticated", 401)
        return jsonify(user.to_dict())

    @app.route("/api/register", methods=["POST"], endpoint="api_register")
    @handles_errors("Registration failed")
    def register_account():
        user = container.user_service.register(current_user(), json_body())
        return jsonify(SessionUser.from_user(user).to_dict()), 201

    @app.route("/api/users", methods=["GET"], endpoint="api_list_users")
    @superadmin_required
    @handles_errors("Failed to fetch users")
    def list_users():
        users = container.user_service.list_users(current_user())
        return jsonify([u.to_dict() for u in users])

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="api_delete_user")
    @superadmin_required
    @handles_errors("Failed to delete user")
    def delete_user(user_id: int):
        container.user_service.delete_user(current_user(), user_id)
        return "", 204
