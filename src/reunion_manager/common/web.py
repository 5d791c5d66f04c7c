"""Helpers shared by the JSON controllers: session principal, role guards, error mapping."""

from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.model import SessionUser

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
)


def current_user() -> Optional[SessionUser]:
    return SessionUser.from_session(session)


def json_error(message: str, status: int, **extra: Any):
    body = {"message": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return json_error("Unauthorized", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            return json_error("Unauthorized", 401)
        if not user.role.is_admin:
            return json_error("Forbidden: Admin access required", 403)
        return view(*args, **kwargs)

    return wrapper


def superadmin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            return json_error("Unauthorized", 401)
        if user.role != Role.SUPERADMIN:
            return json_error("Forbidden: Superadmin access required", 403)
        return view(*args, **kwargs)

    return wrapper


def domain_error_response(e: DomainError):
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(e, error_cls):
            if status == 400:
                return json_error(str(e), status, errors=[str(e)])
            return json_error(str(e), status)
    return json_error(str(e), 400)


def handles_errors(failure_message: str):
    """Map DomainError to its status code; log anything else and answer 500."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return domain_error_response(e)
            except Exception:
                current_app.logger.exception("%s %s failed", request.method, request.path)
                return json_error(failure_message, 500)

        return wrapper

    return decorator
