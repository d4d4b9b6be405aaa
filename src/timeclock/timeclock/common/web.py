from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return error_response(str(e), status_for(e))

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # routing errors (404, 405) keep their own response
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return error_response(f"Internal error: {e}", 500)
        return error_response("Internal error", 500)


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role", Role.EMPLOYEE.value))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(minimum: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error_response("Please log in to continue", 401)
            if not current_role().at_least(minimum):
                return error_response("You do not have permission for this action", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
