from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..access.policy import is_view_allowed
from ..core.enums import View
from ..core.exceptions import (
    AlreadyCompletedError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    ScanConflictError,
    ValidationError,
)
from ..users.service import SessionService

logger = logging.getLogger(__name__)


def login_required(sessions: SessionService):
    """Resolve the session user into `g.user` or fail with 401."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.user = sessions.current_user(session.get("user_id"))
            return view(*args, **kwargs)

        return wrapper

    return decorator


def view_required(sessions: SessionService, target: View):
    """Like `login_required`, and the user's role must be allowed to open `target`."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = sessions.current_user(session.get("user_id"))
            if not is_view_allowed(user.role, target):
                raise AuthorizationError(f"{user.role.value} cannot access {target.value}")
            g.user = user
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_object() -> dict:
    """Request body as a JSON object; an absent or unparsable body is empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AuthenticationError)
    def _unauthenticated(e):
        return _error(str(e) or "Please log in to continue", 401)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e):
        return _error(str(e) or "Forbidden", 403)

    @app.errorhandler(AlreadyCompletedError)
    @app.errorhandler(ScanConflictError)
    def _conflict(e):
        return _error(str(e), 409)

    @app.errorhandler(ValidationError)
    def _invalid(e):
        return _error(str(e), 400)

    @app.errorhandler(DomainError)
    def _domain(e):
        return _error(str(e), 400)

    @app.errorhandler(HTTPException)
    def _http(e):
        return _error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e):
        logger.exception("Unhandled error")
        if bool(app.config.get("DEBUG", False)):
            return _error(f"Internal error: {e}", 500)
        return _error("Internal error", 500)
