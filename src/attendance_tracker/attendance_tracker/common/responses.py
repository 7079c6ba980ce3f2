from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request

from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def status_for(exc: DomainError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    # ValidationError and any other rule violation
    return 400


def ok(status: int = 200, **payload):
    return jsonify({"success": True, **payload}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_action(view):
    """Convert domain errors to JSON failures; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return fail(str(e), status_for(e))
        except Exception as e:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return fail(str(e) or "Internal server error", 500)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
