from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.exceptions import NotFoundError, RemoteError, ValidationError

logger = logging.getLogger(__name__)


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def ok(data, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def api_view(view):
    """Map domain errors to JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return fail(str(e), 400)
        except NotFoundError as e:
            return fail(str(e), 404)
        except RemoteError as e:
            logger.error("Remote store failure in %s: %s", request.endpoint, e)
            return fail(f"Remote store failure: {e}", 502)

    return wrapper


def current_user_id() -> str:
    # Auth lives outside this service; accept the session, a header or a query arg.
    return str(session.get("user_id") or request.headers.get("X-User-Id") or request.args.get("user_id") or "")


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data
