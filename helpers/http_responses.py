from flask import jsonify, request
import uuid
from typing import Optional, Dict, Any


def request_id() -> str:
    """Request-ID aus dem Header übernehmen oder eine kurze neue erzeugen."""
    return request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]


def error_response(error: str, message: str, status: int, details: Optional[Dict[str, Any]] = None):
    """
    Return a consistent JSON error payload for the frontend.

    Example payload:
    {
        "error": "invalid_state",
        "message": "Event is already marked as deleted",
        "code": 400,
        "request_id": "a1b2c3d4"
    }
    """
    req_id = request_id()
    payload = {
        "error": error,
        "message": message,
        "code": status,
        "request_id": req_id,
    }
    if details:
        payload["details"] = details
    resp = jsonify(payload)
    resp.headers["X-Request-ID"] = req_id
    return resp, status


def message_response(message: str, status: int = 200, **extra):
    """Erfolgsantwort im Format {"message": ..., **extra}."""
    payload = {"message": message}
    payload.update(extra)
    return jsonify(payload), status
