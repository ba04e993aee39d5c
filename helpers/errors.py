# helpers/errors.py
import logging

from flask import Flask
from werkzeug.exceptions import HTTPException

from helpers.http_responses import error_response

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Basisklasse für fachliche Fehler, die als JSON-Antwort enden."""
    status = 500
    error = "internal_error"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(AppError):
    status = 404
    error = "not_found"


class InvalidStateError(AppError):
    """Übergang ist im aktuellen Zustand nicht erlaubt (z.B. doppeltes Löschen)."""
    status = 400
    error = "invalid_state"


class ValidationError(AppError):
    status = 400
    error = "validation_error"


class UnauthorizedError(AppError):
    status = 401
    error = "unauthorized"


class ForbiddenError(AppError):
    status = 403
    error = "forbidden"


class CloudinaryError(AppError):
    status = 502
    error = "image_host_error"


def register_error_handlers(app: Flask) -> None:
    """Übersetzt Fehler am Endpunkt-Rand in das einheitliche JSON-Fehlerformat."""

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.message)
        else:
            logger.info("%s: %s", type(exc).__name__, exc.message)
        return error_response(exc.error, exc.message, exc.status, exc.details)

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        name = (exc.name or "error").lower().replace(" ", "_")
        return error_response(name, exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return error_response("internal_error", "Internal server error", 500)


__all__ = [
    "AppError",
    "NotFoundError",
    "InvalidStateError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "CloudinaryError",
    "register_error_handlers",
]
