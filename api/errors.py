from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError
import logging

logger = logging.getLogger(__name__)

ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def _first_message(messages) -> str:
    """Flatten marshmallow's nested messages down to one human readable line."""
    if isinstance(messages, dict):
        for field, value in messages.items():
            return f"{field}: {_first_message(value)}"
    if isinstance(messages, list) and messages:
        return _first_message(messages[0])
    return str(messages or "Invalid input")


def register_error_handlers(app):
    # Marshmallow validation errors map to 400
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response("VALIDATION_ERROR", _first_message(err.messages), 400, details=err.messages)

    # Unique index on users.username / users.email lost a race with another request
    @app.errorhandler(DuplicateKeyError)
    def handle_duplicate_key(err: DuplicateKeyError):
        logger.info("Duplicate key rejected: %s", err.details)
        return error_response("CONFLICT", "User already exists", 400)

    @app.errorhandler(PyMongoError)
    def handle_db_error(err: PyMongoError):
        logger.exception("Database error", exc_info=err)
        return error_response("INTERNAL_ERROR", "Database error", 500)

    # abort() and routing errors keep their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 400
        return error_response(ERROR_CODES.get(status, "HTTP_ERROR"), err.description, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        # In dev, include exception details to speed up debugging
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
