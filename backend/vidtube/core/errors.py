"""Centralized JSON error handling for the API.

Every failure leaves the application as the same envelope::

    {"statusCode": 401, "message": "...", "success": false, "errors": []}
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from vidtube.core.extensions import jwt
from vidtube.core.logger import ensure_request_id
from vidtube.services._shared.errors import ServiceError

log = logging.getLogger(__name__)


def error_envelope(
    *,
    status: int,
    message: str,
    errors: list[Any] | None = None,
) -> dict[str, Any]:
    """
    Build the error body shared by every handler.

    :param status: HTTP status code.
    :param message: Human-readable error summary (safe for clients).
    :param errors: Optional structured details (validation messages).
    :returns: Envelope dictionary.
    :rtype: dict
    """
    return {
        "statusCode": int(status),
        "message": message,
        "success": False,
        "errors": list(errors or []),
    }


def error_response(
    *,
    status: int,
    message: str,
    errors: list[Any] | None = None,
) -> tuple[Response, int]:
    """Return a Flask JSON response carrying the error envelope."""
    return jsonify(error_envelope(status=status, message=message, errors=errors)), int(status)


def _log_failure(kind: str, status: int, message: str, *, exc_info: bool = False) -> None:
    """Log 4xx as warnings and 5xx as errors with the request id attached."""
    level = log.error if status >= 500 else log.warning
    level(
        "%s: status=%s msg=%s request_id=%s",
        kind,
        status,
        message,
        ensure_request_id(),
        exc_info=exc_info,
    )


def _flatten_validation_messages(messages: Any) -> list[dict[str, Any]]:
    """Turn marshmallow's ``{field: [msg, ...]}`` mapping into a list."""
    if isinstance(messages, dict):
        return [{"field": field, "messages": msgs} for field, msgs in messages.items()]
    if isinstance(messages, list):
        return [{"field": None, "messages": messages}]
    return [{"field": None, "messages": [str(messages)]}]


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees the error envelope for all handled errors.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status = err.kind.status
        message = str(err)
        _log_failure(f"ServiceError[{err.kind.name}]", status, message, exc_info=status >= 500)
        if not message:
            message = HTTPStatus(status).phrase
        return error_response(status=status, message=message)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        messages = getattr(err, "messages", None) or err.normalized_messages()
        _log_failure("ValidationError", HTTPStatus.BAD_REQUEST, "Validation failed")
        return error_response(
            status=HTTPStatus.BAD_REQUEST,
            message="Validation failed",
            errors=_flatten_validation_messages(messages),
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.description or HTTPStatus(status).phrase).strip()
        _log_failure("HTTPException", status, message)
        return error_response(status=status, message=message)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        _log_failure("IntegrityError", HTTPStatus.CONFLICT, "Resource conflict", exc_info=True)
        return error_response(status=HTTPStatus.CONFLICT, message="Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        _log_failure(
            "OperationalError",
            HTTPStatus.SERVICE_UNAVAILABLE,
            "Service temporarily unavailable",
            exc_info=True,
        )
        return error_response(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            message="Service temporarily unavailable",
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        _log_failure(
            "Unhandled exception",
            HTTPStatus.INTERNAL_SERVER_ERROR,
            type(err).__name__,
            exc_info=True,
        )
        return error_response(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message="Something went wrong",
        )

    # ------------------------------------------------------------------ #
    # flask-jwt-extended failures (access token middleware)
    # ------------------------------------------------------------------ #

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        _log_failure("JWT", HTTPStatus.UNAUTHORIZED, reason)
        return error_response(status=HTTPStatus.UNAUTHORIZED, message="Unauthorized request")

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        _log_failure("JWT", HTTPStatus.UNAUTHORIZED, reason)
        return error_response(status=HTTPStatus.UNAUTHORIZED, message="Invalid access token")

    @jwt.expired_token_loader
    def _expired_token(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]):
        _log_failure("JWT", HTTPStatus.UNAUTHORIZED, "access token expired")
        return error_response(status=HTTPStatus.UNAUTHORIZED, message="Access token expired")

    @jwt.revoked_token_loader
    def _revoked_token(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]):
        _log_failure("JWT", HTTPStatus.UNAUTHORIZED, "access token revoked")
        return error_response(status=HTTPStatus.UNAUTHORIZED, message="Access token revoked")
