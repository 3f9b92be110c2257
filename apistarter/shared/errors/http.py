# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from apistarter.shared.logging import get_correlation_id, logger

from .base import ApiError
from .validation import RequestValidationError

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def error_response(status_code: int, message: str) -> tuple[Response, int]:
    payload = {"status": "error", "statusCode": int(status_code), "message": message}
    return jsonify(payload), int(status_code)


def _client_ip() -> str:
    return request.remote_addr or "unknown"


def _log_error(status_code: int, message: str, exc: BaseException) -> None:
    line = (
        f"{status_code} - {message} - {request.method} {request.full_path.rstrip('?')} "
        f"from {_client_ip()} request_id={get_correlation_id()}"
    )
    if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.opt(exception=exc).error(f"{line} error={type(exc).__name__}: {exc}")
    else:
        logger.warning(line)


def register_error_handler(app: Flask, *, production: bool = False) -> None:
    """Translate every error raised while handling a request into the JSON error shape."""

    @app.errorhandler(RequestValidationError)
    def _handle_validation(exc: RequestValidationError):
        _log_error(exc.status_code, exc.message, exc)
        return error_response(exc.status_code, exc.message)

    @app.errorhandler(PydanticValidationError)
    def _handle_pydantic(exc: PydanticValidationError):
        return _handle_validation(RequestValidationError.from_pydantic(exc))

    @app.errorhandler(ApiError)
    def _handle_api_error(exc: ApiError):
        message = exc.message
        if production and not exc.is_operational:
            message = GENERIC_ERROR_MESSAGE
        _log_error(exc.status_code, exc.message, exc)
        return error_response(exc.status_code, message)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        status_code = exc.code or HTTPStatus.INTERNAL_SERVER_ERROR
        message = HTTPStatus(status_code).phrase
        _log_error(status_code, exc.description or message, exc)
        return error_response(status_code, message)

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        _log_error(HTTPStatus.INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE, exc)
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


__all__ = ["GENERIC_ERROR_MESSAGE", "error_response", "register_error_handler"]
