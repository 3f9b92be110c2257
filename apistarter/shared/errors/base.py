# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import traceback
from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


@dataclass(slots=True, eq=False)
class ApiError(Exception):
    """HTTP-aware application error.

    ``is_operational`` separates expected failures (bad input, conflicts,
    authentication) whose message is safe to show from internal faults.
    ``context`` carries diagnostics and is never part of an HTTP response.
    """

    status_code: int
    message: str
    is_operational: bool = True
    context: Mapping[str, Any] | None = None
    stack: str = field(default="", init=False, repr=False)

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)
        self.status_code = int(HTTPStatus(self.status_code))
        captured = "".join(traceback.format_stack()[:-2])
        self.stack = f"{self.name}: {self.message}\n{captured}"

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_json(self, production: bool | None = None) -> dict[str, Any]:
        if production is None:
            from apistarter.shared.config import load_config

            production = load_config().is_production()

        payload: dict[str, Any] = {
            "name": self.name,
            "message": self.message,
            "statusCode": self.status_code,
            "isOperational": self.is_operational,
        }
        if self.context is not None:
            payload["context"] = self.context
        if not production:
            payload["stack"] = self.stack
        return payload

    # Client errors (4xx)

    @classmethod
    def bad_request(cls, message: str, context: Mapping[str, Any] | None = None) -> ApiError:
        return cls(HTTPStatus.BAD_REQUEST, message, True, context)

    @classmethod
    def unauthorized(cls, message: str, context: Mapping[str, Any] | None = None) -> ApiError:
        return cls(HTTPStatus.UNAUTHORIZED, message, True, context)

    @classmethod
    def forbidden(cls, message: str, context: Mapping[str, Any] | None = None) -> ApiError:
        return cls(HTTPStatus.FORBIDDEN, message, True, context)

    @classmethod
    def not_found(cls, message: str, context: Mapping[str, Any] | None = None) -> ApiError:
        return cls(HTTPStatus.NOT_FOUND, message, True, context)

    @classmethod
    def conflict(cls, message: str, context: Mapping[str, Any] | None = None) -> ApiError:
        return cls(HTTPStatus.CONFLICT, message, True, context)

    @classmethod
    def unprocessable_entity(
        cls, message: str, context: Mapping[str, Any] | None = None
    ) -> ApiError:
        return cls(HTTPStatus.UNPROCESSABLE_ENTITY, message, True, context)

    @classmethod
    def too_many_requests(cls, message: str, context: Mapping[str, Any] | None = None) -> ApiError:
        return cls(HTTPStatus.TOO_MANY_REQUESTS, message, True, context)

    # Server errors (5xx), never operational

    @classmethod
    def internal(cls, message: str, context: Mapping[str, Any] | None = None) -> ApiError:
        return cls(HTTPStatus.INTERNAL_SERVER_ERROR, message, False, context)

    @classmethod
    def service_unavailable(
        cls, message: str, context: Mapping[str, Any] | None = None
    ) -> ApiError:
        return cls(HTTPStatus.SERVICE_UNAVAILABLE, message, False, context)

    @staticmethod
    def is_api_error(error: object) -> bool:
        return isinstance(error, ApiError)

    @staticmethod
    def is_operational_error(error: object) -> bool:
        if isinstance(error, ApiError):
            return error.is_operational
        return False

