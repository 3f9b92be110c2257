# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import wraps
from typing import Any, TypeVar

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from apistarter.shared.errors import RequestValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_request(schema: type[SchemaT], raw: Any) -> SchemaT:
    """Validate ``raw`` (``{"body", "query", "params"}``) against ``schema``.

    Anything that is not a mapping is treated as an empty request so that the
    failure is reported per location instead of crashing.
    """
    payload = dict(raw) if isinstance(raw, Mapping) else {}
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise RequestValidationError.from_pydantic(exc) from exc


def current_request_payload() -> dict[str, Any]:
    return {
        "body": request.get_json(silent=True),
        "query": request.args.to_dict(),
        "params": dict(request.view_args or {}),
    }


def validate(schema: type[BaseModel]) -> Callable:
    """Parse the current request with ``schema`` and pass it to the view as ``payload``."""

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            payload = parse_request(schema, current_request_payload())
            return view(*args, payload=payload, **kwargs)

        return wrapper

    return decorator


__all__ = ["current_request_payload", "parse_request", "validate"]
