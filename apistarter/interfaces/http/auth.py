# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from flask import g, request

from apistarter.domain.users.repositories import TokenIssuer
from apistarter.shared.errors import ApiError


def _bearer_token() -> str:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def require_auth(tokens: TokenIssuer) -> Callable:
    """Reject requests without a valid bearer token; expose the caller as ``g.user_id``."""

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = _bearer_token()
            if not token:
                raise ApiError.unauthorized("No token provided")
            g.user_id = tokens.decode(token)
            return view(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["require_auth"]
