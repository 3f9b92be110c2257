# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

CENSOR = "[REDACTED]"

# Keys whose values never reach a sink, wherever they appear in ``extra``.
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "password_hash",
        "authorization",
        "token",
        "refresh_token",
        "refreshtoken",
        "api_key",
        "apikey",
        "secret",
        "jwt_secret",
    }
)

_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(jwt[_-]?secret\s*[:=]\s*['\"]?)([^'\"\s,]+)", re.IGNORECASE), rf"\1{CENSOR}"),
    (re.compile(r"(bearer\s+)([\w\-.]+)", re.IGNORECASE), rf"\1{CENSOR}"),
    (re.compile(r"\beyJ[\w\-]+\.[\w\-]+\.[\w\-]+"), CENSOR),
    (re.compile(r"(['\"]password(?:_hash)?['\"]\s*:\s*['\"])([^'\"]*)", re.IGNORECASE), rf"\1{CENSOR}"),
    (re.compile(r"(password(?:_hash)?\s*=\s*)([^\s,&}]+)", re.IGNORECASE), rf"\1{CENSOR}"),
    (re.compile(r"(\w+(?:\+\w+)?://[^:/@\s]+:)([^@\s]+)(@)"), rf"\1{CENSOR}\3"),
    (re.compile(r"[\w.%+-]+@([\w-]+(?:\.[\w-]+)*\.[a-zA-Z]{2,})"), r"***@\1"),
)


def sanitize_message(message: str) -> str:
    """Mask credentials, tokens and email local parts in a rendered log line."""
    for pattern, replacement in _PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def redact_fields(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            key: CENSOR if str(key).lower() in SENSITIVE_KEYS else redact_fields(item)
            for key, item in value.items()
        }
    if isinstance(value, list | tuple):
        return type(value)(redact_fields(item) for item in value)
    return value


def sanitize_record(record: dict[str, Any]) -> None:
    record["message"] = sanitize_message(record["message"])
    extra = record["extra"]
    for key in list(extra):
        if key == "correlation_id":
            continue
        extra[key] = CENSOR if key.lower() in SENSITIVE_KEYS else redact_fields(extra[key])


__all__ = ["CENSOR", "SENSITIVE_KEYS", "redact_fields", "sanitize_message", "sanitize_record"]
