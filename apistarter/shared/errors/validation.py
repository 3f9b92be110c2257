# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pydantic import ValidationError as PydanticValidationError

_FALLBACK_MESSAGE = "Validation failed"
_ROOT_LOCATION = "request"


class RequestValidationError(Exception):
    """Field-level validation failure grouped by request location."""

    status_code = 400

    def __init__(self, issues: Mapping[str, Sequence[str]]) -> None:
        self.issues = {location: list(messages) for location, messages in issues.items()}
        super().__init__(self.message)

    @property
    def message(self) -> str:
        parts = [
            f"{location}: {', '.join(messages)}"
            for location, messages in self.issues.items()
            if messages
        ]
        return ", ".join(parts) or _FALLBACK_MESSAGE

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> RequestValidationError:
        return cls(group_pydantic_errors(exc))


def group_pydantic_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        location = str(loc[0]) if loc else _ROOT_LOCATION
        grouped.setdefault(location, []).append(error.get("msg", "Invalid value"))
    return grouped


__all__ = [
    "RequestValidationError",
    "group_pydantic_errors",
]
