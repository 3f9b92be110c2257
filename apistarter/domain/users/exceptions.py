# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from apistarter.domain.exceptions import DomainError


class DuplicateEmailError(DomainError):
    """The storage layer rejected a second user with the same email."""

    def __init__(self, email: str) -> None:
        super().__init__("email already exists")
        self.email = email
