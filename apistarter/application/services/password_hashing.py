# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from apistarter.domain.users.repositories import PasswordHasher

# Fixed cost. Raising it slows down every registration and login.
HASH_METHOD = "scrypt:32768:8:1"
SALT_LENGTH = 16


class WerkzeugPasswordHasher(PasswordHasher):
    def __init__(self, method: str = HASH_METHOD, salt_length: int = SALT_LENGTH) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        return str(
            generate_password_hash(password, method=self._method, salt_length=self._salt_length)
        )

    def verify(self, password: str, hashed: str) -> bool:
        return bool(check_password_hash(hashed, password))
