# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from apistarter.domain.users.entities import User
from apistarter.domain.users.repositories import PasswordHasher, TokenIssuer, UserRepository
from apistarter.shared.errors import ApiError

INVALID_CREDENTIALS = "Invalid credentials"
_DUMMY_PASSWORD = "unknown-account-placeholder"


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenIssuer,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._dummy_hash: str | None = None

    def _unknown_account_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash(_DUMMY_PASSWORD)
        return self._dummy_hash

    def execute(self, email: str, password: str) -> tuple[User, str]:
        # Unknown email and wrong password must be indistinguishable, in timing too:
        # an unknown email still pays for one hash verification.
        stored = self._users.find_by_email_with_password(email)
        if stored is None:
            self._password_hasher.verify(password, self._unknown_account_hash())
            raise ApiError.unauthorized(INVALID_CREDENTIALS)
        if not self._password_hasher.verify(password, stored.password_hash):
            raise ApiError.unauthorized(INVALID_CREDENTIALS)

        self._users.mark_logged_in(stored.user.id)
        token = self._tokens.issue(stored.user.id)
        return stored.user, token
