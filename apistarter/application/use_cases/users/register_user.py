# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from apistarter.domain.users.entities import NewUser, User
from apistarter.domain.users.exceptions import DuplicateEmailError
from apistarter.domain.users.repositories import PasswordHasher, TokenIssuer, UserRepository
from apistarter.shared.errors import ApiError

EMAIL_IN_USE = "Email already in use"


class RegisterUserUseCase:
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

    def execute(self, name: str, email: str, password: str) -> tuple[User, str]:
        if self._users.find_by_email(email) is not None:
            raise ApiError.conflict(EMAIL_IN_USE)

        hashed = self._password_hasher.hash(password)
        try:
            persisted = self._users.create(
                NewUser(name=name, email=email, password_hash=hashed)
            )
        except DuplicateEmailError as exc:
            # Lost the race against a concurrent registration.
            raise ApiError.conflict(EMAIL_IN_USE) from exc

        token = self._tokens.issue(persisted.id)
        return persisted, token
