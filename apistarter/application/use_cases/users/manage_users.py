# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Lookup and maintenance of existing users."""

from __future__ import annotations

from apistarter.domain.users.entities import User, UserChanges, UserPage
from apistarter.domain.users.exceptions import DuplicateEmailError
from apistarter.domain.users.repositories import PasswordHasher, UserRepository
from apistarter.shared.errors import ApiError

from .register_user import EMAIL_IN_USE

USER_NOT_FOUND = "User not found"


class GetUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise ApiError.not_found(USER_NOT_FOUND, {"user_id": user_id})
        return user


class UpdateUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(
        self,
        user_id: int,
        *,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> User:
        changes = UserChanges(
            name=name,
            email=email,
            password_hash=self._password_hasher.hash(password) if password is not None else None,
        )
        try:
            updated = self._users.update_by_id(user_id, changes)
        except DuplicateEmailError as exc:
            raise ApiError.conflict(EMAIL_IN_USE) from exc

        if updated is None:
            raise ApiError.not_found(USER_NOT_FOUND, {"user_id": user_id})
        return updated


class DeleteUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int) -> None:
        if not self._users.delete_by_id(user_id):
            raise ApiError.not_found(USER_NOT_FOUND, {"user_id": user_id})


class ListUsersUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, limit: int = 10, skip: int = 0) -> UserPage:
        return self._users.find_all(limit=limit, skip=skip)
