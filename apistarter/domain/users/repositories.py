# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import NewUser, StoredCredentials, User, UserChanges, UserPage


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_email_with_password(self, email: str) -> StoredCredentials | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def create(self, user: NewUser) -> User: ...
    def update_by_id(self, user_id: int, changes: UserChanges) -> User | None: ...
    def delete_by_id(self, user_id: int) -> bool: ...
    def find_all(self, limit: int, skip: int) -> UserPage: ...
    def mark_logged_in(self, user_id: int) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenIssuer(Protocol):
    def issue(self, user_id: int) -> str: ...
    def decode(self, token: str) -> int: ...
