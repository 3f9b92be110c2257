from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from flask import Flask
from flask.testing import FlaskClient
from loguru import logger as loguru_logger

from apistarter.app import create_app
from apistarter.domain.users.entities import (
    NewUser,
    StoredCredentials,
    User,
    UserChanges,
    UserPage,
)
from apistarter.domain.users.exceptions import DuplicateEmailError
from apistarter.domain.users.repositories import PasswordHasher, TokenIssuer, UserRepository
from apistarter.shared.config import AppConfig, DatabaseConfig, JwtConfig, SecurityConfig
from apistarter.shared.errors import ApiError

TEST_SECRET = "test-secret-that-is-at-least-32-characters"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._rows: dict[int, StoredCredentials] = {}
        self._seq = 1
        self.logins: list[int] = []

    def _by_email(self, email: str) -> StoredCredentials | None:
        return next((row for row in self._rows.values() if row.user.email == email), None)

    def find_by_email(self, email: str) -> User | None:
        row = self._by_email(email)
        return row.user if row else None

    def find_by_email_with_password(self, email: str) -> StoredCredentials | None:
        return self._by_email(email)

    def find_by_id(self, user_id: int) -> User | None:
        row = self._rows.get(user_id)
        return row.user if row else None

    def create(self, user: NewUser) -> User:
        if self._by_email(user.email) is not None:
            raise DuplicateEmailError(user.email)
        created = User(id=self._seq, name=user.name, email=user.email)
        self._rows[created.id] = StoredCredentials(user=created, password_hash=user.password_hash)
        self._seq += 1
        return created

    def update_by_id(self, user_id: int, changes: UserChanges) -> User | None:
        row = self._rows.get(user_id)
        if row is None:
            return None
        if changes.email is not None:
            other = self._by_email(changes.email)
            if other is not None and other.user.id != user_id:
                raise DuplicateEmailError(changes.email)
        user = User(
            id=user_id,
            name=changes.name or row.user.name,
            email=changes.email or row.user.email,
        )
        self._rows[user_id] = StoredCredentials(
            user=user, password_hash=changes.password_hash or row.password_hash
        )
        return user

    def delete_by_id(self, user_id: int) -> bool:
        return self._rows.pop(user_id, None) is not None

    def find_all(self, limit: int, skip: int) -> UserPage:
        users = [row.user for row in sorted(self._rows.values(), key=lambda r: -r.user.id)]
        return UserPage(users=users[skip : skip + limit], total=len(users))

    def mark_logged_in(self, user_id: int) -> None:
        self.logins.append(user_id)

    def password_hash_of(self, user_id: int) -> str:
        return self._rows[user_id].password_hash


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class FakeTokenIssuer(TokenIssuer):
    def issue(self, user_id: int) -> str:
        return f"token-{user_id}"

    def decode(self, token: str) -> int:
        prefix, _, user_id = token.partition("-")
        if prefix != "token" or not user_id.isdigit():
            raise ApiError.unauthorized("Invalid token")
        return int(user_id)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def tokens() -> FakeTokenIssuer:
    return FakeTokenIssuer()


def make_config(tmp_path: Path, **overrides: Any) -> AppConfig:
    values: dict[str, Any] = {
        "APP_ENV": "test",
        "database": DatabaseConfig(DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}"),
        "jwt": JwtConfig(JWT_SECRET=TEST_SECRET, JWT_EXPIRES_IN="1h"),
        "security": SecurityConfig(ENABLE_RATE_LIMIT=False),
    }
    values.update(overrides)
    return AppConfig(**values)


@pytest.fixture()
def config_factory(tmp_path: Path) -> Callable[..., AppConfig]:
    return lambda **overrides: make_config(tmp_path, **overrides)


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return make_config(tmp_path)


@pytest.fixture()
def app(config: AppConfig) -> Flask:
    flask_app = create_app(config)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def log_records(app: Flask) -> Iterator[list[dict[str, Any]]]:
    records: list[dict[str, Any]] = []
    handler_id = loguru_logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    loguru_logger.remove(handler_id)
