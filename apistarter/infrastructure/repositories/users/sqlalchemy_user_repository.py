# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from apistarter.domain.users.entities import NewUser, StoredCredentials
from apistarter.domain.users.entities import User as DomainUser
from apistarter.domain.users.entities import UserChanges, UserPage
from apistarter.domain.users.exceptions import DuplicateEmailError
from apistarter.domain.users.repositories import UserRepository
from apistarter.infrastructure.db.models import User
from apistarter.infrastructure.unit_of_work import unit_of_work_scope


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back; stored values are always UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        email=row.email,
        email_verified=bool(row.email_verified),
        is_active=bool(row.is_active),
        created_at=_as_utc(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == email).first()
            return _to_domain(row) if row else None

    def find_by_email_with_password(self, email: str) -> StoredCredentials | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == email).first()
            if not row:
                return None
            return StoredCredentials(user=_to_domain(row), password_hash=row.password_hash)

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def create(self, user: NewUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(name=user.name, email=user.email, password_hash=user.password_hash)
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            raise DuplicateEmailError(user.email) from exc

    def update_by_id(self, user_id: int, changes: UserChanges) -> DomainUser | None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = session.get(User, user_id)
                if not row:
                    return None
                for key, value in changes.as_dict().items():
                    setattr(row, key, value)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            raise DuplicateEmailError(changes.email or "") from exc

    def delete_by_id(self, user_id: int) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if not row:
                return False
            session.delete(row)
            return True

    def find_all(self, limit: int, skip: int) -> UserPage:
        with unit_of_work_scope(self._session_factory) as session:
            query = session.query(User).filter(User.is_active.is_(True))
            total = query.count()
            rows = (
                query.order_by(User.created_at.desc(), User.id.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
            return UserPage(users=[_to_domain(row) for row in rows], total=total)

    def mark_logged_in(self, user_id: int) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(User).filter(User.id == user_id).update(
                {User.last_login_at: datetime.now(UTC)}
            )
