# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    name: str
    email: str
    email_verified: bool = False
    is_active: bool = True
    created_at: datetime | None = None

    def to_public(self) -> dict[str, object]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(slots=True, frozen=True)
class StoredCredentials:

    user: User
    password_hash: str


@dataclass(slots=True, frozen=True)
class NewUser:

    name: str
    email: str
    password_hash: str


@dataclass(slots=True, frozen=True)
class UserChanges:

    name: str | None = None
    email: str | None = None
    password_hash: str | None = None

    def as_dict(self) -> dict[str, str]:
        values = {"name": self.name, "email": self.email, "password_hash": self.password_hash}
        return {key: value for key, value in values.items() if value is not None}


@dataclass(slots=True, frozen=True)
class UserPage:

    users: list[User]
    total: int
