# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import NewUser, StoredCredentials, User, UserChanges, UserPage
from .exceptions import DuplicateEmailError
from .repositories import PasswordHasher, TokenIssuer, UserRepository

__all__ = [
    "DuplicateEmailError",
    "NewUser",
    "PasswordHasher",
    "StoredCredentials",
    "TokenIssuer",
    "User",
    "UserChanges",
    "UserPage",
    "UserRepository",
]
