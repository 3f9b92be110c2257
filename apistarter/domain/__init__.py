# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import DomainError
from .users import DuplicateEmailError, NewUser, StoredCredentials, User, UserChanges, UserPage

__all__ = [
    "DomainError",
    "DuplicateEmailError",
    "NewUser",
    "StoredCredentials",
    "User",
    "UserChanges",
    "UserPage",
]
