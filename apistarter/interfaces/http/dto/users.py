# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise PydanticCustomError("email_invalid", "Invalid email", {})
    return value


class RegisterBodyDTO(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(max_length=254)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class LoginBodyDTO(BaseModel):
    email: str = Field(max_length=254)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class UpdateUserBodyDTO(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=254)
    password: str | None = Field(None, min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _check_email(value)

    @model_validator(mode="after")
    def require_any_field(self) -> "UpdateUserBodyDTO":
        if self.name is None and self.email is None and self.password is None:
            raise PydanticCustomError(
                "no_fields", "At least one of name, email or password is required", {}
            )
        return self


class ListUsersQueryDTO(BaseModel):
    limit: int = Field(10, ge=1, le=100)
    skip: int = Field(0, ge=0)


class UserIdParamsDTO(BaseModel):
    user_id: int = Field(ge=1)


# Request envelopes: one field per request location.


class RegisterRequest(BaseModel):
    body: RegisterBodyDTO


class LoginRequest(BaseModel):
    body: LoginBodyDTO


class UpdateUserRequest(BaseModel):
    body: UpdateUserBodyDTO
    params: UserIdParamsDTO


class UserIdRequest(BaseModel):
    params: UserIdParamsDTO


class ListUsersRequest(BaseModel):
    query: ListUsersQueryDTO = Field(default_factory=ListUsersQueryDTO)


class UserPublicDTO(BaseModel):
    id: int
    name: str
    email: str


class AuthDataDTO(BaseModel):
    user: UserPublicDTO
    token: str


class AuthResponseDTO(BaseModel):
    message: str
    data: AuthDataDTO
