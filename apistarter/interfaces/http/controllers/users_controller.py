# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify

from apistarter.application.use_cases.users.login_user import LoginUserUseCase
from apistarter.application.use_cases.users.manage_users import (
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from apistarter.application.use_cases.users.register_user import RegisterUserUseCase
from apistarter.domain.users.entities import User
from apistarter.domain.users.repositories import TokenIssuer
from apistarter.interfaces.http.auth import require_auth
from apistarter.interfaces.http.dto.users import (
    AuthResponseDTO,
    ListUsersRequest,
    LoginRequest,
    RegisterRequest,
    UpdateUserRequest,
    UserIdRequest,
    UserPublicDTO,
)
from apistarter.interfaces.http.validation import validate
from apistarter.shared.errors import ApiError
from apistarter.shared.logging import logger
from apistarter.shared.middleware.rate_limit import InMemoryRateLimiter, rate_limit


def _public(user: User) -> dict[str, object]:
    return UserPublicDTO.model_validate(user.to_public()).model_dump()


def _ensure_self(user_id: int) -> None:
    if g.user_id != user_id:
        raise ApiError.forbidden("You can only modify your own account")


class UsersController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        get_user_use_case: GetUserUseCase,
        update_user_use_case: UpdateUserUseCase,
        delete_user_use_case: DeleteUserUseCase,
        list_users_use_case: ListUsersUseCase,
        tokens: TokenIssuer,
        auth_rate_limiter: InMemoryRateLimiter | None = None,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._get_user_use_case = get_user_use_case
        self._update_user_use_case = update_user_use_case
        self._delete_user_use_case = delete_user_use_case
        self._list_users_use_case = list_users_use_case
        self._tokens = tokens
        self._auth_rate_limiter = auth_rate_limiter

    @validate(RegisterRequest)
    def register(self, payload: RegisterRequest) -> tuple[Response, int]:
        body = payload.body
        user, token = self._register_use_case.execute(body.name, body.email, body.password)

        response = AuthResponseDTO.model_validate(
            {
                "message": "User registered successfully",
                "data": {"user": user.to_public(), "token": token},
            }
        )
        logger.info(f"auth.register: ok user_id={user.id}")
        return jsonify(response.model_dump()), 201

    @validate(LoginRequest)
    def login(self, payload: LoginRequest) -> tuple[Response, int]:
        body = payload.body
        user, token = self._login_use_case.execute(body.email, body.password)

        response = AuthResponseDTO.model_validate(
            {
                "message": "Login successful",
                "data": {"user": user.to_public(), "token": token},
            }
        )
        logger.info(f"auth.login: ok user_id={user.id}")
        return jsonify(response.model_dump()), 200

    def me(self) -> tuple[Response, int]:
        user = self._get_user_use_case.execute(g.user_id)
        return jsonify({"message": "User retrieved successfully", "data": {"user": _public(user)}}), 200

    @validate(ListUsersRequest)
    def list_users(self, payload: ListUsersRequest) -> tuple[Response, int]:
        query = payload.query
        page = self._list_users_use_case.execute(limit=query.limit, skip=query.skip)
        data = {
            "users": [_public(user) for user in page.users],
            "total": page.total,
            "limit": query.limit,
            "skip": query.skip,
        }
        return jsonify({"message": "Users retrieved successfully", "data": data}), 200

    @validate(UserIdRequest)
    def get_user(self, payload: UserIdRequest, **_: object) -> tuple[Response, int]:
        user = self._get_user_use_case.execute(payload.params.user_id)
        return jsonify({"message": "User retrieved successfully", "data": {"user": _public(user)}}), 200

    @validate(UpdateUserRequest)
    def update_user(self, payload: UpdateUserRequest, **_: object) -> tuple[Response, int]:
        user_id = payload.params.user_id
        _ensure_self(user_id)
        body = payload.body
        user = self._update_user_use_case.execute(
            user_id, name=body.name, email=body.email, password=body.password
        )
        logger.info(f"users.update: ok user_id={user_id}")
        return jsonify({"message": "User updated successfully", "data": {"user": _public(user)}}), 200

    @validate(UserIdRequest)
    def delete_user(self, payload: UserIdRequest, **_: object) -> tuple[Response, int]:
        user_id = payload.params.user_id
        _ensure_self(user_id)
        self._delete_user_use_case.execute(user_id)
        logger.info(f"users.delete: ok user_id={user_id}")
        return jsonify({"message": "User deleted successfully"}), 200

    def as_blueprint(self, base_path: str = "/api/v1") -> Blueprint:
        authed = require_auth(self._tokens)
        limited = rate_limit(self._auth_rate_limiter)

        bp = Blueprint("users", __name__, url_prefix=f"{base_path}/users")
        bp.add_url_rule("/register", "register", limited(self.register), methods=["POST"])
        bp.add_url_rule("/login", "login", limited(self.login), methods=["POST"])
        bp.add_url_rule("/me", "me", authed(self.me), methods=["GET"])
        bp.add_url_rule("", "list_users", authed(self.list_users), methods=["GET"])
        bp.add_url_rule("/<int:user_id>", "get_user", authed(self.get_user), methods=["GET"])
        bp.add_url_rule(
            "/<int:user_id>", "update_user", authed(self.update_user), methods=["PATCH"]
        )
        bp.add_url_rule(
            "/<int:user_id>", "delete_user", authed(self.delete_user), methods=["DELETE"]
        )
        return bp
