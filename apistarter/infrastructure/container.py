# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from apistarter.application.services.password_hashing import WerkzeugPasswordHasher
from apistarter.application.services.tokens import JwtTokenIssuer
from apistarter.application.use_cases.users.login_user import LoginUserUseCase
from apistarter.application.use_cases.users.manage_users import (
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from apistarter.application.use_cases.users.register_user import RegisterUserUseCase
from apistarter.infrastructure.db import create_db_engine, create_session_factory
from apistarter.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from apistarter.interfaces.http.controllers.health_controller import HealthController
from apistarter.interfaces.http.controllers.users_controller import UsersController
from apistarter.shared.config import AppConfig
from apistarter.shared.middleware.rate_limit import InMemoryRateLimiter


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @cached_property
    def engine(self) -> Engine:
        return create_db_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return create_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_issuer(self) -> JwtTokenIssuer:
        return JwtTokenIssuer(self.config.jwt.secret, self.config.jwt.expires_in_seconds)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def get_user_use_case(self) -> GetUserUseCase:
        return GetUserUseCase(users=self.user_repository)

    @cached_property
    def update_user_use_case(self) -> UpdateUserUseCase:
        return UpdateUserUseCase(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def delete_user_use_case(self) -> DeleteUserUseCase:
        return DeleteUserUseCase(users=self.user_repository)

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(users=self.user_repository)

    @cached_property
    def auth_rate_limiter(self) -> InMemoryRateLimiter | None:
        security = self.config.security
        if not security.enable_rate_limit:
            return None
        return InMemoryRateLimiter(
            security.auth_rate_limit_requests, security.auth_rate_limit_window
        )

    @cached_property
    def general_rate_limiter(self) -> InMemoryRateLimiter | None:
        security = self.config.security
        if not security.enable_rate_limit:
            return None
        return InMemoryRateLimiter(
            security.general_rate_limit_requests, security.general_rate_limit_window
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            get_user_use_case=self.get_user_use_case,
            update_user_use_case=self.update_user_use_case,
            delete_user_use_case=self.delete_user_use_case,
            list_users_use_case=self.list_users_use_case,
            tokens=self.token_issuer,
            auth_rate_limiter=self.auth_rate_limiter,
        )

    @cached_property
    def health_controller(self) -> HealthController:
        return HealthController(engine=self.engine, config=self.config)
