# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from blogger.application.services.password_hashing import \
    WerkzeugPasswordHasher
from blogger.application.use_cases.posts.post_authoring import \
    PostAuthoringWorkflow
from blogger.application.use_cases.users.login_user import LoginUserUseCase
from blogger.application.use_cases.users.register_user import \
    RegisterUserUseCase
from blogger.domain.posts.repositories import AssetStore
from blogger.infrastructure.auth import JwtTokenService
from blogger.infrastructure.db import create_db_engine, create_session_factory
from blogger.infrastructure.repositories.posts.sqlalchemy_post_repository import \
    SqlAlchemyPostRepository
from blogger.infrastructure.repositories.users.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from blogger.infrastructure.storage import build_asset_store
from blogger.interfaces.http.controllers.auth_controller import AuthController
from blogger.interfaces.http.controllers.misc_controller import MiscController
from blogger.interfaces.http.controllers.posts_controller import \
    PostsController
from blogger.shared.config import AppConfig


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
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(self.config.jwt_secret)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def post_repository(self) -> SqlAlchemyPostRepository:
        return SqlAlchemyPostRepository(self.session_factory)

    @cached_property
    def asset_store(self) -> AssetStore:
        return build_asset_store(self.config.assets)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def post_authoring_workflow(self) -> PostAuthoringWorkflow:
        return PostAuthoringWorkflow(
            posts=self.post_repository,
            assets=self.asset_store,
            tokens=self.token_service,
            page_size=self.config.posts.page_size,
            cover_required=self.config.posts.cover_required,
        )

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            tokens=self.token_service,
            security=self.config.security,
        )

    @cached_property
    def posts_controller(self) -> PostsController:
        return PostsController(
            workflow=self.post_authoring_workflow,
            security=self.config.security,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        uploads_dir: Path | None = None
        if self.config.assets.backend == "local":
            uploads_dir = self.config.assets.uploads_dir
        return MiscController(engine=self.engine, uploads_dir=uploads_dir)
