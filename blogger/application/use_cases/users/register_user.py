# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from blogger.domain.users.entities import User
from blogger.domain.users.exceptions import UserAlreadyExistsError
from blogger.domain.users.repositories import PasswordHasher, UserRepository
from blogger.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, username: str, password: str) -> User:
        existing = self._users.find_by_username(username)
        if existing:
            raise UserAlreadyExistsError(context={"username": username})
        hashed = self._password_hasher.hash(password)
        user = User(id=0, username=username, password_hash=hashed, created_at=datetime.now(UTC))
        persisted = self._users.add(user)
        logger.info(f"users.register: ok user_id={persisted.id}")
        return persisted
