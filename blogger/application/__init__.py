# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .use_cases.posts.post_authoring import PostAuthoringWorkflow
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase

__all__ = [
    "LoginUserUseCase",
    "PostAuthoringWorkflow",
    "RegisterUserUseCase",
]
