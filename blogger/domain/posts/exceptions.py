# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from blogger.shared.errors.base import AuthorizationError, NotFoundError


class PostNotFoundError(NotFoundError):
    def __init__(self, post_id: int) -> None:
        super().__init__("post_not_found", context={"post_id": post_id})


class NotAuthorError(AuthorizationError):
    def __init__(self, post_id: int) -> None:
        super().__init__("not_author", context={"post_id": post_id})
