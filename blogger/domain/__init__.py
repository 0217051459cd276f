# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .posts.entities import Cover, CoverUpload, Post, PostDraft, PostView
from .posts.exceptions import NotAuthorError, PostNotFoundError
from .users.entities import Identity, User

__all__ = [
    "Cover",
    "CoverUpload",
    "Identity",
    "NotAuthorError",
    "Post",
    "PostDraft",
    "PostNotFoundError",
    "PostView",
    "User",
]
