# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import Cover, Post, PostView


class PostRepository(Protocol):
    def add(self, post: Post) -> Post: ...
    def find_by_id(self, post_id: int) -> PostView | None: ...
    def list_recent(self, limit: int) -> Sequence[PostView]: ...
    def update(self, post: Post) -> Post: ...
    def delete(self, post_id: int) -> bool: ...


class AssetStore(Protocol):
    """Binary object storage for post covers.

    ``upload`` raises ``UploadError`` when the payload could not be stored.
    ``delete`` returns ``False`` when the asset was already gone.
    """

    async def upload(self, data: bytes, mime_type: str) -> Cover: ...

    async def delete(self, asset_id: str) -> bool: ...
