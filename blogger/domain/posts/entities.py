# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Blog post entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class Cover:
    """Image stored in the asset store, addressed by an opaque id."""

    asset_id: str
    url: str


@dataclass(slots=True, frozen=True)
class Post:

    id: int
    title: str
    summary: str
    content: str
    cover: Cover | None
    author_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class PostView:
    """Post together with its author's display name."""

    post: Post
    author_username: str


@dataclass(slots=True, frozen=True)
class PostDraft:
    """Client-editable fields of a post."""

    title: str
    summary: str
    content: str


@dataclass(slots=True, frozen=True)
class CoverUpload:
    data: bytes
    mime_type: str
