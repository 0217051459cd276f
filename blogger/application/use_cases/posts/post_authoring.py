# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Token-gated creation, update and removal of blog posts.

Every mutating entry point verifies the session token before touching the
asset store or the repository. Cover replacement always stores the new asset
before the old one is removed, and removal of old assets is best-effort: a
failed cleanup is logged and never fails the request.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime

from blogger.domain.posts.entities import Cover, CoverUpload, Post, PostDraft, PostView
from blogger.domain.posts.exceptions import NotAuthorError, PostNotFoundError
from blogger.domain.posts.repositories import AssetStore, PostRepository
from blogger.domain.users.entities import Identity
from blogger.domain.users.repositories import TokenService
from blogger.shared.errors import UploadError, ValidationError
from blogger.shared.errors.validation import field_errors
from blogger.shared.errors.validation_types import ValidationErrorType
from blogger.shared.logging import logger

TITLE_MAX_LENGTH = 256
SUMMARY_MAX_LENGTH = 1024
MAX_POST_ID = 2**63 - 1
COVER_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/gif", "image/webp"})


class PostAuthoringWorkflow:
    def __init__(
        self,
        *,
        posts: PostRepository,
        assets: AssetStore,
        tokens: TokenService,
        page_size: int = 20,
        cover_required: bool = False,
    ) -> None:
        self._posts = posts
        self._assets = assets
        self._tokens = tokens
        self._page_size = page_size
        self._cover_required = cover_required

    async def create(
        self, token: str | None, draft: PostDraft, upload: CoverUpload | None = None
    ) -> PostView:
        identity = self._tokens.verify(token)
        self._validate(draft, upload, creating=True)

        cover = await self._store_cover(upload, identity) if upload else None
        now = datetime.now(UTC)
        post = Post(
            id=0,
            title=draft.title,
            summary=draft.summary,
            content=draft.content,
            cover=cover,
            author_id=identity.user_id,
            created_at=now,
            updated_at=now,
        )
        try:
            persisted = self._posts.add(post)
        except Exception:
            if cover:
                await self._discard(cover.asset_id, post_id=None)
            raise

        logger.info(
            f"posts.create: ok post_id={persisted.id} user_id={identity.user_id} "
            f"cover={cover.asset_id if cover else None}"
        )
        return PostView(post=persisted, author_username=identity.username)

    async def update(
        self,
        token: str | None,
        post_id: int,
        draft: PostDraft,
        upload: CoverUpload | None = None,
    ) -> PostView:
        identity = self._tokens.verify(token)
        current = self._load(post_id)
        self._ensure_author(current.post, identity)
        self._validate(draft, upload, creating=False)

        old_cover = current.post.cover
        new_cover = await self._store_cover(upload, identity) if upload else None

        changed = replace(
            current.post,
            title=draft.title,
            summary=draft.summary,
            content=draft.content,
            cover=new_cover or old_cover,
        )
        try:
            saved = self._posts.update(changed)
        except Exception:
            if new_cover:
                await self._discard(new_cover.asset_id, post_id=post_id)
            raise

        if new_cover and old_cover:
            await self._discard(old_cover.asset_id, post_id=post_id)

        logger.info(
            f"posts.update: ok post_id={post_id} user_id={identity.user_id} "
            f"cover_replaced={new_cover is not None}"
        )
        return PostView(post=saved, author_username=current.author_username)

    async def delete(self, token: str | None, post_id: int) -> None:
        identity = self._tokens.verify(token)
        current = self._load(post_id)
        self._ensure_author(current.post, identity)

        asset_id = current.post.cover.asset_id if current.post.cover else None
        if not self._posts.delete(post_id):
            raise PostNotFoundError(post_id)

        if asset_id:
            await self._discard(asset_id, post_id=post_id)
        logger.info(f"posts.delete: ok post_id={post_id} user_id={identity.user_id}")

    def get(self, post_id: int) -> PostView:
        return self._load(post_id)

    def list_recent(self) -> Sequence[PostView]:
        return self._posts.list_recent(self._page_size)

    def _load(self, post_id: int) -> PostView:
        # ids outside the signed 64-bit column range can never have been stored
        if not 1 <= post_id <= MAX_POST_ID:
            raise PostNotFoundError(post_id)
        found = self._posts.find_by_id(post_id)
        if found is None:
            raise PostNotFoundError(post_id)
        return found

    @staticmethod
    def _ensure_author(post: Post, identity: Identity) -> None:
        if post.author_id != identity.user_id:
            logger.warning(
                f"posts.ownership: denied post_id={post.id} author_id={post.author_id} "
                f"user_id={identity.user_id}"
            )
            raise NotAuthorError(post.id)

    def _validate(self, draft: PostDraft, upload: CoverUpload | None, *, creating: bool) -> None:
        errors: dict[str, str] = {}
        for name, limit in (
            ("title", TITLE_MAX_LENGTH),
            ("summary", SUMMARY_MAX_LENGTH),
            ("content", None),
        ):
            value = getattr(draft, name)
            if not value or not value.strip():
                errors[name] = ValidationErrorType.BLANK
            elif limit is not None and len(value) > limit:
                errors[name] = ValidationErrorType.TOO_LONG

        if upload is None:
            if creating and self._cover_required:
                errors["file"] = ValidationErrorType.MISSING
        elif not upload.data:
            errors["file"] = ValidationErrorType.COVER_EMPTY
        elif upload.mime_type not in COVER_MIME_TYPES:
            errors["file"] = ValidationErrorType.COVER_NOT_IMAGE

        if errors:
            raise ValidationError(context=field_errors(errors))

    async def _store_cover(self, upload: CoverUpload, identity: Identity) -> Cover:
        try:
            cover = await self._assets.upload(upload.data, upload.mime_type)
        except UploadError:
            logger.warning(f"posts.cover: upload rejected user_id={identity.user_id}")
            raise
        except Exception as exc:
            logger.exception(f"posts.cover: upload failed user_id={identity.user_id}")
            raise UploadError(reason=type(exc).__name__) from exc
        logger.debug(f"posts.cover: stored asset_id={cover.asset_id} size={len(upload.data)}")
        return cover

    async def _discard(self, asset_id: str, *, post_id: int | None) -> None:
        try:
            removed = await self._assets.delete(asset_id)
        except Exception as exc:
            logger.warning(
                f"posts.cover: cleanup failed asset_id={asset_id} post_id={post_id} "
                f"err={type(exc).__name__}: {exc}"
            )
            return
        if not removed:
            logger.info(f"posts.cover: cleanup skipped, asset_id={asset_id} already gone")


__all__ = [
    "COVER_MIME_TYPES",
    "MAX_POST_ID",
    "PostAuthoringWorkflow",
    "SUMMARY_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
]
