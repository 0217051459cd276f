# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy.orm import Session, joinedload

from blogger.domain.posts.entities import Cover
from blogger.domain.posts.entities import Post as DomainPost
from blogger.domain.posts.entities import PostView
from blogger.domain.posts.exceptions import PostNotFoundError
from blogger.domain.posts.repositories import PostRepository
from blogger.infrastructure.db.models import Post
from blogger.infrastructure.unit_of_work import unit_of_work_scope


def _to_domain(row: Post) -> DomainPost:
    cover = None
    if row.cover_id and row.cover_url:
        cover = Cover(asset_id=row.cover_id, url=row.cover_url)
    return DomainPost(
        id=row.id,
        title=row.title,
        summary=row.summary,
        content=row.content,
        cover=cover,
        author_id=row.author_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_view(row: Post) -> PostView:
    return PostView(post=_to_domain(row), author_username=row.author.username)


class SqlAlchemyPostRepository(PostRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def add(self, post: DomainPost) -> DomainPost:
        with unit_of_work_scope(self._session_factory) as session:
            row = Post(
                title=post.title,
                summary=post.summary,
                content=post.content,
                cover_id=post.cover.asset_id if post.cover else None,
                cover_url=post.cover.url if post.cover else None,
                author_id=post.author_id,
            )
            if post.created_at is not None:
                row.created_at = post.created_at
                row.updated_at = post.updated_at or post.created_at
            session.add(row)
            session.flush()
            session.refresh(row)
            return _to_domain(row)

    def find_by_id(self, post_id: int) -> PostView | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(Post)
                .options(joinedload(Post.author))
                .filter(Post.id == post_id)
                .first()
            )
            return _to_view(row) if row else None

    def list_recent(self, limit: int) -> Sequence[PostView]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Post)
                .options(joinedload(Post.author))
                .order_by(Post.created_at.desc(), Post.id.desc())
                .limit(limit)
                .all()
            )
            return [_to_view(row) for row in rows]

    def update(self, post: DomainPost) -> DomainPost:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Post, post.id)
            if row is None:
                raise PostNotFoundError(post.id)
            row.title = post.title
            row.summary = post.summary
            row.content = post.content
            row.cover_id = post.cover.asset_id if post.cover else None
            row.cover_url = post.cover.url if post.cover else None
            session.flush()
            session.refresh(row)
            return _to_domain(row)

    def delete(self, post_id: int) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            removed = session.query(Post).filter(Post.id == post_id).delete()
            return removed > 0
