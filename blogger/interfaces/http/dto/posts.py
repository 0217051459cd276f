from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from blogger.domain.posts.entities import PostView


class CoverDTO(BaseModel):
    id: str
    url: str


class AuthorDTO(BaseModel):
    id: int
    username: str


class PostDTO(BaseModel):
    id: int
    title: str
    summary: str
    content: str
    cover: CoverDTO | None = None
    author: AuthorDTO
    created_at: datetime | None = Field(default=None, serialization_alias="createdAt")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")

    @classmethod
    def from_view(cls, view: PostView) -> PostDTO:
        post = view.post
        cover = CoverDTO(id=post.cover.asset_id, url=post.cover.url) if post.cover else None
        return cls(
            id=post.id,
            title=post.title,
            summary=post.summary,
            content=post.content,
            cover=cover,
            author=AuthorDTO(id=post.author_id, username=view.author_username),
            created_at=post.created_at,
            updated_at=post.updated_at,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
