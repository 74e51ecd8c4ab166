"""Polymorphic reference to reportable content."""

import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import InvalidContentType
from models.content import Comment, Post

CONTENT_TYPES = ("post", "comment")


@dataclass(frozen=True)
class ContentSnapshot:
    """Denormalized view of the reported content."""

    id: uuid.UUID
    author_id: uuid.UUID
    container_id: uuid.UUID  # channel for posts, parent post for comments
    body: str
    is_deleted: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "author_id": str(self.author_id),
            "container_id": str(self.container_id),
            "body": self.body,
            "is_deleted": self.is_deleted,
        }


@dataclass(frozen=True)
class PostRef:
    id: uuid.UUID
    content_type = "post"

    async def snapshot(self, db: AsyncSession) -> ContentSnapshot | None:
        row = (
            await db.execute(
                select(Post.id, Post.author_id, Post.channel_id, Post.content, Post.is_deleted).where(
                    Post.id == self.id
                )
            )
        ).first()
        if row is None:
            return None
        return ContentSnapshot(
            id=row.id, author_id=row.author_id, container_id=row.channel_id, body=row.content, is_deleted=row.is_deleted
        )

    async def soft_delete(self, db: AsyncSession) -> None:
        await db.execute(
            update(Post).where(Post.id == self.id).values(is_deleted=True).execution_options(synchronize_session=False)
        )


@dataclass(frozen=True)
class CommentRef:
    id: uuid.UUID
    content_type = "comment"

    async def snapshot(self, db: AsyncSession) -> ContentSnapshot | None:
        row = (
            await db.execute(
                select(Comment.id, Comment.author_id, Comment.post_id, Comment.content, Comment.is_deleted).where(
                    Comment.id == self.id
                )
            )
        ).first()
        if row is None:
            return None
        return ContentSnapshot(
            id=row.id, author_id=row.author_id, container_id=row.post_id, body=row.content, is_deleted=row.is_deleted
        )

    async def soft_delete(self, db: AsyncSession) -> None:
        await db.execute(
            update(Comment)
            .where(Comment.id == self.id)
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )


ContentRef = PostRef | CommentRef


def content_ref(content_type: str, content_id: uuid.UUID) -> ContentRef:
    """
    Build the content reference variant for a (content_type, content_id) pair.

    Raises:
        InvalidContentType: If content_type is not post or comment
    """
    if content_type == "post":
        return PostRef(content_id)
    if content_type == "comment":
        return CommentRef(content_id)
    raise InvalidContentType(f"Unknown content type: {content_type}")
