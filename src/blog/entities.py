"""
Entity shapes and serialization contracts for Authors and BlogPosts.
A stored BlogPost only knows its author id; the derived full name exists on PopulatedBlogPost alone,
so a post cannot be serialized until the Author record has been resolved.
Timestamps are held at millisecond precision so the wire form round-trips exactly.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from src.blog.errors import ValidationError

AUTHOR_REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("firstName", "first_name"),
    ("lastName", "last_name"),
    ("userName", "user_name"),
)


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def new_entity_id() -> str:
    return uuid.uuid4().hex


def to_epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (value - _EPOCH) // timedelta(milliseconds=1)


def from_epoch_millis(value: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=int(value))


def utc_now_millis() -> datetime:
    """Current UTC time truncated to whole milliseconds."""

    return from_epoch_millis(to_epoch_millis(datetime.now(tz=UTC)))


def parse_created(value: str) -> datetime:
    """Parse the wire form of `created` (decimal epoch milliseconds)."""

    if not value.isdigit():
        raise ValueError(f"created must be a decimal string of epoch milliseconds, got {value!r}")
    return from_epoch_millis(int(value))


@dataclass(frozen=True)
class Author:
    id: str
    first_name: str
    last_name: str
    user_name: str


@dataclass(frozen=True)
class Comment:
    content: str


@dataclass(frozen=True)
class BlogPost:
    """A BlogPost as stored: the author is an unresolved id."""

    id: str
    title: str
    content: str
    author_id: str
    created: datetime
    comments: tuple[Comment, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PopulatedBlogPost:
    """A BlogPost joined with its live Author record."""

    post: BlogPost
    author: Author

    def __post_init__(self) -> None:
        if self.post.author_id != self.author.id:
            raise ValueError(
                f"Author {self.author.id!r} does not match post author reference {self.post.author_id!r}"
            )

    @property
    def id(self) -> str:
        return self.post.id

    @property
    def title(self) -> str:
        return self.post.title

    @property
    def content(self) -> str:
        return self.post.content

    @property
    def created(self) -> datetime:
        return self.post.created

    @property
    def comments(self) -> tuple[Comment, ...]:
        return self.post.comments

    @property
    def full_name(self) -> str:
        return f"{self.author.first_name} {self.author.last_name}".strip()


def build_author(*, first_name: str | None, last_name: str | None, user_name: str | None) -> Author:
    """Construct a new Author, failing on the first missing required field."""

    values = {"first_name": first_name, "last_name": last_name, "user_name": user_name}
    for wire_name, attr in AUTHOR_REQUIRED_FIELDS:
        if values[attr] is None:
            raise ValidationError(f"Missing `{wire_name}` in request body", field=wire_name)
    return Author(
        id=new_entity_id(),
        first_name=str(first_name),
        last_name=str(last_name),
        user_name=str(user_name),
    )


def build_blog_post(
    *,
    title: str | None,
    content: str | None,
    author: Author | None,
    created: datetime | None = None,
) -> PopulatedBlogPost:
    """Construct a new BlogPost for a resolved Author.

    Required fields are checked in the order title, content, author and the
    first missing one is reported.
    """

    if title is None:
        raise ValidationError("Missing `title` in request body", field="title")
    if content is None:
        raise ValidationError("Missing `content` in request body", field="content")
    if author is None:
        raise ValidationError("Missing `author` for blog post", field="author")

    post = BlogPost(
        id=new_entity_id(),
        title=title,
        content=content,
        author_id=author.id,
        created=created or utc_now_millis(),
        comments=(),
    )
    return PopulatedBlogPost(post=post, author=author)


def serialize_author(author: Author) -> dict[str, str]:
    return {
        "id": author.id,
        "firstName": author.first_name,
        "lastName": author.last_name,
        "userName": author.user_name,
    }


def serialize_blog_post(populated: PopulatedBlogPost) -> dict[str, str]:
    return {
        "id": populated.id,
        "title": populated.title,
        "content": populated.content,
        "author": populated.full_name,
        "created": str(to_epoch_millis(populated.created)),
    }


def deserialize_blog_post(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Read a serialized BlogPost back into python values."""

    return {
        "id": str(payload["id"]),
        "title": payload["title"],
        "content": payload["content"],
        "author": payload["author"],
        "created": parse_created(str(payload["created"])),
    }


def author_from_row(row: Mapping[str, Any]) -> Author:
    return Author(
        id=str(row["id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        user_name=row["user_name"],
    )


def author_to_row(author: Author) -> dict[str, Any]:
    return {
        "id": author.id,
        "first_name": author.first_name,
        "last_name": author.last_name,
        "user_name": author.user_name,
    }


def blog_post_from_row(row: Mapping[str, Any]) -> BlogPost:
    comments = tuple(Comment(content=str(item.get("content") or "")) for item in row.get("comments") or [])
    return BlogPost(
        id=str(row["id"]),
        title=row["title"],
        content=row["content"],
        author_id=str(row["author_id"]),
        created=from_epoch_millis(row["created_ms"]),
        comments=comments,
    )


def blog_post_to_row(post: BlogPost) -> dict[str, Any]:
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "author_id": post.author_id,
        "created_ms": to_epoch_millis(post.created),
        "comments": [{"content": comment.content} for comment in post.comments],
    }
