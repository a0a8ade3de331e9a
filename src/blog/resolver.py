"""
Reference resolution between BlogPosts and their Authors.
Write paths call `require_author` to confirm an author id exists before a post is stored.
Read paths call `populate`/`populate_many` to attach the live Author before serialization.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.blog.entities import Author, BlogPost, PopulatedBlogPost, author_from_row
from src.blog.errors import InvalidReference, NotFound
from src.blog.store import BlogStore, EntityKind

LOGGER = logging.getLogger("blog.resolver")


class ReferenceResolver:
    """Bridge between `BlogPost.author_id` and stored Author records."""

    def __init__(self, *, store: BlogStore) -> None:
        self.store = store

    def resolve_author(self, author_id: str) -> Author:
        row = self.store.find_by_id(EntityKind.AUTHOR, author_id)
        if row is None:
            raise NotFound("author", author_id)
        return author_from_row(row)

    def require_author(self, author_id: str) -> Author:
        """Resolve an author reference supplied by a client, rejecting unknown ids."""

        try:
            return self.resolve_author(author_id)
        except NotFound as exc:
            LOGGER.warning("Rejected blog post reference to unknown author id=%s", author_id)
            raise InvalidReference(author_id) from exc

    def populate(self, post: BlogPost) -> PopulatedBlogPost:
        try:
            author = self.resolve_author(post.author_id)
        except NotFound as exc:
            LOGGER.warning("Blog post id=%s references missing author id=%s", post.id, post.author_id)
            raise NotFound("blog post", post.id) from exc
        return PopulatedBlogPost(post=post, author=author)

    def populate_many(self, posts: Iterable[BlogPost]) -> list[PopulatedBlogPost]:
        """Attach authors to many posts, looking each distinct author up once.

        Posts whose author no longer exists are left out of the result.
        """

        authors: dict[str, Author | None] = {}
        populated: list[PopulatedBlogPost] = []
        for post in posts:
            if post.author_id not in authors:
                row = self.store.find_by_id(EntityKind.AUTHOR, post.author_id)
                authors[post.author_id] = author_from_row(row) if row is not None else None
            author = authors[post.author_id]
            if author is None:
                LOGGER.warning("Skipping blog post id=%s with missing author id=%s", post.id, post.author_id)
                continue
            populated.append(PopulatedBlogPost(post=post, author=author))
        return populated
