"""
Author deletion with its dependent BlogPosts.
Posts are removed first, then the Author, because the posts are found by the same author id.
Both steps run inside `store.atomic()`; on a store without transactions a failure in the second step
leaves the posts deleted and the Author in place, which is reported as an internal error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.blog.errors import InternalError, StoreError
from src.blog.store import BlogStore, EntityKind

LOGGER = logging.getLogger("blog.cascade")


@dataclass(frozen=True)
class CascadeResult:
    author_id: str
    posts_deleted: int
    author_deleted: bool


class CascadeCoordinator:
    def __init__(self, *, store: BlogStore) -> None:
        self.store = store

    def delete_author(self, author_id: str) -> CascadeResult:
        posts_deleted: int | None = None
        try:
            with self.store.atomic():
                posts_deleted = self.store.delete_many(EntityKind.BLOG_POST, {"author_id": author_id})
                author_deleted = self.store.delete_by_id(EntityKind.AUTHOR, author_id)
        except StoreError as exc:
            if posts_deleted is None:
                LOGGER.error("Cascade aborted before removing blog posts for author id=%s", author_id)
            else:
                LOGGER.error(
                    "Cascade for author id=%s failed deleting the author "
                    "after %d blog post deletions were attempted",
                    author_id,
                    posts_deleted,
                )
            raise InternalError("Internal server error") from exc

        LOGGER.info(
            "Deleted author with id `%s` and %d of their blog posts.",
            author_id,
            posts_deleted,
        )
        return CascadeResult(author_id=author_id, posts_deleted=posts_deleted, author_deleted=author_deleted)
