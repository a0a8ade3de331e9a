# This file implements the BlogPost operations behind the /posts endpoints.
# It exists so every read resolves the post author before serialization and every write validates first.
# Creation confirms the referenced Author exists; updates only touch allow-listed fields.
# Store faults are reported as internal errors without leaking database details.

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from src.blog.entities import blog_post_from_row, blog_post_to_row, build_blog_post, serialize_blog_post
from src.blog.errors import NotFound, store_faults_as_internal
from src.blog.mutations import MutationValidator
from src.blog.requests import BlogPostCreateRequest, parse_request
from src.blog.resolver import ReferenceResolver
from src.blog.store import BlogStore, EntityKind

LOGGER = logging.getLogger("api.posts")

CREATE_REQUIRED_FIELDS: tuple[str, ...] = ("title", "content", "author_id")


class BlogPostService:
    """Request-scoped BlogPost operations."""

    def __init__(
        self,
        *,
        store: BlogStore,
        resolver: ReferenceResolver | None = None,
        validator: MutationValidator | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver or ReferenceResolver(store=store)
        self.validator = validator or MutationValidator(store=store)

    def list_posts(self) -> list[dict[str, str]]:
        with store_faults_as_internal("list blog posts"):
            posts = [blog_post_from_row(row) for row in self.store.find_all(EntityKind.BLOG_POST)]
            populated = self.resolver.populate_many(posts)
        return [serialize_blog_post(post) for post in populated]

    def get_post(self, post_id: str) -> dict[str, str]:
        with store_faults_as_internal("fetch blog post"):
            row = self.store.find_by_id(EntityKind.BLOG_POST, post_id)
            if row is None:
                raise NotFound("blog post", post_id)
            populated = self.resolver.populate(blog_post_from_row(row))
        return serialize_blog_post(populated)

    def create_post(self, body: Mapping[str, Any]) -> dict[str, str]:
        request = parse_request(BlogPostCreateRequest, body, required=CREATE_REQUIRED_FIELDS)

        with store_faults_as_internal("create blog post"):
            author = self.resolver.require_author(str(request.author_id))
            populated = build_blog_post(title=request.title, content=request.content, author=author)
            self.store.create(EntityKind.BLOG_POST, blog_post_to_row(populated.post))

        LOGGER.info("Created blog post id=%s author id=%s", populated.id, author.id)
        return serialize_blog_post(populated)

    def update_post(self, path_id: str, body: Mapping[str, Any]) -> None:
        with store_faults_as_internal("update blog post"):
            update = self.validator.validate_blog_post_update(path_id, body)
            if update.is_empty:
                found = self.store.find_by_id(EntityKind.BLOG_POST, update.target_id) is not None
            else:
                found = self.store.update_by_id(EntityKind.BLOG_POST, update.target_id, update.fields)

        if not found:
            raise NotFound("blog post", path_id)
        LOGGER.info("Updated blog post id=%s fields=%s", path_id, sorted(update.fields))

    def delete_post(self, post_id: str) -> bool:
        with store_faults_as_internal("delete blog post"):
            deleted = self.store.delete_by_id(EntityKind.BLOG_POST, post_id)
        LOGGER.info("Deleted blog post id=%s existed=%s", post_id, deleted)
        return deleted
