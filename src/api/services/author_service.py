# This file implements the Author operations behind the /authors endpoints.
# It exists so routers stay thin and every Author write goes through the same validation path.
# Creation and updates enforce userName uniqueness, and deletion hands off to the cascade coordinator.
# Store faults are reported as internal errors without leaking database details.

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from src.blog.cascade import CascadeCoordinator, CascadeResult
from src.blog.entities import author_from_row, author_to_row, build_author, serialize_author
from src.blog.errors import Conflict, NotFound, UniqueViolation, store_faults_as_internal
from src.blog.mutations import MutationValidator
from src.blog.requests import AuthorCreateRequest, parse_request
from src.blog.store import BlogStore, EntityKind

LOGGER = logging.getLogger("api.authors")

CREATE_REQUIRED_FIELDS: tuple[str, ...] = ("firstName", "lastName", "userName")


class AuthorService:
    """Request-scoped Author operations."""

    def __init__(
        self,
        *,
        store: BlogStore,
        validator: MutationValidator | None = None,
        cascade: CascadeCoordinator | None = None,
    ) -> None:
        self.store = store
        self.validator = validator or MutationValidator(store=store)
        self.cascade = cascade or CascadeCoordinator(store=store)

    def list_authors(self) -> list[dict[str, str]]:
        with store_faults_as_internal("list authors"):
            rows = self.store.find_all(EntityKind.AUTHOR)
        return [serialize_author(author_from_row(row)) for row in rows]

    def get_author(self, author_id: str) -> dict[str, str]:
        with store_faults_as_internal("fetch author"):
            row = self.store.find_by_id(EntityKind.AUTHOR, author_id)
        if row is None:
            raise NotFound("author", author_id)
        return serialize_author(author_from_row(row))

    def create_author(self, body: Mapping[str, Any]) -> dict[str, str]:
        request = parse_request(AuthorCreateRequest, body, required=CREATE_REQUIRED_FIELDS)
        author = build_author(
            first_name=request.first_name,
            last_name=request.last_name,
            user_name=request.user_name,
        )
        try:
            with store_faults_as_internal("create author"):
                self.validator.ensure_user_name_available(author.user_name)
                self.store.create(EntityKind.AUTHOR, author_to_row(author))
        except UniqueViolation as exc:
            LOGGER.warning("Unique index rejected userName=%s", author.user_name)
            raise Conflict("userName", author.user_name) from exc

        LOGGER.info("Created author id=%s userName=%s", author.id, author.user_name)
        return serialize_author(author)

    def update_author(self, path_id: str, body: Mapping[str, Any]) -> None:
        try:
            with store_faults_as_internal("update author"):
                update = self.validator.validate_author_update(path_id, body)
                if update.is_empty:
                    found = self.store.find_by_id(EntityKind.AUTHOR, update.target_id) is not None
                else:
                    found = self.store.update_by_id(EntityKind.AUTHOR, update.target_id, update.fields)
        except UniqueViolation as exc:
            raise Conflict("userName", body.get("userName")) from exc

        if not found:
            raise NotFound("author", path_id)
        LOGGER.info("Updated author id=%s fields=%s", path_id, sorted(update.fields))

    def delete_author(self, author_id: str) -> CascadeResult:
        return self.cascade.delete_author(author_id)
