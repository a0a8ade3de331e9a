"""
Partial-update validation for Authors and BlogPosts.
An update names its target twice (path and body) and both must agree before anything is read or written.
Only allow-listed fields are copied into the update set; anything else in the body is ignored.
Author updates that set `userName` are pre-checked against every other Author.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.blog.errors import BadRequest, Conflict
from src.blog.requests import AuthorUpdateRequest, BlogPostUpdateRequest, PresenceModel, parse_request
from src.blog.store import BlogStore, EntityKind

LOGGER = logging.getLogger("blog.mutations")

UPDATABLE_FIELDS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.AUTHOR: ("first_name", "last_name", "user_name"),
    EntityKind.BLOG_POST: ("title", "content"),
}

_REQUEST_MODELS: dict[EntityKind, type[PresenceModel]] = {
    EntityKind.AUTHOR: AuthorUpdateRequest,
    EntityKind.BLOG_POST: BlogPostUpdateRequest,
}


@dataclass(frozen=True)
class UpdateSet:
    """Normalized fields to merge into one stored entity, keyed by column name."""

    kind: EntityKind
    target_id: str
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.fields


def check_identity(path_id: str | None, body: Mapping[str, Any]) -> str:
    """Require the path id and the body id to be present and equal."""

    body_id = body.get("id")
    if not (path_id and body_id and path_id == body_id):
        message = f"Request path id ({path_id}) and request body id ({body_id}) must match"
        LOGGER.warning(message)
        raise BadRequest(message)
    return path_id


class MutationValidator:
    def __init__(self, *, store: BlogStore) -> None:
        self.store = store

    def validate(self, kind: EntityKind, path_id: str | None, body: Mapping[str, Any]) -> UpdateSet:
        target_id = check_identity(path_id, body)
        request = parse_request(_REQUEST_MODELS[kind], body)
        update = UpdateSet(
            kind=kind,
            target_id=target_id,
            fields=request.supplied_values(UPDATABLE_FIELDS[kind]),
        )
        if kind is EntityKind.AUTHOR and "user_name" in update.fields:
            self.ensure_user_name_available(update.fields["user_name"], exclude_id=target_id)
        return update

    def validate_author_update(self, path_id: str | None, body: Mapping[str, Any]) -> UpdateSet:
        return self.validate(EntityKind.AUTHOR, path_id, body)

    def validate_blog_post_update(self, path_id: str | None, body: Mapping[str, Any]) -> UpdateSet:
        return self.validate(EntityKind.BLOG_POST, path_id, body)

    def ensure_user_name_available(self, user_name: str, *, exclude_id: str | None = None) -> None:
        existing = self.store.find_one(EntityKind.AUTHOR, {"user_name": user_name}, exclude_id=exclude_id)
        if existing is not None:
            LOGGER.warning("Rejected duplicate userName=%s", user_name)
            raise Conflict("userName", user_name)
