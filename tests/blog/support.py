# This file provides an in-memory BlogStore used by core and cascade tests.
# It exists so ordering and failure behavior can be observed without a database.
# Every call is recorded, and individual operations can be told to fail.

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from src.blog.entities import (
    Author,
    author_to_row,
    blog_post_to_row,
    build_author,
    build_blog_post,
    new_entity_id,
)
from src.blog.errors import StoreError, UniqueViolation
from src.blog.store import BlogStore, EntityKind


class InMemoryBlogStore:
    """Non-transactional BlogStore with failure injection."""

    def __init__(self) -> None:
        self.rows: dict[EntityKind, dict[str, dict[str, Any]]] = {kind: {} for kind in EntityKind}
        self.calls: list[tuple[str, EntityKind]] = []
        self.fail_on: set[tuple[str, EntityKind]] = set()

    def _record(self, operation: str, kind: EntityKind) -> None:
        self.calls.append((operation, kind))
        if (operation, kind) in self.fail_on:
            raise StoreError(f"injected failure in {operation} {kind.value}")

    @staticmethod
    def _matches(row: Mapping[str, Any], where: Mapping[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in where.items())

    @contextmanager
    def atomic(self) -> Iterator[None]:
        yield

    def find_all(self, kind: EntityKind, where: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        self._record("find_all", kind)
        return [copy.deepcopy(row) for row in self.rows[kind].values() if self._matches(row, where or {})]

    def find_by_id(self, kind: EntityKind, entity_id: str) -> dict[str, Any] | None:
        self._record("find_by_id", kind)
        row = self.rows[kind].get(entity_id)
        return copy.deepcopy(row) if row is not None else None

    def find_one(
        self,
        kind: EntityKind,
        where: Mapping[str, Any],
        *,
        exclude_id: str | None = None,
    ) -> dict[str, Any] | None:
        self._record("find_one", kind)
        for row in self.rows[kind].values():
            if row["id"] != exclude_id and self._matches(row, where):
                return copy.deepcopy(row)
        return None

    def _check_unique(self, kind: EntityKind, values: Mapping[str, Any], entity_id: str) -> None:
        if kind is not EntityKind.AUTHOR or "user_name" not in values:
            return
        for row in self.rows[kind].values():
            if row["id"] != entity_id and row["user_name"] == values["user_name"]:
                raise UniqueViolation("duplicate user_name", column="user_name")

    def create(self, kind: EntityKind, fields: Mapping[str, Any]) -> dict[str, Any]:
        self._record("create", kind)
        values = dict(fields)
        values.setdefault("id", new_entity_id())
        self._check_unique(kind, values, values["id"])
        self.rows[kind][values["id"]] = copy.deepcopy(values)
        return values

    def update_by_id(self, kind: EntityKind, entity_id: str, fields: Mapping[str, Any]) -> bool:
        self._record("update_by_id", kind)
        row = self.rows[kind].get(entity_id)
        if row is None:
            return False
        self._check_unique(kind, fields, entity_id)
        row.update(copy.deepcopy(dict(fields)))
        return True

    def delete_by_id(self, kind: EntityKind, entity_id: str) -> bool:
        self._record("delete_by_id", kind)
        return self.rows[kind].pop(entity_id, None) is not None

    def delete_many(self, kind: EntityKind, where: Mapping[str, Any]) -> int:
        self._record("delete_many", kind)
        doomed = [entity_id for entity_id, row in self.rows[kind].items() if self._matches(row, where)]
        for entity_id in doomed:
            del self.rows[kind][entity_id]
        return len(doomed)


def add_author(store: BlogStore, *, first: str = "Ada", last: str = "Lovelace", user: str = "ada") -> Author:
    author = build_author(first_name=first, last_name=last, user_name=user)
    store.create(EntityKind.AUTHOR, author_to_row(author))
    return author


def add_post(store: BlogStore, author: Author, *, title: str = "Hi", content: str = "World") -> str:
    populated = build_blog_post(title=title, content=content, author=author)
    store.create(EntityKind.BLOG_POST, blog_post_to_row(populated.post))
    return populated.id
