"""
Persistence store for Authors and BlogPosts.
`BlogStore` is the contract the core depends on; `SqlBlogStore` implements it with parameterized SQL
through the shared DatabaseClient. Rows are plain dictionaries keyed by column name.
Unique-constraint failures surface as UniqueViolation so callers can tell them apart from other faults.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.blog.ddl import apply_blog_ddl
from src.blog.entities import new_entity_id
from src.blog.errors import StoreError, UniqueViolation
from src.common.db import DatabaseClient

LOGGER = logging.getLogger("blog.store")


class EntityKind(str, Enum):
    AUTHOR = "author"
    BLOG_POST = "blog_post"


class BlogStore(Protocol):
    def find_all(self, kind: EntityKind, where: Mapping[str, Any] | None = None) -> list[dict[str, Any]]: ...

    def find_by_id(self, kind: EntityKind, entity_id: str) -> dict[str, Any] | None: ...

    def find_one(
        self,
        kind: EntityKind,
        where: Mapping[str, Any],
        *,
        exclude_id: str | None = None,
    ) -> dict[str, Any] | None: ...

    def create(self, kind: EntityKind, fields: Mapping[str, Any]) -> dict[str, Any]: ...

    def update_by_id(self, kind: EntityKind, entity_id: str, fields: Mapping[str, Any]) -> bool: ...

    def delete_by_id(self, kind: EntityKind, entity_id: str) -> bool: ...

    def delete_many(self, kind: EntityKind, where: Mapping[str, Any]) -> int: ...

    def atomic(self) -> AbstractContextManager[None]: ...


@dataclass(frozen=True)
class TableSpec:
    table_name: str
    columns: tuple[str, ...]
    order_by: str
    json_columns: frozenset[str] = frozenset()


AUTHOR_COLUMNS = ("id", "first_name", "last_name", "user_name")
BLOG_POST_COLUMNS = ("id", "title", "content", "author_id", "created_ms", "comments")


class SqlBlogStore:
    """BlogStore backed by a relational database."""

    def __init__(self, *, db: DatabaseClient, author_table: str, blog_post_table: str) -> None:
        self.db = db
        self._specs: dict[EntityKind, TableSpec] = {
            EntityKind.AUTHOR: TableSpec(
                table_name=author_table,
                columns=AUTHOR_COLUMNS,
                order_by="last_name ASC, first_name ASC, id ASC",
            ),
            EntityKind.BLOG_POST: TableSpec(
                table_name=blog_post_table,
                columns=BLOG_POST_COLUMNS,
                order_by="created_ms DESC, id ASC",
                json_columns=frozenset({"comments"}),
            ),
        }

    def create_schema(self) -> None:
        with self._guard("create schema"):
            apply_blog_ddl(
                self.db,
                author_table=self._specs[EntityKind.AUTHOR].table_name,
                blog_post_table=self._specs[EntityKind.BLOG_POST].table_name,
            )

    def schema_ready(self) -> bool:
        return all(self.db.table_exists(spec.table_name) for spec in self._specs.values())

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._guard("transaction"):
            with self.db.transaction():
                yield

    def find_all(self, kind: EntityKind, where: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        spec = self._specs[kind]
        where_sql, params = self._where_clause(spec, where or {})
        query = f"""
        SELECT {", ".join(spec.columns)}
        FROM {spec.table_name}
        WHERE {where_sql}
        ORDER BY {spec.order_by}
        """
        with self._guard(f"find all {kind.value}"):
            rows = self.db.fetch_all(query, params)
        return [self._decode(spec, row) for row in rows]

    def find_by_id(self, kind: EntityKind, entity_id: str) -> dict[str, Any] | None:
        return self.find_one(kind, {"id": entity_id})

    def find_one(
        self,
        kind: EntityKind,
        where: Mapping[str, Any],
        *,
        exclude_id: str | None = None,
    ) -> dict[str, Any] | None:
        spec = self._specs[kind]
        where_sql, params = self._where_clause(spec, where)
        if exclude_id is not None:
            where_sql = f"{where_sql} AND id <> :exclude_id"
            params["exclude_id"] = exclude_id
        query = f"""
        SELECT {", ".join(spec.columns)}
        FROM {spec.table_name}
        WHERE {where_sql}
        ORDER BY {spec.order_by}
        LIMIT 1
        """
        with self._guard(f"find one {kind.value}"):
            row = self.db.fetch_one(query, params)
        return self._decode(spec, row) if row is not None else None

    def create(self, kind: EntityKind, fields: Mapping[str, Any]) -> dict[str, Any]:
        spec = self._specs[kind]
        values = dict(fields)
        values.setdefault("id", new_entity_id())
        self._check_columns(spec, values)
        columns = [column for column in spec.columns if column in values]
        query = f"""
        INSERT INTO {spec.table_name} ({", ".join(columns)})
        VALUES ({", ".join(f":{column}" for column in columns)})
        """
        with self._guard(f"create {kind.value}"):
            self.db.execute(query, self._encode(spec, values))
        return values

    def update_by_id(self, kind: EntityKind, entity_id: str, fields: Mapping[str, Any]) -> bool:
        spec = self._specs[kind]
        values = dict(fields)
        self._check_columns(spec, values)
        if "id" in values:
            raise ValueError("id is immutable and cannot be part of an update")
        if not values:
            return self.find_by_id(kind, entity_id) is not None

        assignments = ", ".join(f"{column} = :{column}" for column in values)
        params = self._encode(spec, values)
        params["target_id"] = entity_id
        query = f"UPDATE {spec.table_name} SET {assignments} WHERE id = :target_id"
        with self._guard(f"update {kind.value}"):
            return self.db.execute(query, params) > 0

    def delete_by_id(self, kind: EntityKind, entity_id: str) -> bool:
        return self.delete_many(kind, {"id": entity_id}) > 0

    def delete_many(self, kind: EntityKind, where: Mapping[str, Any]) -> int:
        spec = self._specs[kind]
        if not where:
            raise ValueError("delete_many requires at least one predicate")
        where_sql, params = self._where_clause(spec, where)
        query = f"DELETE FROM {spec.table_name} WHERE {where_sql}"
        with self._guard(f"delete {kind.value}"):
            return self.db.execute(query, params)

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            message = str(exc.orig).lower()
            if "unique" in message or "duplicate" in message:
                raise UniqueViolation(
                    f"{operation} violated a unique constraint",
                    column="user_name" if "user_name" in message else None,
                ) from exc
            LOGGER.exception("Integrity failure during %s", operation)
            raise StoreError(f"{operation} failed") from exc
        except SQLAlchemyError as exc:
            LOGGER.exception("Database failure during %s", operation)
            raise StoreError(f"{operation} failed") from exc

    def _where_clause(self, spec: TableSpec, where: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
        self._check_columns(spec, where)
        clauses = ["1 = 1"]
        params: dict[str, Any] = {}
        for column, value in where.items():
            clauses.append(f"{column} = :w_{column}")
            params[f"w_{column}"] = value
        return " AND ".join(clauses), params

    def _check_columns(self, spec: TableSpec, values: Mapping[str, Any]) -> None:
        unknown = sorted(set(values) - set(spec.columns))
        if unknown:
            raise ValueError(f"Unknown columns for {spec.table_name}: {', '.join(unknown)}")

    def _encode(self, spec: TableSpec, values: Mapping[str, Any]) -> dict[str, Any]:
        return {
            column: json.dumps(value) if column in spec.json_columns else value
            for column, value in values.items()
        }

    def _decode(self, spec: TableSpec, row: Mapping[str, Any]) -> dict[str, Any]:
        decoded = dict(row)
        for column in spec.json_columns:
            if isinstance(decoded.get(column), str):
                decoded[column] = json.loads(decoded[column])
        return decoded
