"""
Database connection utilities.
It wraps a SQLAlchemy engine so the blog store can run parameterized SQL without owning connection handling.
The client also exposes a transaction scope so multi-statement operations can share one connection.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _engine_options(database_url: str) -> dict[str, Any]:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}
    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        # every pooled connection must see the same in-memory database
        options["poolclass"] = StaticPool
    return options


class DatabaseClient:
    """Minimal SQLAlchemy wrapper for blog read/write access."""

    def __init__(self, *, database_url: str) -> None:
        self._engine: Engine = create_engine(database_url, future=True, **_engine_options(database_url))
        self._active: ContextVar[Connection | None] = ContextVar(f"active_connection_{id(self)}", default=None)

    @property
    def engine(self) -> Engine:
        return self._engine

    def can_connect(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def table_exists(self, table_name: str) -> bool:
        self._validate_identifier(table_name)
        return bool(inspect(self._engine).has_table(table_name))

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run every statement issued inside the block on one transactional connection."""

        if self._active.get() is not None:
            yield
            return
        with self._engine.begin() as connection:
            token = self._active.set(connection)
            try:
                yield
            finally:
                self._active.reset(token)

    def fetch_all(self, query: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        with self._connection() as connection:
            rows = connection.execute(text(query), dict(params or {})).mappings().all()
        return [dict(row) for row in rows]

    def fetch_one(self, query: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        with self._connection() as connection:
            row = connection.execute(text(query), dict(params or {})).mappings().first()
        return dict(row) if row is not None else None

    def execute(self, query: str, params: Mapping[str, Any] | None = None) -> int:
        """Execute a write statement and return the affected row count."""

        with self._connection() as connection:
            result = connection.execute(text(query), dict(params or {}))
            affected = result.rowcount
        return int(affected or 0)

    def execute_script(self, statements: list[str]) -> None:
        with self._connection() as connection:
            for statement in statements:
                connection.exec_driver_sql(statement)

    @contextmanager
    def _connection(self) -> Iterator[Connection]:
        active = self._active.get()
        if active is not None:
            yield active
            return
        with self._engine.begin() as connection:
            yield connection

    def _validate_identifier(self, identifier: str) -> str:
        if not _IDENTIFIER_RE.match(identifier):
            raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
        return identifier
