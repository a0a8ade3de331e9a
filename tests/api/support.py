# This file provides shared helpers for API endpoint tests.
# It exists so tests can run the real services against a throwaway SQLite database.
# The helpers build consistent config objects and scoped TestClient contexts.
# Centralized test wiring keeps API tests small and focused on behavior.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from fastapi.testclient import TestClient

from src.api.api_config import ApiConfig
from src.api.app import app
from src.api.dependencies import (
    get_author_service,
    get_blog_post_service,
    get_blog_store,
    get_config,
    get_database_client,
)
from src.api.services.author_service import AuthorService
from src.api.services.blog_post_service import BlogPostService
from src.blog.store import SqlBlogStore
from src.common.db import DatabaseClient

AUTHORS_PATH = "/api/v1/authors"
POSTS_PATH = "/api/v1/posts"


def build_test_config(*, database_url: str = "sqlite://") -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Blog API",
        api_version_path="/api/v1",
        schema_version="1.0.0",
        host="0.0.0.0",
        port=8080,
        environment="test",
        database_url=database_url,
        enable_request_logging=False,
        auto_create_schema=True,
        allowed_origins=[],
        author_table_name="authors",
        blog_post_table_name="blog_posts",
        app_version="0.1.0",
        allowed_table_names={"authors", "blog_posts"},
    )


def build_sql_store(tmp_path: Path) -> SqlBlogStore:
    db = DatabaseClient(database_url=f"sqlite:///{tmp_path / 'api.db'}")
    store = SqlBlogStore(db=db, author_table="authors", blog_post_table="blog_posts")
    store.create_schema()
    return store


class FakeDBClient:
    """Simple fake DB dependency for readiness endpoint tests."""

    def __init__(self, *, connected: bool = True) -> None:
        self._connected = connected

    def can_connect(self) -> bool:
        return self._connected


class FakeSchemaStore:
    def __init__(self, *, ready: bool = True) -> None:
        self._ready = ready

    def schema_ready(self) -> bool:
        return self._ready


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    store: Any | None = None,
    db_client: Any | None = None,
    author_service: Any | None = None,
    blog_post_service: Any | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides.

    When a store is given, real services are built on top of it unless
    explicit service doubles are passed as well.
    """

    resolved_config = config or build_test_config()

    app.dependency_overrides[get_config] = lambda: resolved_config
    if db_client is not None:
        app.dependency_overrides[get_database_client] = lambda: db_client
    if store is not None:
        app.dependency_overrides[get_blog_store] = lambda: store
        author_service = author_service or AuthorService(store=store)
        blog_post_service = blog_post_service or BlogPostService(store=store)
    if author_service is not None:
        app.dependency_overrides[get_author_service] = lambda: author_service
    if blog_post_service is not None:
        app.dependency_overrides[get_blog_post_service] = lambda: blog_post_service

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
