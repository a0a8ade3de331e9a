"""
Fixtures for blog core tests.
They provide a SQLite-backed store in a temporary directory and an in-memory fake store.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from src.blog.store import SqlBlogStore
from src.common.db import DatabaseClient
from tests.blog.support import InMemoryBlogStore


@pytest.fixture
def sql_store(tmp_path: Path) -> SqlBlogStore:
    db = DatabaseClient(database_url=f"sqlite:///{tmp_path / 'blog.db'}")
    store = SqlBlogStore(db=db, author_table="authors", blog_post_table="blog_posts")
    store.create_schema()
    return store


@pytest.fixture
def fake_store() -> InMemoryBlogStore:
    return InMemoryBlogStore()
