# This file provides dependency factories for FastAPI routes and middleware.
# It exists so the database client, blog store, and services are created once and shared.
# The setup keeps routers thin and makes endpoint tests easy to override.
# Centralized construction also ensures one consistent API configuration is used.

from __future__ import annotations

from functools import lru_cache

from src.api.api_config import ApiConfig, get_api_config
from src.api.services.author_service import AuthorService
from src.api.services.blog_post_service import BlogPostService
from src.blog.store import SqlBlogStore
from src.common.db import DatabaseClient


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    config = get_api_config()
    return DatabaseClient(database_url=config.database_url)


@lru_cache(maxsize=1)
def get_blog_store() -> SqlBlogStore:
    config = get_api_config()
    return SqlBlogStore(
        db=get_database_client(),
        author_table=config.validate_table_name(config.author_table_name),
        blog_post_table=config.validate_table_name(config.blog_post_table_name),
    )


@lru_cache(maxsize=1)
def get_author_service() -> AuthorService:
    return AuthorService(store=get_blog_store())


@lru_cache(maxsize=1)
def get_blog_post_service() -> BlogPostService:
    return BlogPostService(store=get_blog_store())


def get_config() -> ApiConfig:
    return get_api_config()
