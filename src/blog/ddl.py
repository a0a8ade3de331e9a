"""DDL helpers for blog tables."""

from __future__ import annotations

from src.common.db import DatabaseClient


def blog_ddl_statements(*, author_table: str, blog_post_table: str) -> list[str]:
    """Return CREATE statements in dependency order.

    Table names must already be validated identifiers. The posts table has no
    foreign key to authors; dependent posts are removed by the author cascade.
    """

    return [
        f"""
        CREATE TABLE IF NOT EXISTS {author_table} (
            id VARCHAR(64) PRIMARY KEY,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            user_name VARCHAR(255) NOT NULL,
            CONSTRAINT uq_{author_table}_user_name UNIQUE (user_name)
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {blog_post_table} (
            id VARCHAR(64) PRIMARY KEY,
            title TEXT NOT NULL,
            content TEXT NOT NULL,
            author_id VARCHAR(64) NOT NULL,
            created_ms BIGINT NOT NULL,
            comments TEXT NOT NULL DEFAULT '[]'
        )
        """,
        f"CREATE INDEX IF NOT EXISTS ix_{blog_post_table}_author_id ON {blog_post_table} (author_id)",
    ]


def apply_blog_ddl(db: DatabaseClient, *, author_table: str, blog_post_table: str) -> None:
    """Apply blog DDL in deterministic order inside one transaction."""

    with db.transaction():
        db.execute_script(blog_ddl_statements(author_table=author_table, blog_post_table=blog_post_table))
