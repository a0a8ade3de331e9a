#!/usr/bin/env python3
"""
Create the blog tables and load authors, posts, and comments from a JSON seed file.
It packages a repeatable workflow so local databases can be populated consistently.
Run it directly and expect it to print a JSON summary and exit non-zero on failure.

Seed file shape:
    {"authors": [{"firstName": ..., "lastName": ..., "userName": ...,
                  "posts": [{"title": ..., "content": ..., "comments": [{"content": ...}]}]}]}
"""
# ruff: noqa: E402

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.api.api_config import get_api_config
from src.blog.entities import Comment, author_to_row, blog_post_to_row, build_author, build_blog_post
from src.blog.store import EntityKind, SqlBlogStore
from src.common.db import DatabaseClient


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the blog database from a JSON file")
    parser.add_argument("seed_file", type=Path, help="Path to the JSON seed file")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Database URL; defaults to DATABASE_URL from the environment",
    )
    return parser.parse_args()


def seed_store(store: SqlBlogStore, payload: dict[str, Any]) -> dict[str, int]:
    """Insert every author with its posts in one transaction."""

    counts = {"authors": 0, "posts": 0, "comments": 0}
    with store.atomic():
        for author_entry in payload.get("authors", []):
            author = build_author(
                first_name=author_entry.get("firstName"),
                last_name=author_entry.get("lastName"),
                user_name=author_entry.get("userName"),
            )
            store.create(EntityKind.AUTHOR, author_to_row(author))
            counts["authors"] += 1

            for post_entry in author_entry.get("posts", []):
                populated = build_blog_post(
                    title=post_entry.get("title"),
                    content=post_entry.get("content"),
                    author=author,
                )
                comments = tuple(Comment(content=str(item["content"])) for item in post_entry.get("comments", []))
                post = replace(populated.post, comments=comments)
                store.create(EntityKind.BLOG_POST, blog_post_to_row(post))
                counts["posts"] += 1
                counts["comments"] += len(comments)
    return counts


def main() -> None:
    args = parse_args()
    config = None if args.database_url else get_api_config()
    database_url = config.database_url if config else args.database_url
    store = SqlBlogStore(
        db=DatabaseClient(database_url=database_url),
        author_table=config.author_table_name if config else "authors",
        blog_post_table=config.blog_post_table_name if config else "blog_posts",
    )
    store.create_schema()
    payload = json.loads(args.seed_file.read_text(encoding="utf-8"))
    print(json.dumps(seed_store(store, payload), indent=2))


if __name__ == "__main__":
    main()
