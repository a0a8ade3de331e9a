"""
Tests for the SQL-backed blog store against a temporary SQLite database.
It asserts expected behavior and guards against regressions in the corresponding component.
"""

from __future__ import annotations

import pytest

from src.blog.entities import author_to_row, build_author
from src.blog.errors import StoreError, UniqueViolation
from src.blog.store import EntityKind, SqlBlogStore
from tests.blog.support import add_author, add_post


def test_create_and_find_author(sql_store: SqlBlogStore) -> None:
    author = add_author(sql_store)

    row = sql_store.find_by_id(EntityKind.AUTHOR, author.id)

    assert row == author_to_row(author)
    assert sql_store.find_by_id(EntityKind.AUTHOR, "missing") is None


def test_unique_index_rejects_duplicate_user_name(sql_store: SqlBlogStore) -> None:
    add_author(sql_store, user="ada")
    duplicate = build_author(first_name="Other", last_name="Person", user_name="ada")

    with pytest.raises(UniqueViolation) as exc_info:
        sql_store.create(EntityKind.AUTHOR, author_to_row(duplicate))

    assert exc_info.value.column == "user_name"
    assert len(sql_store.find_all(EntityKind.AUTHOR)) == 1


def test_unique_index_rejects_duplicate_on_update(sql_store: SqlBlogStore) -> None:
    add_author(sql_store, user="ada")
    grace = add_author(sql_store, first="Grace", last="Hopper", user="grace")

    with pytest.raises(UniqueViolation):
        sql_store.update_by_id(EntityKind.AUTHOR, grace.id, {"user_name": "ada"})


def test_find_one_excludes_target_id(sql_store: SqlBlogStore) -> None:
    ada = add_author(sql_store)

    assert sql_store.find_one(EntityKind.AUTHOR, {"user_name": "ada"}, exclude_id=ada.id) is None
    assert sql_store.find_one(EntityKind.AUTHOR, {"user_name": "ada"})["id"] == ada.id  # type: ignore[index]


def test_comments_round_trip_as_list(sql_store: SqlBlogStore) -> None:
    ada = add_author(sql_store)
    post_id = add_post(sql_store, ada)
    sql_store.update_by_id(EntityKind.BLOG_POST, post_id, {"comments": [{"content": "first!"}]})

    row = sql_store.find_by_id(EntityKind.BLOG_POST, post_id)

    assert row is not None
    assert row["comments"] == [{"content": "first!"}]


def test_update_reports_missing_rows(sql_store: SqlBlogStore) -> None:
    assert sql_store.update_by_id(EntityKind.BLOG_POST, "missing", {"title": "x"}) is False


def test_delete_many_filters_by_author(sql_store: SqlBlogStore) -> None:
    ada = add_author(sql_store)
    grace = add_author(sql_store, first="Grace", last="Hopper", user="grace")
    add_post(sql_store, ada)
    add_post(sql_store, ada)
    kept = add_post(sql_store, grace)

    assert sql_store.delete_many(EntityKind.BLOG_POST, {"author_id": ada.id}) == 2
    assert [row["id"] for row in sql_store.find_all(EntityKind.BLOG_POST)] == [kept]


def test_unknown_columns_are_rejected(sql_store: SqlBlogStore) -> None:
    with pytest.raises(ValueError, match="Unknown columns"):
        sql_store.find_one(EntityKind.AUTHOR, {"password": "x"})


def test_delete_many_requires_predicate(sql_store: SqlBlogStore) -> None:
    with pytest.raises(ValueError):
        sql_store.delete_many(EntityKind.BLOG_POST, {})


def test_database_faults_surface_as_store_error(sql_store: SqlBlogStore) -> None:
    sql_store.db.execute("DROP TABLE blog_posts")
    with pytest.raises(StoreError):
        sql_store.find_all(EntityKind.BLOG_POST)


def test_schema_ready_after_create(sql_store: SqlBlogStore) -> None:
    assert sql_store.schema_ready() is True
