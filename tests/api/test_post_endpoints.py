# This file tests the BlogPost endpoints against a temporary SQLite database.
# It exists to protect author resolution, the millisecond `created` contract, and update allow-lists.
# Store failures are checked to surface as generic internal errors.

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from src.api.services.blog_post_service import BlogPostService
from src.blog.errors import StoreError
from src.blog.store import EntityKind, SqlBlogStore
from tests.api.support import AUTHORS_PATH, POSTS_PATH, api_test_client, build_sql_store


@pytest.fixture
def store(tmp_path: Path) -> SqlBlogStore:
    return build_sql_store(tmp_path)


@pytest.fixture
def client(store: SqlBlogStore) -> Iterator[TestClient]:
    with api_test_client(store=store) as test_client:
        yield test_client


@pytest.fixture
def ada(client: TestClient) -> dict[str, Any]:
    return client.post(AUTHORS_PATH, json={"firstName": "Ada", "lastName": "Lovelace", "userName": "ada"}).json()


def test_create_post_resolves_author_name(client: TestClient, ada: dict[str, Any]) -> None:
    response = client.post(POSTS_PATH, json={"title": "Hi", "content": "World", "author_id": ada["id"]})

    assert response.status_code == 201
    payload = response.json()
    assert payload["author"] == "Ada Lovelace"
    assert payload["title"] == "Hi"
    assert payload["content"] == "World"
    assert payload["created"].isdigit()


def test_create_post_with_unknown_author_persists_nothing(client: TestClient, store: SqlBlogStore) -> None:
    response = client.post(POSTS_PATH, json={"title": "Hi", "content": "World", "author_id": "nobody"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_REFERENCE"
    assert "nobody" in response.json()["message"]
    assert store.find_all(EntityKind.BLOG_POST) == []


def test_create_post_reports_first_missing_field(client: TestClient) -> None:
    response = client.post(POSTS_PATH, json={"author_id": "a1"})

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "title"}


@pytest.mark.parametrize(
    ("body", "field"),
    [
        ({"content": 5, "author_id": "a1"}, "title"),
        ({"title": "Hi", "content": 5}, "content"),
        ({"title": 7, "content": "World"}, "title"),
        ({"title": "Hi", "content": "World", "author_id": 3}, "author_id"),
    ],
)
def test_create_post_reports_fields_in_required_order(
    client: TestClient, body: dict[str, Any], field: str
) -> None:
    response = client.post(POSTS_PATH, json=body)

    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"
    assert response.json()["details"] == {"field": field}


def test_get_post_matches_created_response(client: TestClient, ada: dict[str, Any]) -> None:
    created = client.post(POSTS_PATH, json={"title": "Hi", "content": "World", "author_id": ada["id"]}).json()

    response = client.get(f"{POSTS_PATH}/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_get_missing_post_is_not_found(client: TestClient) -> None:
    assert client.get(f"{POSTS_PATH}/nothing").status_code == 404


def test_post_with_deleted_author_is_not_found(client: TestClient, store: SqlBlogStore, ada: dict[str, Any]) -> None:
    created = client.post(POSTS_PATH, json={"title": "Hi", "content": "World", "author_id": ada["id"]}).json()
    store.delete_by_id(EntityKind.AUTHOR, ada["id"])

    assert client.get(f"{POSTS_PATH}/{created['id']}").status_code == 404
    assert client.get(POSTS_PATH).json() == {"blogposts": []}


def test_update_post_changes_title_only(client: TestClient, ada: dict[str, Any]) -> None:
    created = client.post(POSTS_PATH, json={"title": "Hi", "content": "World", "author_id": ada["id"]}).json()

    response = client.put(
        f"{POSTS_PATH}/{created['id']}",
        json={"id": created["id"], "title": "New Title", "author": "evil-id", "author_id": "evil-id"},
    )

    assert response.status_code == 204
    assert client.get(f"{POSTS_PATH}/{created['id']}").json() == {**created, "title": "New Title"}


def test_update_post_with_mismatched_ids_is_rejected(client: TestClient, ada: dict[str, Any]) -> None:
    created = client.post(POSTS_PATH, json={"title": "Hi", "content": "World", "author_id": ada["id"]}).json()

    response = client.put(f"{POSTS_PATH}/{created['id']}", json={"title": "New Title"})

    assert response.status_code == 400
    assert "must match" in response.json()["message"]
    assert client.get(f"{POSTS_PATH}/{created['id']}").json()["title"] == "Hi"


def test_delete_post_keeps_author(client: TestClient, ada: dict[str, Any]) -> None:
    created = client.post(POSTS_PATH, json={"title": "Hi", "content": "World", "author_id": ada["id"]}).json()

    assert client.delete(f"{POSTS_PATH}/{created['id']}").status_code == 204
    assert client.get(f"{POSTS_PATH}/{created['id']}").status_code == 404
    assert client.get(f"{AUTHORS_PATH}/{ada['id']}").status_code == 200


class BrokenStore:
    def find_all(self, *_: object, **__: object) -> list[dict[str, Any]]:
        raise StoreError("connection reset")


def test_store_failure_returns_generic_internal_error() -> None:
    service = BlogPostService(store=BrokenStore())  # type: ignore[arg-type]
    with api_test_client(blog_post_service=service) as client:
        response = client.get(POSTS_PATH)

    assert response.status_code == 500
    payload = response.json()
    assert payload["error_code"] == "INTERNAL_SERVER_ERROR"
    assert "connection reset" not in payload["message"]
