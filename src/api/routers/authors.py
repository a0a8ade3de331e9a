# This file defines the Author resource endpoints under the versioned API path.
# It exists so clients can list, fetch, create, update, and delete authors.
# Request bodies are passed through unvalidated; the author service owns every field rule.
# Deleting an author also removes all of that author's blog posts.

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response

from src.api.dependencies import get_author_service
from src.api.schemas.blog_schemas import AuthorListResponseV1, AuthorV1
from src.api.schemas.common import ERROR_RESPONSES
from src.api.services.author_service import AuthorService

router = APIRouter(prefix="/authors", tags=["authors"], responses=ERROR_RESPONSES)
AuthorServiceDep = Annotated[AuthorService, Depends(get_author_service)]
RequestBody = Annotated[dict[str, Any], Body()]


@router.get("", response_model=AuthorListResponseV1)
def list_authors(service: AuthorServiceDep) -> dict[str, object]:
    return {"authors": service.list_authors()}


@router.get("/{author_id}", response_model=AuthorV1)
def get_author(author_id: str, service: AuthorServiceDep) -> dict[str, str]:
    return service.get_author(author_id)


@router.post("", status_code=201, response_model=AuthorV1)
def create_author(body: RequestBody, service: AuthorServiceDep) -> dict[str, str]:
    return service.create_author(body)


@router.put("/{author_id}", status_code=204, response_class=Response)
def update_author(author_id: str, body: RequestBody, service: AuthorServiceDep) -> Response:
    service.update_author(author_id, body)
    return Response(status_code=204)


@router.delete("/{author_id}", status_code=204, response_class=Response)
def delete_author(author_id: str, service: AuthorServiceDep) -> Response:
    service.delete_author(author_id)
    return Response(status_code=204)
