# This file defines the BlogPost resource endpoints under the versioned API path.
# It exists so clients can list, fetch, create, update, and delete blog posts.
# Every response carries the resolved author full name and a millisecond `created` string.

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response

from src.api.dependencies import get_blog_post_service
from src.api.schemas.blog_schemas import BlogPostListResponseV1, BlogPostV1
from src.api.schemas.common import ERROR_RESPONSES
from src.api.services.blog_post_service import BlogPostService

router = APIRouter(prefix="/posts", tags=["posts"], responses=ERROR_RESPONSES)
BlogPostServiceDep = Annotated[BlogPostService, Depends(get_blog_post_service)]
RequestBody = Annotated[dict[str, Any], Body()]


@router.get("", response_model=BlogPostListResponseV1)
def list_posts(service: BlogPostServiceDep) -> dict[str, object]:
    return {"blogposts": service.list_posts()}


@router.get("/{post_id}", response_model=BlogPostV1)
def get_post(post_id: str, service: BlogPostServiceDep) -> dict[str, str]:
    return service.get_post(post_id)


@router.post("", status_code=201, response_model=BlogPostV1)
def create_post(body: RequestBody, service: BlogPostServiceDep) -> dict[str, str]:
    return service.create_post(body)


@router.put("/{post_id}", status_code=204, response_class=Response)
def update_post(post_id: str, body: RequestBody, service: BlogPostServiceDep) -> Response:
    service.update_post(post_id, body)
    return Response(status_code=204)


@router.delete("/{post_id}", status_code=204, response_class=Response)
def delete_post(post_id: str, service: BlogPostServiceDep) -> Response:
    service.delete_post(post_id)
    return Response(status_code=204)
