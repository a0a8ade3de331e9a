# This file defines response schemas for the Author and BlogPost resources.
# It exists so the wire contracts (camelCase author fields, string timestamps) are explicit.
# Request bodies are validated by the blog core, so only responses are modelled here.

from __future__ import annotations

from pydantic import BaseModel


class AuthorV1(BaseModel):
    id: str
    firstName: str
    lastName: str
    userName: str


class AuthorListResponseV1(BaseModel):
    authors: list[AuthorV1]


class BlogPostV1(BaseModel):
    id: str
    title: str
    content: str
    author: str
    created: str


class BlogPostListResponseV1(BaseModel):
    blogposts: list[BlogPostV1]
