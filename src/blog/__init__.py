"""Blog domain core: entities, persistence store, reference resolution, update validation, and cascades."""

from src.blog.cascade import CascadeCoordinator
from src.blog.entities import Author, BlogPost, Comment, PopulatedBlogPost, serialize_author, serialize_blog_post
from src.blog.errors import (
    BadRequest,
    BlogError,
    Conflict,
    InternalError,
    InvalidReference,
    NotFound,
    StoreError,
    UniqueViolation,
    ValidationError,
)
from src.blog.mutations import MutationValidator, UpdateSet
from src.blog.resolver import ReferenceResolver
from src.blog.store import BlogStore, EntityKind, SqlBlogStore

__all__ = [
    "Author",
    "BadRequest",
    "BlogError",
    "BlogPost",
    "BlogStore",
    "CascadeCoordinator",
    "Comment",
    "Conflict",
    "EntityKind",
    "InternalError",
    "InvalidReference",
    "MutationValidator",
    "NotFound",
    "PopulatedBlogPost",
    "ReferenceResolver",
    "SqlBlogStore",
    "StoreError",
    "UniqueViolation",
    "UpdateSet",
    "ValidationError",
    "serialize_author",
    "serialize_blog_post",
]
