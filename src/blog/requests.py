"""
Request schemas for create and update bodies.
Every field is optional at the schema level; presence is read from `model_fields_set`,
which keeps "not supplied" distinct from "supplied as an empty string".
Supplied fields must be strings; a null or non-string value is a validation failure.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from src.blog.errors import ValidationError

RequestModelT = TypeVar("RequestModelT", bound="PresenceModel")


class PresenceModel(BaseModel):
    """Base for request bodies whose unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value

    def supplied(self, name: str) -> bool:
        return name in self.model_fields_set

    def supplied_values(self, names: tuple[str, ...]) -> dict[str, Any]:
        """Return the supplied subset of `names` keyed by attribute name."""

        return {name: getattr(self, name) for name in names if self.supplied(name)}


class AuthorCreateRequest(PresenceModel):
    first_name: StrictStr | None = Field(default=None, alias="firstName")
    last_name: StrictStr | None = Field(default=None, alias="lastName")
    user_name: StrictStr | None = Field(default=None, alias="userName")


class AuthorUpdateRequest(PresenceModel):
    id: StrictStr | None = None
    first_name: StrictStr | None = Field(default=None, alias="firstName")
    last_name: StrictStr | None = Field(default=None, alias="lastName")
    user_name: StrictStr | None = Field(default=None, alias="userName")


class BlogPostCreateRequest(PresenceModel):
    title: StrictStr | None = None
    content: StrictStr | None = None
    author_id: StrictStr | None = None


class BlogPostUpdateRequest(PresenceModel):
    id: StrictStr | None = None
    title: StrictStr | None = None
    content: StrictStr | None = None


def parse_request(
    model: type[RequestModelT],
    body: Mapping[str, Any],
    *,
    required: tuple[str, ...] = (),
) -> RequestModelT:
    """Validate a raw body mapping, reporting the first offending field.

    `required` lists wire names in the order they are checked: the first one
    that is absent or invalid is reported before any other field's error.
    """

    data = dict(body)
    try:
        request = model.model_validate(data)
    except PydanticValidationError as exc:
        errors = exc.errors()
        by_field = {str(error["loc"][0]): error for error in errors if error.get("loc")}
        for name in required:
            if name not in data:
                raise ValidationError(f"Missing `{name}` in request body", field=name) from exc
            if name in by_field:
                raise _invalid_field(name, by_field[name]) from exc
        location = errors[0].get("loc") or ()
        raise _invalid_field(str(location[0]) if location else None, errors[0]) from exc

    for name in required:
        if name not in data:
            raise ValidationError(f"Missing `{name}` in request body", field=name)
    return request


def _invalid_field(field_name: str | None, error: Mapping[str, Any]) -> ValidationError:
    return ValidationError(f"Invalid `{field_name}` in request body: {error.get('msg')}", field=field_name)
