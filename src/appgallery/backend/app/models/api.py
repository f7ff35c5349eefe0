"""Pydantic models for the admin management API request bodies."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "ContentCreateRequest",
    "ContentType",
    "ContentUpdateRequest",
    "FeaturedPatchRequest",
    "FeaturedSetsRequest",
    "FeaturedToggleRequest",
    "IdCollection",
    "format_validation_error",
    "normalise_tags",
    "parse_request",
]

ContentType = Literal["appstory", "news", "memo", "memo2"]

IdCollection = Literal["featured", "events"]

ModelT = TypeVar("ModelT", bound=BaseModel)


def normalise_tags(value: Any) -> list[str]:
    """Accept ``"a, b"`` or ``["a", "b"]`` and return the non-blank tags."""

    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [str(part) for part in value]
    else:
        raise ValueError("tags must be a comma separated string or a list")
    return [part.strip() for part in parts if part.strip()]


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ContentCreateRequest(_RequestModel):
    """New app story or news entry."""

    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    type: ContentType
    tags: list[str] = Field(default_factory=list)
    is_published: bool = Field(default=False, alias="isPublished")
    image_url: str | None = Field(default=None, alias="imageUrl")

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str]:
        return normalise_tags(value)

    @field_validator("is_published", mode="before")
    @classmethod
    def _coerce_published(cls, value: Any) -> bool:
        return bool(value)


class ContentUpdateRequest(_RequestModel):
    """Partial update; only fields present in the body are applied."""

    id: str = Field(..., min_length=1)
    title: str | None = Field(default=None, min_length=1)
    author: str | None = Field(default=None, min_length=1)
    content: str | None = Field(default=None, min_length=1)
    type: ContentType | None = None
    tags: list[str] | None = None
    is_published: bool | None = Field(default=None, alias="isPublished")
    image_url: str | None = Field(default=None, alias="imageUrl")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str] | None:
        return None if value is None else normalise_tags(value)

    def changes(self) -> dict[str, Any]:
        """Non-null fields sent by the client, keyed by their record names."""

        dumped = self.model_dump(by_alias=True, exclude_unset=True, exclude={"id"})
        return {key: value for key, value in dumped.items() if value is not None}


class FeaturedToggleRequest(_RequestModel):
    """``{"appId", "type", "action"}`` single-id toggle."""

    app_id: str = Field(..., min_length=1, alias="appId")
    type: IdCollection
    action: Literal["add", "remove"] = "add"

    @field_validator("app_id", mode="before")
    @classmethod
    def _stringify_app_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class FeaturedPatchRequest(_RequestModel):
    """``{"list", "op", "id"}`` single-id toggle."""

    collection: IdCollection = Field(..., alias="list")
    op: Literal["add", "remove"]
    id: str = Field(..., min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class FeaturedSetsRequest(_RequestModel):
    """Complete replacement of both id lists."""

    featured: list[str | int]
    events: list[str | int]


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid request payload: {details}"


def parse_request(model: type[ModelT], payload: Any) -> ModelT:
    """Validate a decoded JSON body, surfacing problems as :class:`ValueError`."""

    if not isinstance(payload, Mapping):
        raise ValueError("Request JSON must be an object")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc
