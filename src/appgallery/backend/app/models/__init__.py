"""Request models for the admin management API."""

from .api import (
    ContentCreateRequest,
    ContentType,
    ContentUpdateRequest,
    FeaturedPatchRequest,
    FeaturedSetsRequest,
    FeaturedToggleRequest,
    IdCollection,
    format_validation_error,
    normalise_tags,
    parse_request,
)

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
