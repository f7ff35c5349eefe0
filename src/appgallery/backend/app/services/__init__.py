"""Service-layer helpers for the gallery backend."""

from .catalog_service import (
    COLLECTION_KINDS,
    CatalogRepository,
    SaveResult,
    save_collection,
)
from .content_service import ContentService

__all__ = [
    "COLLECTION_KINDS",
    "CatalogRepository",
    "ContentService",
    "SaveResult",
    "save_collection",
]
