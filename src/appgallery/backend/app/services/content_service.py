"""Per-item management of the ``contents`` collection (app stories, news)."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Mapping

from appgallery.backend.app.models import (
    ContentCreateRequest,
    ContentUpdateRequest,
    parse_request,
)

from .catalog_service import CatalogRepository, SaveResult

logger = logging.getLogger(__name__)

CONTENT_COLLECTION = "contents"

# Each content type draws ids from its own numeric band so ids never collide
# across types.
CONTENT_ID_RANGES: Mapping[str, tuple[int, int]] = MappingProxyType(
    {
        "appstory": (1, 9999),
        "news": (10000, 19999),
        "memo": (20000, 29999),
        "memo2": (30000, 39999),
    }
)
MAX_RANDOM_ID_ATTEMPTS = 100

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def allocate_content_id(
    content_type: str, taken: set[str], rng: random.Random
) -> str:
    """Pick an unused id inside ``content_type``'s band."""

    low, high = CONTENT_ID_RANGES[content_type]
    for _ in range(MAX_RANDOM_ID_ATTEMPTS):
        candidate = str(rng.randint(low, high))
        if candidate not in taken:
            return candidate

    for value in range(low, high + 1):
        if str(value) not in taken:
            return str(value)
    raise ValueError(f"No free {content_type} ids left")


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""

    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _publish_sort_key(item: Mapping[str, Any]) -> datetime:
    raw = item.get("publishDate")
    if not isinstance(raw, str):
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class ContentService:
    """CRUD over content records stored through :class:`CatalogRepository`."""

    def __init__(
        self,
        catalog: CatalogRepository,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._catalog = catalog
        self._rng = rng or random.Random()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _records(self) -> list[dict[str, Any]]:
        return [
            dict(item)
            for item in self._catalog.load(CONTENT_COLLECTION)
            if isinstance(item, Mapping)
        ]

    def list_contents(
        self, *, content_type: str | None = None, published_only: bool = False
    ) -> list[dict[str, Any]]:
        """Newest first, optionally narrowed by type and publication state."""

        records = self._records()
        if content_type:
            records = [item for item in records if item.get("type") == content_type]
        if published_only:
            records = [item for item in records if item.get("isPublished")]
        return sorted(records, key=_publish_sort_key, reverse=True)

    def create(self, payload: Any) -> tuple[dict[str, Any], SaveResult]:
        request = parse_request(ContentCreateRequest, payload)
        records = self._records()
        taken = {str(item.get("id")) for item in records}

        record: dict[str, Any] = {
            "id": allocate_content_id(request.type, taken, self._rng),
            "title": request.title,
            "content": request.content,
            "author": request.author,
            "publishDate": format_timestamp(self._clock()),
            "type": request.type,
            "tags": request.tags,
            "isPublished": request.is_published,
        }
        if request.image_url:
            record["imageUrl"] = request.image_url

        records.append(record)
        result = self._catalog.save(CONTENT_COLLECTION, records)
        logger.info("Created %s content %s", record["type"], record["id"])
        return record, result

    def update(self, payload: Any) -> tuple[dict[str, Any], SaveResult]:
        """Apply a partial update; raises :class:`KeyError` for unknown ids."""

        request = parse_request(ContentUpdateRequest, payload)
        records = self._records()
        for index, item in enumerate(records):
            if str(item.get("id")) == request.id:
                records[index] = {**item, **request.changes()}
                break
        else:
            raise KeyError(request.id)

        result = self._catalog.save(CONTENT_COLLECTION, records)
        logger.info("Updated content %s", request.id)
        return records[index], result

    def delete(self, content_id: str) -> SaveResult:
        records = self._records()
        remaining = [item for item in records if str(item.get("id")) != content_id]
        if len(remaining) == len(records):
            raise KeyError(content_id)

        result = self._catalog.save(CONTENT_COLLECTION, remaining)
        logger.info("Deleted content %s", content_id)
        return result


__all__ = [
    "CONTENT_ID_RANGES",
    "ContentService",
    "allocate_content_id",
    "format_timestamp",
]
