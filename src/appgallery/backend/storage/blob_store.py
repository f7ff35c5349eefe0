"""Blob storage clients for catalog JSON documents.

This module handles:
- Token discovery for the Vercel Blob HTTP API
- Writing JSON documents under fixed pathnames (no random suffix)
- Listing blobs by prefix and reading public blob URLs
- An in-memory double for tests
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Protocol

import httpx

logger = logging.getLogger(__name__)

# Vercel Blob API version sent with every request
BLOB_API_VERSION = "7"

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

TOKEN_ENV_NAMES = ("BLOB_READ_WRITE_TOKEN", "VERCEL_BLOB_READ_WRITE_TOKEN")
TOKEN_ENV_MARKER = "vercel_blob_rw_"


class BlobStoreError(Exception):
    """Raised when a blob store operation fails."""

    def __init__(self, message: str, code: str = "blob_error") -> None:
        """Initialize BlobStoreError.

        Args:
            message: Error description.
            code: Error code for structured error handling.
        """
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class BlobObject:
    """Metadata describing a stored blob."""

    url: str
    pathname: str
    uploaded_at: datetime
    size: int | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> BlobObject:
        try:
            url = str(payload["url"])
            pathname = str(payload["pathname"])
        except KeyError as exc:
            raise BlobStoreError(f"Blob metadata missing field: {exc}", code="invalid_response") from exc

        uploaded_raw = payload.get("uploadedAt")
        uploaded_at = _parse_timestamp(uploaded_raw) if uploaded_raw else datetime.now(timezone.utc)
        size = payload.get("size")
        return cls(
            url=url,
            pathname=pathname,
            uploaded_at=uploaded_at,
            size=int(size) if isinstance(size, int) else None,
        )


def _parse_timestamp(value: Any) -> datetime:
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as exc:
        raise BlobStoreError(f"Invalid blob timestamp: {value}", code="invalid_response") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class BlobStore(Protocol):
    """Operations the catalog needs from object storage."""

    def put_json(self, pathname: str, payload: Any) -> BlobObject:
        ...

    def list(self, prefix: str, limit: int = 100) -> list[BlobObject]:
        ...

    def get_json(self, url: str) -> Any:
        ...


def find_blob_token(environ: Mapping[str, str] | None = None) -> str | None:
    """Locate a read/write token without ever logging its value."""

    env = os.environ if environ is None else environ
    for name in TOKEN_ENV_NAMES:
        if env.get(name):
            return env[name]

    for name, value in env.items():
        if name and TOKEN_ENV_MARKER in name.lower() and value:
            return value
    return None


def latest_blob(blobs: list[BlobObject]) -> BlobObject | None:
    """Return the most recently uploaded blob, if any."""

    return max(blobs, key=lambda blob: blob.uploaded_at, default=None)


class HttpBlobStore:
    """Client for the Vercel Blob HTTP API."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = "https://blob.vercel-storage.com",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not token:
            raise BlobStoreError("A blob read/write token is required", code="missing_token")
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_environment(
        cls,
        *,
        base_url: str = "https://blob.vercel-storage.com",
        timeout: float = 30.0,
        environ: Mapping[str, str] | None = None,
    ) -> HttpBlobStore:
        token = find_blob_token(environ)
        if not token:
            raise BlobStoreError(
                "BLOB_READ_WRITE_TOKEN environment variable is required for blob storage",
                code="missing_token",
            )
        return cls(token, base_url=base_url, timeout=timeout)

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {
            "authorization": f"Bearer {self._token}",
            "x-api-version": BLOB_API_VERSION,
        }
        headers.update(extra)
        return headers

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise BlobStoreError(
                f"Blob request failed with HTTP {exc.response.status_code}: {method} {url}",
                code="http_error",
            ) from exc
        except httpx.HTTPError as exc:
            raise BlobStoreError(f"Blob request failed: {exc}", code="network_error") from exc
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise BlobStoreError("Blob response was not valid JSON", code="invalid_response") from exc

    def put_json(self, pathname: str, payload: Any) -> BlobObject:
        """Upload ``payload`` as pretty-printed JSON under ``pathname``."""

        body = json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")
        response = self._request(
            "PUT",
            f"{self._base_url}/{pathname}",
            content=body,
            headers=self._headers(
                **{
                    "x-content-type": JSON_CONTENT_TYPE,
                    "x-add-random-suffix": "0",
                    "x-allow-overwrite": "1",
                    "access": "public",
                }
            ),
        )
        logger.debug("Uploaded %s (%d bytes)", pathname, len(body))
        return BlobObject.from_payload(self._decode(response))

    def list(self, prefix: str, limit: int = 100) -> list[BlobObject]:
        response = self._request(
            "GET",
            self._base_url,
            params={"prefix": prefix, "limit": str(limit)},
            headers=self._headers(),
        )
        payload = self._decode(response)
        blobs = payload.get("blobs") if isinstance(payload, dict) else None
        if not isinstance(blobs, list):
            raise BlobStoreError("Blob listing missing 'blobs' array", code="invalid_response")
        return [BlobObject.from_payload(item) for item in blobs]

    def get_json(self, url: str) -> Any:
        response = self._request("GET", url, headers={"cache-control": "no-store"})
        return self._decode(response)

    def close(self) -> None:
        self._client.close()


@dataclass
class InMemoryBlobStore:
    """Test double for blob storage interactions."""

    base_url: str = "https://example.public.blob.vercel-storage.com"
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    stored_objects: dict[str, Any] = field(default_factory=dict)
    uploaded: dict[str, datetime] = field(default_factory=dict)

    def put_json(self, pathname: str, payload: Any) -> BlobObject:
        # Round-trip through JSON to mimic real upload behaviour
        self.stored_objects[pathname] = json.loads(json.dumps(payload))
        self.uploaded[pathname] = self.clock()
        return self._describe(pathname)

    def list(self, prefix: str, limit: int = 100) -> list[BlobObject]:
        matches = sorted(name for name in self.stored_objects if name.startswith(prefix))
        return [self._describe(name) for name in matches[:limit]]

    def get_json(self, url: str) -> Any:
        pathname = url.removeprefix(f"{self.base_url}/")
        if pathname not in self.stored_objects:
            raise BlobStoreError(f"Blob not found: {url}", code="http_error")
        return json.loads(json.dumps(self.stored_objects[pathname]))

    def _describe(self, pathname: str) -> BlobObject:
        return BlobObject(
            url=f"{self.base_url}/{pathname}",
            pathname=pathname,
            uploaded_at=self.uploaded[pathname],
        )


__all__ = [
    "BlobObject",
    "BlobStore",
    "BlobStoreError",
    "HttpBlobStore",
    "InMemoryBlobStore",
    "find_blob_token",
    "latest_blob",
]
