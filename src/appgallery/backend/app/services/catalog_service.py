"""Catalog persistence across local JSON files, blob storage and memory."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Any, Iterable, Mapping

from appgallery.backend.storage.blob_store import BlobStore, BlobStoreError, latest_blob

logger = logging.getLogger(__name__)

COLLECTION_KINDS: tuple[str, ...] = ("apps", "contents", "featured", "events")
# Collections holding app ids rather than full records; bulk writes merge into them.
ID_COLLECTION_ORDER: tuple[str, ...] = ("featured", "events")
ID_COLLECTIONS = frozenset(ID_COLLECTION_ORDER)

DEFAULT_SAVE_ATTEMPTS = 3


def collection_pathname(kind: str) -> str:
    """Return the blob pathname / local file name for a collection."""

    if kind not in COLLECTION_KINDS:
        raise ValueError(f"Unknown collection: {kind}")
    return f"{kind}.json"


def save_collection(
    store: BlobStore,
    kind: str,
    items: Iterable[Any],
    *,
    attempts: int = 1,
) -> bool:
    """Write a whole collection to blob storage, reporting success as a flag."""

    pathname = collection_pathname(kind)
    payload = list(items)
    for attempt in range(1, attempts + 1):
        try:
            store.put_json(pathname, payload)
        except BlobStoreError as error:
            logger.error(
                "Saving %s to blob storage failed (attempt %d/%d): %s",
                pathname,
                attempt,
                attempts,
                error,
            )
            continue
        logger.info("Saved %d %s record(s) to blob storage", len(payload), kind)
        return True
    return False


def merge_ids(current: Iterable[Any], incoming: Iterable[Any]) -> list[str]:
    """Union two id lists, keeping first-seen order and dropping duplicates."""

    merged = (str(item) for item in (*current, *incoming) if isinstance(item, (str, int)))
    return list(dict.fromkeys(merged))


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a catalog write."""

    storage: str
    data: list[Any]
    warning: str | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": True, "storage": self.storage, "data": self.data}
        if self.warning:
            payload["warning"] = self.warning
        return payload


class CatalogRepository:
    """Read and write gallery collections.

    Reads prefer a non-empty local file, then (in blob mode) the newest blob,
    then the in-memory copy of the last write. Writes go to blob storage with
    retries in blob mode and to the local file otherwise.
    """

    def __init__(
        self,
        data_dir: Path,
        *,
        blob_store: BlobStore | None = None,
        save_attempts: int = DEFAULT_SAVE_ATTEMPTS,
    ) -> None:
        if save_attempts <= 0:
            raise ValueError("save_attempts must be positive")
        self._data_dir = Path(data_dir)
        self._blob_store = blob_store
        self._save_attempts = save_attempts
        self._memory: dict[str, list[Any]] = {}
        self._lock = Lock()

    @property
    def uses_blob_storage(self) -> bool:
        return self._blob_store is not None

    def local_path(self, kind: str) -> Path:
        return self._data_dir / collection_pathname(kind)

    def _read_local(self, kind: str) -> list[Any]:
        path = self.local_path(kind)
        if not path.exists():
            return []
        text = path.read_text(encoding="utf-8")
        data = json.loads(text or "[]")
        return data if isinstance(data, list) else []

    def _write_local(self, kind: str, items: list[Any]) -> None:
        path = self.local_path(kind)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8")

    def _read_blob(self, kind: str) -> list[Any] | None:
        if self._blob_store is None:
            return None
        pathname = collection_pathname(kind)
        blob = latest_blob(self._blob_store.list(prefix=pathname, limit=100))
        if blob is None:
            return None
        data = self._blob_store.get_json(blob.url)
        return data if isinstance(data, list) else []

    def _remember(self, kind: str, items: list[Any]) -> None:
        with self._lock:
            self._memory[kind] = list(items)

    def _recall(self, kind: str) -> list[Any]:
        with self._lock:
            return list(self._memory.get(kind, []))

    def load(self, kind: str) -> list[Any]:
        """Return the collection, or an empty list when every source fails."""

        collection_pathname(kind)
        try:
            local = self._read_local(kind)
        except (OSError, ValueError) as error:
            logger.warning("Reading local %s failed: %s", kind, error)
        else:
            if local:
                logger.debug("Loaded %d %s record(s) from local file", len(local), kind)
                return local

        if self.uses_blob_storage:
            try:
                remote = self._read_blob(kind)
            except BlobStoreError as error:
                logger.warning("Reading %s from blob storage failed: %s", kind, error)
            else:
                if remote is not None:
                    logger.debug("Loaded %d %s record(s) from blob storage", len(remote), kind)
                    self._remember(kind, remote)
                    return remote

            cached = self._recall(kind)
            if cached:
                logger.info("Serving %d %s record(s) from memory fallback", len(cached), kind)
                return cached

        return []

    def _current_ids(self, kind: str) -> list[Any]:
        if not self.uses_blob_storage:
            return self._read_local(kind)
        try:
            remote = self._read_blob(kind)
        except BlobStoreError as error:
            logger.warning("Loading existing %s failed, using memory: %s", kind, error)
            return self._recall(kind)
        return remote or []

    def save(self, kind: str, items: Iterable[Any]) -> SaveResult:
        """Persist a collection; id collections are merged with stored ids."""

        collection_pathname(kind)
        data = list(items)
        if kind in ID_COLLECTIONS:
            current = self._current_ids(kind)
            data = merge_ids(current, data)
            logger.info("Merged %s ids: %d stored + incoming = %d", kind, len(current), len(data))

        return self._persist(kind, data)

    def _persist(self, kind: str, data: list[Any]) -> SaveResult:
        if self._blob_store is None:
            self._write_local(kind, data)
            return SaveResult(storage="local", data=data)

        saved = save_collection(self._blob_store, kind, data, attempts=self._save_attempts)
        self._remember(kind, data)
        if saved:
            return SaveResult(storage="blob", data=data)

        logger.error("All blob save attempts for %s failed; using in-memory fallback", kind)
        return SaveResult(
            storage="memory",
            data=data,
            warning=(
                f"Blob save failed after {self._save_attempts} attempts; "
                "using in-memory fallback"
            ),
        )

    def featured_sets(self) -> dict[str, list[str]]:
        """Current featured and event ids, de-duplicated."""

        return {kind: merge_ids([], self.load(kind)) for kind in ID_COLLECTION_ORDER}

    def replace_ids(self, kind: str, ids: Iterable[Any]) -> SaveResult:
        """Overwrite an id collection without merging."""

        _require_id_collection(kind)
        return self._persist(kind, merge_ids([], ids))

    def toggle_id(self, kind: str, app_id: str, *, present: bool) -> SaveResult:
        """Add (``present=True``) or remove one app id from an id collection."""

        _require_id_collection(kind)
        ids = merge_ids([], self.load(kind))
        if present and app_id not in ids:
            ids.append(app_id)
            logger.info("Added %s to %s", app_id, kind)
        elif not present and app_id in ids:
            ids.remove(app_id)
            logger.info("Removed %s from %s", app_id, kind)
        else:
            logger.info("%s already %s %s", app_id, "in" if present else "absent from", kind)
        return self._persist(kind, ids)

    def delete_app(self, app_id: str) -> SaveResult:
        """Drop an app record and any featured/event references to it.

        Raises :class:`KeyError` when no app carries ``app_id``.
        """

        apps = self.load("apps")
        remaining = [item for item in apps if not _has_id(item, app_id)]
        if len(remaining) == len(apps):
            raise KeyError(app_id)

        result = self._persist("apps", remaining)
        for kind in ID_COLLECTION_ORDER:
            ids = merge_ids([], self.load(kind))
            if app_id in ids:
                ids.remove(app_id)
                self._persist(kind, ids)
        logger.info("Deleted app %s (%d remaining)", app_id, len(remaining))
        return result


def _require_id_collection(kind: str) -> None:
    if kind not in ID_COLLECTIONS:
        raise ValueError(f"{kind} is not an id collection")


def _has_id(item: Any, record_id: str) -> bool:
    return isinstance(item, Mapping) and str(item.get("id")) == record_id


__all__ = [
    "COLLECTION_KINDS",
    "CatalogRepository",
    "ID_COLLECTIONS",
    "ID_COLLECTION_ORDER",
    "SaveResult",
    "collection_pathname",
    "merge_ids",
    "save_collection",
]
