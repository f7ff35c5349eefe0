"""Copy local catalog fixtures (``apps.json``, ``contents.json``) to blob storage."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Sequence

from appgallery.backend.app.services.catalog_service import save_collection
from appgallery.backend.config.schema import ConfigurationError
from appgallery.backend.config.settings import load_settings
from appgallery.backend.storage.blob_store import BlobStoreError, HttpBlobStore

logger = logging.getLogger(__name__)

MIGRATED_KINDS: tuple[str, ...] = ("apps", "contents")

SaveCallable = Callable[[str, list[Any]], bool]


class MigrationError(ValueError):
    """Raised when a local fixture cannot be used as a collection."""


@dataclass
class MigrationReport:
    """Summary of a migration run."""

    counts: dict[str, int] = field(default_factory=dict)
    saved: dict[str, bool] = field(default_factory=dict)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and all(self.saved.values())


def load_local_collection(path: Path) -> list[Any]:
    """Read a JSON array from ``path``; a missing file is an empty collection."""

    if not path.exists():
        logger.info("%s not found; treating as empty", path)
        return []

    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    if not isinstance(data, list):
        raise MigrationError(f"{path} must contain a JSON array")
    return data


def migrate_to_blob(data_dir: Path, save: SaveCallable) -> MigrationReport:
    """Send every non-empty local collection to ``save`` exactly once.

    Both files are parsed before the first write, so an unreadable fixture
    aborts the run without touching remote storage. Failures are logged and
    recorded on the report; nothing is raised to the caller.
    """

    report = MigrationReport()
    try:
        collections = {
            kind: load_local_collection(Path(data_dir) / f"{kind}.json") for kind in MIGRATED_KINDS
        }
        for kind, items in collections.items():
            report.counts[kind] = len(items)
            if not items:
                logger.info("Skipping empty %s collection", kind)
                continue
            report.saved[kind] = save(kind, items)
            if report.saved[kind]:
                logger.info("Migrated %d %s record(s)", len(items), kind)
            else:
                logger.error("Migrating %s failed", kind)
    except (OSError, ValueError, BlobStoreError) as error:
        logger.error("Migration aborted: %s", error)
        report.error = str(error)

    return report


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Copy local apps.json and contents.json fixtures into blob storage."
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding the JSON fixtures (defaults to APPGALLERY_DATA_DIR or ./data)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running the migration from the command line."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = _build_argument_parser().parse_args(argv)
    try:
        settings = load_settings()
        store = HttpBlobStore.from_environment(
            base_url=settings.blob_api_url, timeout=settings.blob_timeout
        )
    except (ConfigurationError, BlobStoreError) as error:
        logger.error("Migration aborted: %s", error)
        return 0

    data_dir = args.data_dir or settings.data_dir

    try:
        report = migrate_to_blob(data_dir, lambda kind, items: save_collection(store, kind, items))
    finally:
        store.close()

    logger.info("Migration finished: counts=%s saved=%s", report.counts, report.saved)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
