"""Split the legacy ``featured-apps.json`` into ``featured.json`` and ``events.json``."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from shutil import copy2
from typing import Any, Sequence

from appgallery.backend.config.settings import load_settings

logger = logging.getLogger(__name__)

LEGACY_FILE = "featured-apps.json"
FEATURED_FILE = "featured.json"
EVENTS_FILE = "events.json"
BACKUP_SUFFIX = ".backup"


def _id_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def migrate_featured_events(data_dir: Path) -> bool:
    """Run the split; returns ``True`` when the legacy file was migrated.

    A missing legacy file is not an error. Other failures are logged and
    reported as ``False``.
    """

    data_dir = Path(data_dir)
    legacy_path = data_dir / LEGACY_FILE
    if not legacy_path.exists():
        logger.info("No %s found; nothing to migrate", legacy_path)
        return False

    try:
        with legacy_path.open("r", encoding="utf-8") as handle:
            parsed = json.load(handle)

        if not isinstance(parsed, dict):
            parsed = {}
        featured = _id_list(parsed.get("featured"))
        events = _id_list(parsed.get("events"))

        data_dir.mkdir(parents=True, exist_ok=True)
        for name, items in ((FEATURED_FILE, featured), (EVENTS_FILE, events)):
            (data_dir / name).write_text(
                json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            logger.info("Wrote %s (%d item(s))", data_dir / name, len(items))

        backup_path = legacy_path.with_name(legacy_path.name + BACKUP_SUFFIX)
        copy2(legacy_path, backup_path)
        logger.info("Backed up legacy file to %s", backup_path)
        legacy_path.unlink()
        logger.info("Removed %s", legacy_path)
    except (OSError, ValueError) as error:
        logger.error("Featured/events migration failed: %s", error)
        return False

    return True


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--data-dir", type=Path, default=None)
    args = parser.parse_args(argv)

    migrate_featured_events(args.data_dir or load_settings().data_dir)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
