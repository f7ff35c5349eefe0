#!/usr/bin/env python3
"""Split legacy featured-apps.json into featured/events files."""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the src directory is importable when running from a Git checkout.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from appgallery.backend.migrations.featured_events import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main())
