"""JSON files in the data directory: the durable store behind the caches."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger("lectures.storage")


class JsonStore:
    """
    Named JSON documents under one directory.

    save_json serializes fully in memory before touching the disk, then writes
    a temp file and renames it over the target, so readers never see a
    half-written file.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path(self, name: str) -> Path:
        return self.root / name

    def load_json(self, name: str) -> Optional[Any]:
        """Parsed document, or None if missing or unreadable."""
        path = self.path(name)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return None

    def save_json(self, name: str, data: Any) -> bool:
        """Write data atomically. Returns False (and logs) on any failure."""
        path = self.path(name)
        try:
            payload = json.dumps(data, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            logger.error("Could not serialize %s: %s", name, e)
            return False

        tmp: Optional[Path] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # one temp file per write, so concurrent writers never share it
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent,
                prefix=path.name + ".", suffix=".tmp", delete=False,
            ) as f:
                tmp = Path(f.name)
                f.write(payload)
            tmp.replace(path)
        except OSError as e:
            logger.error("Could not write %s: %s", path, e)
            if tmp is not None:
                try:
                    tmp.unlink(missing_ok=True)
                except OSError:
                    pass
            return False

        logger.debug("Wrote %s (%.2f KB)", path, len(payload) / 1024)
        return True
