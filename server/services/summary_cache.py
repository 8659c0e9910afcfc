"""
Persisted caches for lecture summaries and volume (GA) overviews.

Summary values on disk come in two shapes: a bare string (older files) or
{"summary": ..., "headings": [...]}. Both are turned into SummaryEntry when
read; nothing past get() ever sees the raw shape. Writes always use the
structured form.

Overview entries are derived from summaries. They are never patched: writing
a summary deletes the overview of that lecture's volume, and the next read
rebuilds it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from retrieval.types import volume_of
from server.storage import JsonStore

logger = logging.getLogger("lectures.cache")

HEADING_LEVELS = ("h3", "h4")


@dataclass
class Heading:
    index: str
    text: str
    level: str = "h3"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Heading":
        return cls(
            index=str(data.get("index", "")),
            text=str(data.get("text", "")),
            level=str(data.get("level", "h3")),
        )


@dataclass
class SummaryEntry:
    summary: str
    headings: List[Heading] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SummaryEntry":
        headings = data.get("headings") or []
        return cls(
            summary=str(data.get("summary") or ""),
            headings=[Heading.from_dict(h) for h in headings if isinstance(h, dict)],
        )


def normalize_entry(raw: Any) -> Optional[SummaryEntry]:
    """Read boundary for cached summary values. An empty legacy string is a miss."""
    if isinstance(raw, str):
        return SummaryEntry(summary=raw, headings=[]) if raw else None
    if isinstance(raw, dict):
        return SummaryEntry.from_dict(raw)
    return None


class SummaryCache:
    """
    Lecture ID -> SummaryEntry, persisted as one JSON document.

    The in-memory value is updated even when the disk write fails, so the
    running process keeps serving the fresh summary. Snapshot and write happen
    under one lock: the file on disk always holds the latest snapshot.
    """

    def __init__(self, store: JsonStore, name: str):
        self.store = store
        self.name = name
        self._lock = threading.Lock()
        self._entries: Dict[str, Any] = {}

    def load(self) -> "SummaryCache":
        data = self.store.load_json(self.name)
        if isinstance(data, dict):
            self._entries = dict(data)
            logger.info("Loaded %d cached summaries", len(self._entries))
        else:
            self._entries = {}
            logger.info("No cached summaries found, starting empty")
        return self

    def __len__(self) -> int:
        return len(self._entries)

    def has(self, lecture_id: str) -> bool:
        return normalize_entry(self._entries.get(lecture_id)) is not None

    def get(self, lecture_id: str) -> Optional[SummaryEntry]:
        return normalize_entry(self._entries.get(lecture_id))

    def put(self, lecture_id: str, entry: SummaryEntry) -> bool:
        """Store entry and persist the whole cache. Returns the persistence result."""
        with self._lock:
            self._entries[lecture_id] = entry.to_dict()
            saved = self.store.save_json(self.name, dict(self._entries))
        if not saved:
            logger.error("Summary for %s kept in memory only", lecture_id)
        return saved

    def keys(self) -> List[str]:
        return list(self._entries)


class OverviewCache:
    """
    Volume ID -> overview dict. Keys compare case-insensitively.

    Every invalidation bumps the volume's generation. An overview built
    against an older generation is not stored, so a summary written while the
    overview was being built is never hidden by it.
    """

    def __init__(self, store: JsonStore, name: str):
        self.store = store
        self.name = name
        self._lock = threading.Lock()
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._generations: Dict[str, int] = {}

    def load(self) -> "OverviewCache":
        data = self.store.load_json(self.name)
        self._entries = {}
        if isinstance(data, dict):
            for key, value in data.items():
                if isinstance(value, dict):
                    self._entries[key.lower()] = value
        return self

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, volume_id: str) -> Optional[Dict[str, Any]]:
        return self._entries.get(volume_id.lower())

    def generation(self, volume_id: str) -> int:
        return self._generations.get(volume_id.lower(), 0)

    def put(self, volume_id: str, overview: Dict[str, Any], generation: Optional[int] = None) -> bool:
        """
        Store and persist an overview. Returns False when it was not stored.

        With `generation`, the overview is dropped if the volume was
        invalidated since that generation was read.
        """
        key = volume_id.lower()
        with self._lock:
            if generation is not None and self._generations.get(key, 0) != generation:
                logger.info("Overview for %s is stale, not cached", volume_id.upper())
                return False
            self._entries[key] = overview
            return self.store.save_json(self.name, dict(self._entries))

    def invalidate_for_lecture(self, lecture_id: str) -> bool:
        """Drop the overview of the lecture's volume. Returns True if one was removed."""
        volume = volume_of(lecture_id).lower()
        with self._lock:
            self._generations[volume] = self._generations.get(volume, 0) + 1
            if volume not in self._entries:
                return False
            del self._entries[volume]
            self.store.save_json(self.name, dict(self._entries))
        logger.info("Invalidated overview for %s", volume.upper())
        return True
