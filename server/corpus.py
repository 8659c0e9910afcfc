"""
Corpus files under DATA_DIR.

   steiner-search-<from>-<to>*.json          {"chunks": [...]}     passages (required)
   steiner-full-lectures-<from>-<to>*.json   {"lectures": [...]}   full lectures
   synonyms.json                             {concept: [forms]}

<from>/<to> are volume numbers: three digits and an optional letter.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Tuple

from retrieval.synonyms import DEFAULT_SYNONYMS, validate_table
from retrieval.types import Lecture, Passage
from server.storage import JsonStore

logger = logging.getLogger("lectures.corpus")

SEARCH_FILE_RE = re.compile(r"^steiner-search-(\d{3}[a-z]?)-(\d{3}[a-z]?).*\.json$", re.IGNORECASE)
LECTURE_FILE_RE = re.compile(r"^steiner-full-lectures-(\d{3}[a-z]?)-(\d{3}[a-z]?).*\.json$", re.IGNORECASE)


class CorpusLoadError(Exception):
    """The passage corpus could not be loaded. The server must not start."""


def find_data_files(data_dir: Path) -> Tuple[List[Path], List[Path]]:
    """Return (search_files, lecture_files), each sorted by name."""
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        return [], []
    names = sorted(p.name for p in data_dir.iterdir() if p.is_file())
    search_files = [data_dir / n for n in names if SEARCH_FILE_RE.match(n)]
    lecture_files = [data_dir / n for n in names if LECTURE_FILE_RE.match(n)]
    return search_files, lecture_files


def _read(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_passages(data_dir: Path) -> List[Passage]:
    """All passages from every search file, in file order. Raises CorpusLoadError."""
    search_files, _ = find_data_files(data_dir)
    if not search_files:
        raise CorpusLoadError(f"No steiner-search-XXX-YYY*.json files found in {data_dir}")

    passages: List[Passage] = []
    for path in search_files:
        try:
            data = _read(path)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            raise CorpusLoadError(f"Could not load {path.name}: {e}") from e
        chunks = data.get("chunks", []) if isinstance(data, dict) else []
        file_passages = [Passage.from_dict(c) for c in chunks if isinstance(c, dict)]
        passages.extend(file_passages)
        logger.info("Loaded %d passages from %s", len(file_passages), path.name)

    logger.info("Total: %d passages", len(passages))
    return passages


def load_lectures(data_dir: Path) -> Dict[str, Lecture]:
    """
    Lectures keyed by ID. Never raises: a broken file is logged and skipped,
    and the server then runs with fewer (or no) full lectures.
    """
    _, lecture_files = find_data_files(data_dir)
    if not lecture_files:
        logger.warning("No steiner-full-lectures-XXX-YYY*.json files in %s", data_dir)
        return {}

    lectures: Dict[str, Lecture] = {}
    for path in lecture_files:
        try:
            data = _read(path)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.error("Could not load %s: %s", path.name, e)
            continue
        records = data.get("lectures", []) if isinstance(data, dict) else []
        count = 0
        for record in records:
            if not isinstance(record, dict) or not record.get("ID"):
                continue
            lecture = Lecture.from_dict(record)
            lectures[lecture.id] = lecture
            count += 1
        logger.info("Loaded %d lectures from %s", count, path.name)

    logger.info("Total: %d lectures", len(lectures))
    return lectures


def load_synonyms(store: JsonStore, name: str) -> Dict[str, List[str]]:
    """
    The synonym table from `name`, or the built-in default.

    A missing file is created from the default (best effort). An invalid file
    is ignored as a whole.
    """
    data = store.load_json(name)
    if data is None:
        if not store.path(name).exists():
            store.save_json(name, DEFAULT_SYNONYMS)
            logger.info("Created default synonyms at %s", store.path(name))
        return {k: list(v) for k, v in DEFAULT_SYNONYMS.items()}

    table = validate_table(data)
    if table is None:
        logger.warning("Invalid synonym table in %s, using defaults", name)
        return {k: list(v) for k, v in DEFAULT_SYNONYMS.items()}

    logger.info("Loaded %d synonym groups", len(table))
    return table
