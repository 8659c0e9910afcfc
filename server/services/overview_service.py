"""Volume (GA) overview: the lectures of one volume with their cached summaries."""

import logging
import re
from typing import Any, Dict, List

from retrieval.types import Lecture
from server.services.lecture_service import VolumeNotFoundError

logger = logging.getLogger("lectures.summary")

_TRAILING_NUMBER_RE = re.compile(r"/(\d+)")


def _lecture_order(lecture: Lecture):
    """Sort key: numeric lectureNumber, else the number after the slash, else the ID."""
    try:
        return (0, int(lecture.lecture_number), lecture.id)
    except (TypeError, ValueError):
        pass
    m = _TRAILING_NUMBER_RE.search(lecture.id)
    if m:
        return (0, int(m.group(1)), lecture.id)
    return (1, 0, lecture.id)


def build_overview(runtime, volume_id: str) -> Dict[str, Any]:
    lectures = sorted(runtime.lectures_in_volume(volume_id), key=_lecture_order)
    if not lectures:
        raise VolumeNotFoundError(volume_id, runtime.volume_ids()[: runtime.settings.not_found_sample_size])

    items: List[Dict[str, Any]] = []
    for lec in lectures:
        cached = runtime.summary_cache.get(lec.id)
        items.append({
            "ID": lec.id,
            "title": lec.title,
            "fileName": lec.file_name,
            "lectureNumber": lec.lecture_number,
            "date": lec.date,
            "location": lec.location,
            "summary": cached.summary if cached else None,
        })

    first = lectures[0]
    return {
        "gaNumber": first.volume_id,
        "gaTitle": next((lec.ga_title for lec in lectures if lec.ga_title), ""),
        "lectureCount": len(items),
        "summarizedCount": sum(1 for i in items if i["summary"] is not None),
        "lectures": items,
    }


def get_overview(runtime, volume_id: str, *, refresh: bool = False) -> Dict[str, Any]:
    """Cached overview for volume_id; rebuilt when missing or when refresh is set."""
    if not volume_id:
        raise ValueError("gaNumber is required")

    if not refresh:
        cached = runtime.overview_cache.get(volume_id)
        if cached is not None:
            return {**cached, "fromCache": True}

    generation = runtime.overview_cache.generation(volume_id)
    overview = build_overview(runtime, volume_id)
    runtime.overview_cache.put(overview["gaNumber"], overview, generation=generation)
    logger.info("Built overview for %s (%d lectures)", overview["gaNumber"], overview["lectureCount"])
    return {**overview, "fromCache": False}
