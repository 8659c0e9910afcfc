"""Lecture lookup by ID or by volume/number."""

from typing import Any, Dict, List


class LectureNotFoundError(Exception):
    """Unknown lecture. `available` holds a few valid IDs to help the caller."""

    def __init__(self, lecture_id: str, available: List[str]):
        super().__init__(f"Vortrag nicht gefunden: {lecture_id}")
        self.lecture_id = lecture_id
        self.available = available


class VolumeNotFoundError(Exception):
    def __init__(self, volume_id: str, available: List[str]):
        super().__init__(f"GA-Band nicht gefunden: {volume_id}")
        self.volume_id = volume_id
        self.available = available


def _lecture_payload(lecture) -> Dict[str, Any]:
    return {
        "lecture": lecture.to_dict(),
        "paragraphCount": len(lecture.paragraphs),
        "hasIndices": any(p.index for p in lecture.paragraphs),
    }


def get_lecture(runtime, lecture_id: str) -> Dict[str, Any]:
    lecture = runtime.find_lecture(lecture_id)
    if lecture is None:
        sample = runtime.lecture_ids()[: runtime.settings.not_found_sample_size]
        raise LectureNotFoundError(lecture_id, sample)
    return _lecture_payload(lecture)


def get_lecture_by_number(runtime, ga_number: str, lecture_num: str) -> Dict[str, Any]:
    """Lookup by volume and lecture number, e.g. ("ga052", "7") -> GA052/7."""
    volume = ga_number.upper()
    lecture_id = f"{volume}/{lecture_num}"
    lecture = runtime.find_lecture(lecture_id)
    if lecture is None:
        sample = [k for k in runtime.lecture_ids() if k.upper().startswith(volume)]
        raise LectureNotFoundError(lecture_id, sample[: runtime.settings.not_found_sample_size])
    return _lecture_payload(lecture)


def list_lectures(runtime) -> Dict[str, Any]:
    ids = runtime.lecture_ids()
    sample = runtime.lectures[ids[0]].to_dict() if ids else None
    return {"count": len(ids), "lectures": ids, "sample": sample}
