"""Per-lecture summaries with headings, cached and persisted."""

from __future__ import annotations

import logging
from typing import Any, Dict

from retrieval.types import Lecture
from server.services.lecture_service import LectureNotFoundError
from server.services.llm.fallback import fallback_summary
from server.services.llm.prompts import fit_lecture_text, lecture_text, summary_prompt
from server.services.llm.provider import LLMError
from server.services.llm.validate import parse_summary_response
from server.services.summary_cache import SummaryEntry

logger = logging.getLogger("lectures.summary")


def generate_summary(runtime, lecture: Lecture) -> SummaryEntry:
    """
    Summary and headings for one lecture.

    Model output if a provider is configured and answers; the template
    otherwise. Unparseable model output is kept as plain summary text.
    """
    provider = runtime.provider
    if provider is None:
        logger.info("No model configured, fallback summary for %s", lecture.id)
        return fallback_summary(lecture)

    text, headings_enabled = fit_lecture_text(lecture_text(lecture))
    if not headings_enabled:
        logger.info("Lecture %s too long, summarizing head and tail without headings", lecture.id)

    try:
        raw = provider.generate(
            summary_prompt(lecture, text, headings_enabled),
            runtime.settings.llm_summary_max_tokens,
        )
    except LLMError as e:
        logger.warning("Summary generation for %s failed (%s), using fallback", lecture.id, e)
        return fallback_summary(lecture)

    entry, parsed = parse_summary_response(raw)
    if not parsed:
        logger.warning("Model output for %s is not summary JSON, storing as plain text", lecture.id)
    elif not headings_enabled:
        entry.headings = []
    h3 = sum(1 for h in entry.headings if h.level == "h3")
    logger.info("Summary for %s: %d chars, %d h3 / %d h4 headings",
                lecture.id, len(entry.summary), h3, len(entry.headings) - h3)
    return entry


def summarize_lecture(runtime, lecture_id: str, *, force_regenerate: bool = False) -> Dict[str, Any]:
    """
    Cached summary for lecture_id, generated on a miss or when forced.

    A new summary is written to the cache only after it is complete, and the
    volume overview it belongs to is dropped.
    """
    if not lecture_id:
        raise ValueError("lectureId is required")

    lecture = runtime.find_lecture(lecture_id)
    cache_key = lecture.id if lecture is not None else lecture_id

    if not force_regenerate:
        cached = runtime.summary_cache.get(cache_key)
        if cached is not None:
            logger.info("Summary cache hit for %s", cache_key)
            return {
                "lectureId": cache_key,
                "summary": cached.summary,
                "headings": cached.to_dict()["headings"],
                "fromCache": True,
                "paragraphCount": len(lecture.paragraphs) if lecture else 0,
            }

    if lecture is None:
        sample = runtime.lecture_ids()[: runtime.settings.not_found_sample_size]
        raise LectureNotFoundError(lecture_id, sample)

    entry = generate_summary(runtime, lecture)
    saved = runtime.summary_cache.put(lecture.id, entry)
    runtime.overview_cache.invalidate_for_lecture(lecture.id)
    if not saved:
        logger.error("Summary for %s created but not persisted", lecture.id)

    return {
        "lectureId": lecture.id,
        "summary": entry.summary,
        "headings": entry.to_dict()["headings"],
        "fromCache": False,
        "paragraphCount": len(lecture.paragraphs),
        "saved": saved,
    }
