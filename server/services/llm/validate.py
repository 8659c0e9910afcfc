"""Parse and validate model output for lecture summaries."""

import json
import re
from typing import Any, Tuple

from server.services.summary_cache import HEADING_LEVELS, Heading, SummaryEntry

_FENCE_RE = re.compile(r"```(?:json)?\n?")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def validate_summary_json(obj: Any) -> Tuple[bool, str]:
    """Returns (ok, reason)."""
    if not isinstance(obj, dict):
        return False, "not a dict"
    summary = obj.get("summary")
    if not summary or not isinstance(summary, str):
        return False, "missing summary"
    if not isinstance(obj.get("headings"), list):
        return False, "headings not a list"
    return True, ""


def _valid_heading(h: Any) -> bool:
    return (
        isinstance(h, dict)
        and isinstance(h.get("index"), str) and h["index"] != ""
        and isinstance(h.get("text"), str) and h["text"].strip() != ""
        and h.get("level") in HEADING_LEVELS
    )


def parse_summary_response(text: str) -> Tuple[SummaryEntry, bool]:
    """
    Turn raw model output into a SummaryEntry.

    Returns (entry, parsed). Output that is not the expected JSON still yields
    an entry: the raw text becomes the summary and there are no headings.
    Headings with an unknown level or without index/text are dropped.
    """
    cleaned = strip_code_fences(text)
    try:
        obj = json.loads(cleaned)
    except json.JSONDecodeError:
        return SummaryEntry(summary=cleaned, headings=[]), False

    ok, _ = validate_summary_json(obj)
    if not ok:
        return SummaryEntry(summary=cleaned, headings=[]), False

    headings = [Heading.from_dict(h) for h in obj["headings"] if _valid_heading(h)]
    return SummaryEntry(summary=obj["summary"].strip(), headings=headings), True
