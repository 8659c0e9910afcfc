"""Deterministic texts used when no model is configured or the model fails."""

from typing import Sequence

from retrieval.types import Lecture, SearchResult
from server.services.summary_cache import SummaryEntry

PREVIEW_CHARS = 250
FALLBACK_SOURCES = 10


def fallback_analysis(query: str, results: Sequence[SearchResult]) -> str:
    top = results[:FALLBACK_SOURCES]
    parts = [f'# Analyse zu: "{query}"\n\nBasierend auf {len(results)} Textstellen:\n\n']
    for i, r in enumerate(top, 1):
        title = r.passage.file_name or r.passage.id
        preview = r.passage.content[:PREVIEW_CHARS]
        parts.append(f'## {i}. {title}\n\n"{preview}..."\n\n')
    parts.append("**Quellen**: " + ", ".join(r.passage.file_name or r.passage.id for r in top))
    return "".join(parts)


def fallback_summary(lecture: Lecture) -> SummaryEntry:
    return SummaryEntry(
        summary=(
            "Automatische Zusammenfassung nicht verfügbar (kein KI-Dienst erreichbar). "
            f'Der Vortrag "{lecture.display_title}" enthält {len(lecture.paragraphs)} Absätze.'
        ),
        headings=[],
    )
