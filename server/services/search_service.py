"""Search operations for the API layer: hybrid, thematic analysis, full text."""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from retrieval.fulltext import fulltext_search
from retrieval.keyword import keyword_search
from retrieval.references import link_references
from retrieval.rerank import semantic_rerank
from retrieval.thematic import thematic_search
from retrieval.types import SearchResult
from server.services.llm.fallback import fallback_analysis
from server.services.llm.prompts import analysis_max_tokens, analysis_prompt
from server.services.llm.provider import LLMError

logger = logging.getLogger("lectures.search")

NO_PASSAGES_FOUND = "Keine relevanten Textstellen gefunden."


def hybrid_search(runtime, query: str, limit: Optional[int] = None) -> Dict[str, Any]:
    """Keyword search over all passages, re-ranked, cut to limit."""
    if not query:
        raise ValueError("query is required")
    limit = limit or runtime.settings.hybrid_limit

    t0 = time.perf_counter()
    keyword_results = keyword_search(query, runtime.passages, runtime.synonyms)
    if not keyword_results:
        return {
            "query": query,
            "results": [],
            "resultCount": 0,
            "totalMatches": 0,
            "searchMethod": "hybrid-keyword",
            "message": "Keine Treffer gefunden",
        }

    top = semantic_rerank(keyword_results, query)[:limit]
    logger.info(
        "Hybrid search %r: %d keyword hits -> %d results (%d ms)",
        query, len(keyword_results), len(top), int((time.perf_counter() - t0) * 1000),
    )
    return {
        "query": query,
        "results": [r.to_dict() for r in top],
        "resultCount": len(top),
        "totalMatches": len(keyword_results),
        "searchMethod": "hybrid-keyword-semantic",
    }


def generate_analysis(runtime, query: str, results: List[SearchResult], depth: str) -> Tuple[str, bool]:
    """
    Analysis text for the ranked results. Returns (text, llm_used).

    Tried in order: model output with linked citations, then the template.
    """
    context = results[: runtime.settings.analysis_context_size]
    provider = runtime.provider
    if provider is not None:
        try:
            text = provider.generate(analysis_prompt(query, context, depth), analysis_max_tokens(depth))
            return link_references(text, [r.passage for r in context]), True
        except LLMError as e:
            logger.warning("Analysis generation failed (%s), using fallback", e)
    else:
        logger.info("No model configured, using fallback analysis")
    return fallback_analysis(query, results), False


def thematic_analysis(
    runtime,
    query: str,
    *,
    depth: str = "allgemein",
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Thematic search, re-ranking and an analysis with linked sources."""
    if not query:
        raise ValueError("query is required")
    limit = limit or runtime.settings.thematic_limit

    keyword_results = thematic_search(query, runtime.passages, runtime.synonyms)
    if not keyword_results:
        return {"query": query, "content": NO_PASSAGES_FOUND, "sources": []}

    top = semantic_rerank(keyword_results, query)[:limit]
    content, llm_used = generate_analysis(runtime, query, top, depth)

    sources = [
        {
            "ID": r.passage.id,
            "index": r.passage.index,
            "title": r.passage.title,
            "fileName": r.passage.file_name,
            "score": round(r.final_score or 0),
            "matchedTerms": list(r.matched_terms),
        }
        for r in top[: runtime.settings.sources_size]
    ]
    return {
        "query": query,
        "content": content,
        "sources": sources,
        "searchMethod": "hybrid-thematic-unified",
        "totalMatches": len(keyword_results),
        "llmUsed": llm_used,
    }


def fulltext(
    runtime,
    word1: str,
    word2: Optional[str] = None,
    proximity: Optional[int] = None,
) -> Dict[str, Any]:
    """Literal paragraph search across all full lectures."""
    if not word1:
        raise ValueError("word1 is required")
    matches = fulltext_search(runtime.lectures.values(), word1, word2 or None, proximity)
    return {
        "query": {"word1": word1, "word2": word2, "proximity": proximity},
        "results": [m.to_dict() for m in matches],
        "resultCount": len(matches),
    }
