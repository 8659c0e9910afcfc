"""
Thematic search: split a question into salient terms and merge per-term hits.

A passage found by several terms keeps the full score of the first term that
surfaced it; every later term adds half of its own score.
"""

import logging
import re
from typing import Dict, List, Sequence, Tuple

from retrieval.keyword import keyword_search
from retrieval.synonyms import SynonymTable
from retrieval.types import Passage, SearchResult

logger = logging.getLogger("lectures.search")

STOPWORDS = frozenset([
   'wie', 'ist', 'das', 'verhältnis', 'von', 'und', 'der', 'die', 'des',
   'den', 'dem', 'ein', 'eine', 'einem', 'einen', 'was', 'welche', 'welcher',
   'zwischen', 'bei', 'nach', 'für', 'mit', 'aus', 'über', 'sich', 'zur',
])

REPEAT_WEIGHT = 0.5
MIN_TERM_LENGTH = 4

_PUNCT_RE = re.compile(r'[.,;:!?]')


def extract_key_terms(query: str) -> List[str]:
   """Lowercase, drop punctuation, keep words longer than 3 chars that are not stopwords."""
   words = _PUNCT_RE.sub(' ', query.lower()).split()
   return [w for w in words if len(w) >= MIN_TERM_LENGTH and w not in STOPWORDS]


def thematic_search(
   query: str,
   passages: Sequence[Passage],
   synonyms: SynonymTable,
) -> List[SearchResult]:
   terms = extract_key_terms(query)
   logger.debug("Key terms from %r: %s", query, terms)

   if not terms:
      logger.info("No key terms in %r, searching whole query", query)
      return keyword_search(query, passages, synonyms)

   merged: Dict[Tuple[str, str], SearchResult] = {}
   for term in terms:
      for result in keyword_search(term, passages, synonyms):
         existing = merged.get(result.key)
         if existing is None:
            merged[result.key] = SearchResult(
               passage=result.passage,
               keyword_score=result.keyword_score,
               matched_terms=list(result.matched_terms),
            )
            continue
         existing.keyword_score += result.keyword_score * REPEAT_WEIGHT
         for t in result.matched_terms:
            if t not in existing.matched_terms:
               existing.matched_terms.append(t)

   # corpus order first, so the stable sort leaves equal scores in corpus order
   in_corpus_order: List[SearchResult] = []
   for p in passages:
      result = merged.pop(p.key, None)
      if result is not None:
         in_corpus_order.append(result)
   results = sorted(in_corpus_order, key=lambda r: r.keyword_score, reverse=True)
   logger.info("Thematic search: %d hits for %d terms", len(results), len(terms))
   return results
