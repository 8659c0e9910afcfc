"""
Weighted substring scoring and keyword search.

score = content_hits * 1 + title_hits * 3 + id_hits * 5

Hits are overlapping substring occurrences: "aa" occurs twice in "aaa".
"""

import logging
from typing import Iterable, List, Sequence, Tuple

from retrieval.synonyms import SynonymTable, expand_query
from retrieval.types import Passage, SearchResult

logger = logging.getLogger("lectures.search")

CONTENT_WEIGHT = 1
TITLE_WEIGHT = 3
ID_WEIGHT = 5


def count_overlapping(haystack: str, needle: str) -> int:
   """Count occurrences of needle, advancing one character after each hit."""
   if not needle:
      return 0
   count = 0
   pos = haystack.find(needle)
   while pos != -1:
      count += 1
      pos = haystack.find(needle, pos + 1)
   return count


def score_passage(passage: Passage, terms: Iterable[str]) -> Tuple[int, List[str]]:
   """
   Score one passage against a set of surface forms.

   Returns (score, matched_terms); a term is matched when it occurs at least
   once in any of the three fields.
   """
   content = passage.content.lower()
   title = passage.title.lower()
   ident = passage.id.lower()

   score = 0
   matched: List[str] = []
   for term in terms:
      t = term.lower()
      c = count_overlapping(content, t)
      ti = count_overlapping(title, t)
      i = count_overlapping(ident, t)
      if c or ti or i:
         score += c * CONTENT_WEIGHT + ti * TITLE_WEIGHT + i * ID_WEIGHT
         matched.append(term)
   return score, matched


def keyword_search(
   query: str,
   passages: Sequence[Passage],
   synonyms: SynonymTable,
) -> List[SearchResult]:
   """
   Expand the query and rank every passage with a positive score.

   sorted() is stable, so equal scores keep corpus order.
   """
   terms = sorted(expand_query(query, synonyms))
   logger.debug("Keyword search terms: %s", " | ".join(terms[:5]))

   results: List[SearchResult] = []
   for passage in passages:
      score, matched = score_passage(passage, terms)
      if score > 0:
         results.append(SearchResult(passage=passage, keyword_score=score, matched_terms=matched))

   results.sort(key=lambda r: r.keyword_score, reverse=True)
   logger.debug("Keyword search for %r: %d hits", query, len(results))
   return results
