"""
Literal full-text search over lecture paragraphs, with optional proximity.

Selection per paragraph:
   word2 missing            -> paragraph contains word1
   word2, no max_distance   -> paragraph contains word1 or word2
   word2 and max_distance   -> both words in the paragraph, or one word here
                               and the other within +-max_distance paragraphs
                               (first such neighbour in index order; origin and
                               neighbour are both emitted)

A paragraph is emitted at most once across the whole scan.
"""

import logging
from typing import Iterable, List, Optional, Set, Tuple

from retrieval.types import FullTextMatch, Lecture

logger = logging.getLogger("lectures.search")


def _first_neighbour(texts: List[str], origin: int, word: str, max_distance: int) -> Optional[int]:
   lo = max(0, origin - max_distance)
   hi = min(len(texts) - 1, origin + max_distance)
   for i in range(lo, hi + 1):
      if i != origin and word in texts[i]:
         return i
   return None


def _select(texts: List[str], pos: int, word1: str, word2: Optional[str], max_distance: Optional[int]) -> List[int]:
   text = texts[pos]
   has1 = word1 in text
   has2 = word2 is not None and word2 in text

   if word2 is None:
      return [pos] if has1 else []
   if max_distance is None:
      return [pos] if has1 or has2 else []
   if has1 and has2:
      return [pos]
   if has1:
      other = _first_neighbour(texts, pos, word2, max_distance)
   elif has2:
      other = _first_neighbour(texts, pos, word1, max_distance)
   else:
      return []
   return [] if other is None else [pos, other]


def fulltext_search(
   lectures: Iterable[Lecture],
   word1: str,
   word2: Optional[str] = None,
   max_distance: Optional[int] = None,
) -> List[FullTextMatch]:
   """
   Case-insensitive substring search across every lecture's paragraph sequence.

   max_distance=None disables proximity; 0 restricts to same-paragraph hits.
   """
   if not word1:
      raise ValueError("word1 is required")
   if max_distance is not None and max_distance < 0:
      raise ValueError("max_distance must be >= 0")

   w1 = word1.lower()
   w2 = word2.lower() if word2 else None

   seen: Set[Tuple[str, int]] = set()
   matches: List[FullTextMatch] = []
   for lecture in lectures:
      texts = [p.content.lower() for p in lecture.paragraphs]
      for pos in range(len(texts)):
         for idx in _select(texts, pos, w1, w2, max_distance):
            key = (lecture.id, idx)
            if key in seen:
               continue
            seen.add(key)
            matches.append(FullTextMatch(
               lecture=lecture,
               paragraph_index=idx,
               has_word1=w1 in texts[idx],
               has_word2=w2 is not None and w2 in texts[idx],
            ))

   logger.info("Full-text search %r/%r (distance %s): %d paragraphs", word1, word2, max_distance, len(matches))
   return matches
