"""
Semantic re-ranking of keyword hits.

final = (keyword_score + proximity_bonus + vocabulary_bonus) * (1 - length_penalty)

   proximity_bonus:  for every ordered pair of distinct query words found in
                     the content, max(0, 10 - d/10) when d < 100, d being the
                     distance between their first occurrences
   vocabulary_bonus: +2 per domain term present in the content
   length_penalty:   min(|len - 500| / 500, 0.5)
"""

from typing import List, Sequence

from retrieval.types import SearchResult

DOMAIN_TERMS = (
   'erkenntnis', 'wahrheit', 'wirklichkeit', 'geist', 'seele',
   'bewusstsein', 'denken', 'anschauung', 'begriff',
)
DOMAIN_TERM_BONUS = 2

PROXIMITY_WINDOW = 100
MAX_PROXIMITY_BONUS = 10

IDEAL_LENGTH = 500
MAX_LENGTH_PENALTY = 0.5


def query_words(query: str) -> List[str]:
   return [w for w in query.lower().split() if len(w) > 2]


def proximity_bonus(content: str, words: Sequence[str]) -> float:
   positions = [(w, content.find(w)) for w in words]
   bonus = 0.0
   for word, pos in positions:
      if pos == -1:
         continue
      for other, other_pos in positions:
         if other == word or other_pos == -1:
            continue
         distance = abs(pos - other_pos)
         if distance < PROXIMITY_WINDOW:
            bonus += max(0.0, MAX_PROXIMITY_BONUS - distance / 10)
   return bonus


def vocabulary_bonus(content: str) -> int:
   return sum(DOMAIN_TERM_BONUS for term in DOMAIN_TERMS if term in content)


def length_penalty(length: int) -> float:
   return min(abs(length - IDEAL_LENGTH) / IDEAL_LENGTH, MAX_LENGTH_PENALTY)


def semantic_rerank(results: Sequence[SearchResult], query: str) -> List[SearchResult]:
   """
   Set semantic_score/final_score on every result and sort by final_score.

   keyword_score is left untouched.
   """
   words = query_words(query)
   for result in results:
      content = result.passage.content.lower()
      score = float(result.keyword_score)
      score += proximity_bonus(content, words)
      score += vocabulary_bonus(content)
      score *= 1 - length_penalty(len(content))
      result.semantic_score = score
      result.final_score = score

   return sorted(results, key=lambda r: r.final_score, reverse=True)
