"""
Query expansion through a concept -> surface-form table.

Matching is deliberately coarse and bidirectional: a concept is pulled in when
one of its surface forms occurs inside the query or the query occurs inside one
of its surface forms. Callers that need precision must narrow the table first.
"""

from typing import Any, Dict, List, Mapping, Optional, Set

SynonymTable = Mapping[str, List[str]]

DEFAULT_SYNONYMS: Dict[str, List[str]] = {
   "kant": ["kant", "kants", "kantisch", "kantische", "kantischen", "immanuel kant",
            "kategorischer imperativ", "ding an sich"],
   "erkenntnistheorie": ["erkenntnistheorie", "epistemologie", "erkenntnis", "erkenntnislehre"],
   "bewusstsein": ["bewusstsein", "bewußtsein", "seelenleben", "geistesleben", "seele"],
   "philosophie": ["philosophie", "weltanschauung", "denken", "gedanke", "philosophisch"],
   "anthroposophie": ["anthroposophie", "geisteswissenschaft", "übersinnlich", "geistige welt"],
   "ätherleib": ["ätherleib", "lebensleib", "bildekräfteleib", "ätherischer leib", "aetherleib"],
   "astralleib": ["astralleib", "empfindungsleib", "seelenleib", "astraler leib"],
   "ich": ["ich", "ich-organisation", "geist-selbst", "ich-wesenheit"],
}


def validate_table(data: Any) -> Optional[Dict[str, List[str]]]:
   """
   Return data as a synonym table if it has the right shape, else None.

   A table is a mapping of concept name to a list of strings. Anything else is
   rejected as a whole; partial tables are never patched with defaults.
   """
   if not isinstance(data, dict):
      return None
   table: Dict[str, List[str]] = {}
   for concept, forms in data.items():
      if not isinstance(concept, str) or not isinstance(forms, list):
         return None
      if not all(isinstance(f, str) for f in forms):
         return None
      table[concept] = list(forms)
   return table


def expand_query(query: str, table: SynonymTable) -> Set[str]:
   """
   Expand a raw query into lowercase surface forms.

   The lowercased query itself is always part of the result.
   """
   query_lower = query.lower()
   expanded = {query_lower}

   for forms in table.values():
      lowered = [f.lower() for f in forms]
      if any(f in query_lower or query_lower in f for f in lowered):
         expanded.update(lowered)

   return expanded
