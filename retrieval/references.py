"""
Turn citation tokens in generated prose into links back to their passages.

Token grammar (case-insensitive), optionally wrapped in parentheses:

   GA<3 digits><letter?>/<number>:<caret?><alphanumeric index>
   e.g. GA052/7:n5x6ru, (GA052/7:^n5x6ru)

A recognised token is replaced by

   <a href="#" class="ga-reference" data-id="GA052/7" data-index="^n5x6ru">GA052/7</a>

The index is dropped from the visible label. Tokens that cannot be resolved
are left exactly as written. Text that already contains such anchors is safe
to link again: matches inside an existing anchor are skipped.
"""

import html
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from retrieval.types import Passage

logger = logging.getLogger("lectures.references")

CITATION_RE = re.compile(r'\(?(GA\d{3}[a-z]?/\d+:\^?[a-z0-9]+)\)?', re.IGNORECASE)
_ANCHOR_RE = re.compile(r'<a\b[^>]*\bclass="ga-reference"[^>]*>.*?</a>', re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class CitationMatch:
   start: int
   end: int
   token: str

   @property
   def label(self) -> str:
      return self.token.split(':', 1)[0]


def _strip_caret(token: str) -> str:
   ident, _, index = token.partition(':')
   return f"{ident}:{index[1:]}" if index.startswith('^') else token


class ReferenceIndex:
   """
   Lookup from "ID:index" to passage.

   Each passage is registered under its raw index and, when the index starts
   with a caret, under the caret-less form too.
   """

   def __init__(self, passages: Iterable[Passage]):
      self._exact: Dict[str, Passage] = {}
      self._lower: Dict[str, Passage] = {}
      for p in passages:
         if not p.id or not p.index:
            continue
         ref = f"{p.id}:{p.index}"
         for key in (ref, _strip_caret(ref)):
            self._exact.setdefault(key, p)
            self._lower.setdefault(key.lower(), p)

      self._strategies: List[Callable[[str], Optional[Passage]]] = [
         lambda t: self._exact.get(t),
         lambda t: self._exact.get(_strip_caret(t)),
         lambda t: self._lower.get(t.lower()),
         lambda t: self._lower.get(_strip_caret(t).lower()),
      ]

   def __len__(self) -> int:
      return len(self._exact)

   def resolve(self, token: str) -> Optional[Passage]:
      for strategy in self._strategies:
         found = strategy(token)
         if found is not None:
            return found
      return None


def find_citations(text: str) -> List[CitationMatch]:
   """All citation matches left to right, excluding those inside existing anchors."""
   anchors: List[Tuple[int, int]] = [m.span() for m in _ANCHOR_RE.finditer(text)]
   found: List[CitationMatch] = []
   for m in CITATION_RE.finditer(text):
      if any(a_start < m.end() and m.start() < a_end for a_start, a_end in anchors):
         continue
      found.append(CitationMatch(start=m.start(), end=m.end(), token=m.group(1)))
   return found


def render_link(passage: Passage, label: str) -> str:
   return (
      f'<a href="#" class="ga-reference" '
      f'data-id="{html.escape(passage.id, quote=True)}" '
      f'data-index="{html.escape(passage.index, quote=True)}">{html.escape(label)}</a>'
   )


def link_references(text: str, passages: Iterable[Passage]) -> str:
   """
   Replace every resolvable citation token in text with a passage link.

   Replacements are applied from the last match to the first so the offsets
   of the remaining matches stay valid.
   """
   index = ReferenceIndex(passages)
   matches = find_citations(text)

   out = text
   linked = 0
   for match in sorted(matches, key=lambda m: m.start, reverse=True):
      passage = index.resolve(match.token)
      if passage is None:
         logger.warning("No passage for citation %s", match.token)
         continue
      out = out[:match.start] + render_link(passage, match.label) + out[match.end:]
      linked += 1

   logger.info("Linked %d of %d citations (%d references known)", linked, len(matches), len(index))
   return out
