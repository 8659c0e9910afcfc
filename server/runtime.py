from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from retrieval.types import Lecture, Passage, volume_of
from server.config import Settings
from server.corpus import load_lectures, load_passages, load_synonyms
from server.services.llm.provider import LLMProvider, get_provider
from server.services.summary_cache import OverviewCache, SummaryCache
from server.storage import JsonStore

logger = logging.getLogger("lectures.runtime")


class Runtime:
   """
   Process-wide service state, built once at startup.

   - passages, lectures, synonyms: loaded once, read-only afterwards
   - summary and overview caches: the only mutable state (last write wins)
   - provider: text generator, or None when no key is configured
   """

   def __init__(
      self,
      settings: Settings,
      passages: Sequence[Passage],
      lectures: Mapping[str, Lecture],
      synonyms: Mapping[str, List[str]],
      summary_cache: SummaryCache,
      overview_cache: OverviewCache,
      provider: Optional[LLMProvider] = None,
   ):
      self.settings = settings
      self.passages: Tuple[Passage, ...] = tuple(passages)
      self.lectures: Mapping[str, Lecture] = MappingProxyType(dict(lectures))
      self.synonyms: Mapping[str, List[str]] = MappingProxyType(dict(synonyms))
      self.summary_cache = summary_cache
      self.overview_cache = overview_cache
      self.provider = provider

      self._lecture_keys: Dict[str, str] = {k.lower(): k for k in self.lectures}

   # ----------------------------
   # Lecture lookup
   # ----------------------------
   def find_lecture(self, lecture_id: str) -> Optional[Lecture]:
      """Case-insensitive lookup; stored IDs keep their original case."""
      if lecture_id in self.lectures:
         return self.lectures[lecture_id]
      key = self._lecture_keys.get(lecture_id.lower())
      return self.lectures[key] if key is not None else None

   def lecture_ids(self) -> List[str]:
      return list(self.lectures)

   def lectures_in_volume(self, volume_id: str) -> List[Lecture]:
      wanted = volume_id.lower()
      return [lec for lec in self.lectures.values() if volume_of(lec.id).lower() == wanted]

   def volume_ids(self) -> List[str]:
      seen: Dict[str, str] = {}
      for lecture_id in self.lectures:
         vol = volume_of(lecture_id)
         seen.setdefault(vol.lower(), vol)
      return list(seen.values())

   def status(self) -> Dict[str, object]:
      return {
         "passagesLoaded": len(self.passages),
         "lecturesLoaded": len(self.lectures),
         "synonymGroups": len(self.synonyms),
         "summariesCached": len(self.summary_cache),
         "overviewsCached": len(self.overview_cache),
         "llmConfigured": self.provider is not None,
      }


def build_runtime(settings: Settings, provider: Optional[LLMProvider] = None) -> Runtime:
   """
   Load everything the server serves from settings.data_dir.

   Raises CorpusLoadError when the passages cannot be loaded; every other
   source degrades (no lectures, default synonyms, empty caches).
   """
   store = JsonStore(settings.data_dir)
   passages = load_passages(settings.data_dir)
   synonyms = load_synonyms(store, settings.synonyms_file)
   lectures = load_lectures(settings.data_dir)
   summary_cache = SummaryCache(store, settings.summary_cache_file).load()
   overview_cache = OverviewCache(store, settings.overview_cache_file).load()
   if provider is None:
      provider = get_provider(settings)

   runtime = Runtime(
      settings=settings,
      passages=passages,
      lectures=lectures,
      synonyms=synonyms,
      summary_cache=summary_cache,
      overview_cache=overview_cache,
      provider=provider,
   )
   logger.info(
      "Runtime ready: %d passages, %d lectures, %d synonym groups, %d cached summaries, llm=%s",
      len(runtime.passages), len(runtime.lectures), len(runtime.synonyms),
      len(summary_cache), provider.name if provider else "off",
   )
   return runtime
