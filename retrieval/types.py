"""
Corpus records and search results.

Passages and lectures are loaded once from JSON and never mutated. Field names
of the source records (ID, index, fileName, ...) are kept on the way out so the
API emits the same shape it was fed.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


def _text(value: Any) -> str:
   return value if isinstance(value, str) else ''


@dataclass(frozen=True)
class Passage:
   """A short indexed excerpt of a lecture (a "chunk")."""
   id: str
   index: str
   content: str = ''
   title: str = ''
   file_name: str = ''
   extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

   _KNOWN = ('ID', 'index', 'content', 'title', 'fileName')

   @property
   def key(self) -> Tuple[str, str]:
      return (self.id, self.index)

   @classmethod
   def from_dict(cls, data: Dict[str, Any]) -> 'Passage':
      index = data.get('index')
      return cls(
         id=_text(data.get('ID')),
         index=index if isinstance(index, str) else ('' if index is None else str(index)),
         content=_text(data.get('content')),
         title=_text(data.get('title')),
         file_name=_text(data.get('fileName')),
         extra={k: v for k, v in data.items() if k not in cls._KNOWN},
      )

   def to_dict(self) -> Dict[str, Any]:
      d = dict(self.extra)
      d.update({
         'ID': self.id,
         'index': self.index,
         'title': self.title,
         'fileName': self.file_name,
         'content': self.content,
      })
      return d


@dataclass(frozen=True)
class Paragraph:
   index: str
   content: str

   @classmethod
   def from_dict(cls, data: Dict[str, Any]) -> 'Paragraph':
      # Some exports use "text" instead of "content".
      content = data.get('content') or data.get('text') or ''
      index = data.get('index')
      return cls(
         index=index if isinstance(index, str) else ('' if index is None else str(index)),
         content=content if isinstance(content, str) else str(content),
      )


@dataclass(frozen=True)
class Lecture:
   """
   A full transcribed talk.

   Paragraph order defines adjacency for proximity search and must be kept.
   """
   id: str
   paragraphs: Tuple[Paragraph, ...] = ()
   title: str = ''
   file_name: str = ''
   location: str = ''
   date: str = ''
   ga_number: str = ''
   ga_title: str = ''
   lecture_number: Optional[Any] = None
   raw: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

   @classmethod
   def from_dict(cls, data: Dict[str, Any]) -> 'Lecture':
      paragraphs = tuple(
         Paragraph.from_dict(p) for p in (data.get('paragraphs') or []) if isinstance(p, dict)
      )
      return cls(
         id=_text(data.get('ID')),
         paragraphs=paragraphs,
         title=_text(data.get('title')),
         file_name=_text(data.get('fileName')),
         location=_text(data.get('location')),
         date=_text(data.get('date')),
         ga_number=str(data.get('gaNumber') or ''),
         ga_title=_text(data.get('gaTitle')),
         lecture_number=data.get('lectureNumber'),
         raw=dict(data),
      )

   @property
   def volume_id(self) -> str:
      return volume_of(self.id)

   @property
   def display_title(self) -> str:
      return self.file_name or self.title or self.id

   def to_dict(self) -> Dict[str, Any]:
      """The lecture as loaded, paragraphs included."""
      return dict(self.raw)


def volume_of(lecture_id: str) -> str:
   """'GA052/7' -> 'GA052'."""
   return lecture_id.split('/', 1)[0]


@dataclass
class SearchResult:
   """
   A passage with its scores for one request.

   keyword_score starts as the lexical score and is only ever added to
   (thematic merge); semantic_score/final_score are set by the re-ranker.
   """
   passage: Passage
   keyword_score: float
   matched_terms: List[str] = field(default_factory=list)
   semantic_score: Optional[float] = None
   final_score: Optional[float] = None

   @property
   def key(self) -> Tuple[str, str]:
      return self.passage.key

   @property
   def similarity(self) -> float:
      return self.keyword_score / 10

   def to_dict(self) -> Dict[str, Any]:
      d = self.passage.to_dict()
      d['keywordScore'] = self.keyword_score
      d['matchedTerms'] = list(self.matched_terms)
      d['similarity'] = self.similarity
      if self.semantic_score is not None:
         d['semanticScore'] = self.semantic_score
      if self.final_score is not None:
         d['finalScore'] = self.final_score
      return d


@dataclass
class FullTextMatch:
   lecture: Lecture
   paragraph_index: int
   has_word1: bool
   has_word2: bool

   @property
   def paragraph(self) -> Paragraph:
      return self.lecture.paragraphs[self.paragraph_index]

   def to_dict(self) -> Dict[str, Any]:
      return {
         'ID': self.lecture.id,
         'title': self.lecture.title,
         'fileName': self.lecture.file_name,
         'location': self.lecture.location,
         'date': self.lecture.date,
         'paragraphIndex': self.paragraph_index,
         'index': self.paragraph.index,
         'content': self.paragraph.content,
         'hasWord1': self.has_word1,
         'hasWord2': self.has_word2,
      }
