"""Pydantic request/response schemas for the lecture search API."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


# ---- Search ----

class HybridSearchRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=2000)
    limit: int = Field(default=20, ge=1, le=500)


class HybridSearchResponse(BaseModel):
    query: str
    results: List[Dict[str, Any]]
    resultCount: int
    totalMatches: int
    searchMethod: str
    message: Optional[str] = None


class ThematicSearchRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=2000)
    depth: str = "allgemein"
    limit: int = Field(default=30, ge=1, le=500)


class SourceInfo(BaseModel):
    ID: str
    index: str
    title: str = ""
    fileName: str = ""
    score: int
    matchedTerms: List[str]


class ThematicSearchResponse(BaseModel):
    query: str
    content: str
    sources: List[SourceInfo]
    searchMethod: Optional[str] = None
    totalMatches: int = 0
    llmUsed: bool = False


class FullTextRequest(BaseModel):
    word1: str = Field(..., min_length=1, max_length=200)
    word2: Optional[str] = Field(default=None, max_length=200)
    proximity: Optional[int] = Field(default=None, ge=0)


class FullTextResponse(BaseModel):
    query: Dict[str, Any]
    results: List[Dict[str, Any]]
    resultCount: int


# ---- Summaries ----

class SummarizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lecture_id: str = Field(..., min_length=1, alias="lectureId")
    force_regenerate: bool = Field(default=False, alias="forceRegenerate")


class HeadingSchema(BaseModel):
    index: str
    text: str
    level: str


class SummaryResponse(BaseModel):
    lectureId: str
    summary: str
    headings: List[HeadingSchema]
    fromCache: bool
    paragraphCount: int
    saved: Optional[bool] = None


# ---- Lectures ----

class LectureResponse(BaseModel):
    lecture: Dict[str, Any]
    paragraphCount: int
    hasIndices: bool


class LectureListResponse(BaseModel):
    count: int
    lectures: List[str]
    sample: Optional[Dict[str, Any]] = None


class OverviewLecture(BaseModel):
    ID: str
    title: str = ""
    fileName: str = ""
    lectureNumber: Optional[Any] = None
    date: str = ""
    location: str = ""
    summary: Optional[str] = None


class OverviewResponse(BaseModel):
    gaNumber: str
    gaTitle: str
    lectureCount: int
    summarizedCount: int
    lectures: List[OverviewLecture]
    fromCache: bool


# ---- Status ----

class StatusResponse(BaseModel):
    server: str
    status: str
    passagesLoaded: int
    lecturesLoaded: int
    synonymGroups: int
    summariesCached: int
    overviewsCached: int
    llmConfigured: bool
