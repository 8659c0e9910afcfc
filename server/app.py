"""FastAPI application -- routes for the lecture search service."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from server.__version__ import __version__
from server.dependencies import get_runtime, get_settings
from server.runtime import Runtime, build_runtime
from server.schemas import (
    FullTextRequest,
    FullTextResponse,
    HybridSearchRequest,
    HybridSearchResponse,
    LectureListResponse,
    LectureResponse,
    OverviewResponse,
    StatusResponse,
    SummarizeRequest,
    SummaryResponse,
    ThematicSearchRequest,
    ThematicSearchResponse,
)
from server.services import lecture_service, overview_service, search_service, summary_service
from server.services.lecture_service import LectureNotFoundError, VolumeNotFoundError

logger = logging.getLogger("lectures")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the corpus before serving. A passage load failure aborts startup."""
    settings = get_settings()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ts = datetime.now(timezone.utc).isoformat()
    logger.info("[%s] Startup: loading corpus from %s", ts, settings.data_dir)
    app.state.runtime = build_runtime(settings)
    logger.info("Serving %d passages, %d lectures", len(app.state.runtime.passages), len(app.state.runtime.lectures))
    yield
    logger.info("[%s] Shutdown: complete", datetime.now(timezone.utc).isoformat())


app = FastAPI(title="Lecture Search", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _not_found(e):
    return JSONResponse(status_code=404, content={"error": str(e), "available": e.available})


# ---- Health (no dependencies, always fast) ----

@app.get("/health")
def health():
    return {"ok": True}


@app.get("/debug/status", response_model=StatusResponse)
def debug_status(runtime: Runtime = Depends(get_runtime)):
    return {"server": "lecture-search", "status": "running", **runtime.status()}


# ---- Search ----

@app.post("/api/hybrid-search", response_model=HybridSearchResponse)
def hybrid_search(body: HybridSearchRequest, runtime: Runtime = Depends(get_runtime)):
    try:
        return search_service.hybrid_search(runtime, body.query, body.limit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/thematic-hybrid-search", response_model=ThematicSearchResponse)
def thematic_hybrid_search(body: ThematicSearchRequest, runtime: Runtime = Depends(get_runtime)):
    try:
        return search_service.thematic_analysis(runtime, body.query, depth=body.depth, limit=body.limit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/fulltext-search", response_model=FullTextResponse)
def fulltext_search(body: FullTextRequest, runtime: Runtime = Depends(get_runtime)):
    try:
        return search_service.fulltext(runtime, body.word1, body.word2, body.proximity)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ---- Summaries ----

@app.post("/api/summarize-lecture", response_model=SummaryResponse, response_model_exclude_none=True)
def summarize_lecture(body: SummarizeRequest, runtime: Runtime = Depends(get_runtime)):
    try:
        return summary_service.summarize_lecture(
            runtime, body.lecture_id, force_regenerate=body.force_regenerate,
        )
    except LectureNotFoundError as e:
        return _not_found(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Summary failed for %s", body.lecture_id)
        raise HTTPException(status_code=500, detail="Summary generation failed")


# ---- Lectures ----

@app.get("/api/full-lecture/{ga_number}/{lecture_num}", response_model=LectureResponse)
def full_lecture_by_number(ga_number: str, lecture_num: str, runtime: Runtime = Depends(get_runtime)):
    try:
        return lecture_service.get_lecture_by_number(runtime, ga_number, lecture_num)
    except LectureNotFoundError as e:
        return _not_found(e)


@app.get("/api/full-lecture/{lecture_id}", response_model=LectureResponse)
def full_lecture(lecture_id: str, runtime: Runtime = Depends(get_runtime)):
    try:
        return lecture_service.get_lecture(runtime, lecture_id)
    except LectureNotFoundError as e:
        return _not_found(e)


@app.get("/api/lectures/list", response_model=LectureListResponse)
def lectures_list(runtime: Runtime = Depends(get_runtime)):
    return lecture_service.list_lectures(runtime)


@app.get("/api/ga-overview/{ga_number}", response_model=OverviewResponse)
def ga_overview(ga_number: str, refresh: bool = False, runtime: Runtime = Depends(get_runtime)):
    try:
        return overview_service.get_overview(runtime, ga_number, refresh=refresh)
    except VolumeNotFoundError as e:
        return _not_found(e)
