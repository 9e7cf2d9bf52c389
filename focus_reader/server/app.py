"""FastAPI application exposing structuring, timelines and exports.

WHY: A web or mobile reader front end needs to hand raw text to the
structurer and get back word units, sections and a pacing schedule it
can play locally. FastAPI gives request validation and OpenAPI docs
for free.

HOW: POST /documents structures the text synchronously (in FastAPI's
threadpool) and caches the result in an in-memory DocumentStore. The
other endpoints read from that cache. A lifespan task expires idle
documents every 5 minutes.

RULES:
- StructuringError → 422 with reason, word_count and limit
- Unknown document id → 404; unknown format → 404
- Full store → 503
- wpm query parameters are clamped into the pacing bounds
- The document store is a module-level singleton, like the app
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Annotated, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response

from focus_reader import __version__
from focus_reader.config import PacingConfig, configure_logging
from focus_reader.core.assembler import DEFAULT_TITLE, structure
from focus_reader.core.ir import DocumentStructure
from focus_reader.errors import StructuringError
from focus_reader.formatters import FORMATTERS
from focus_reader.formatters.base import BaseFormatter
from focus_reader.formatters.timeline import TimelineFormatter
from focus_reader.playback.engine import compute_word_timing
from focus_reader.server.models import (
    DocumentCreateRequest,
    DocumentResponse,
    DocumentSummary,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    StructuringErrorResponse,
    TimelineEntry,
    TimelineResponse,
)
from focus_reader.server.store import DocumentStore

logger = logging.getLogger(__name__)

CLEANUP_INTERVAL_SECONDS = 300

# ---------------------------------------------------------------------------
# App and store setup
# ---------------------------------------------------------------------------

document_store = DocumentStore()
pacing_config = PacingConfig()


async def _periodic_cleanup() -> None:
    """Expire idle documents every 5 minutes."""
    while True:
        await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
        document_store.cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start periodic cleanup on startup, cancel on shutdown."""
    task = asyncio.create_task(_periodic_cleanup())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


app = FastAPI(
    lifespan=lifespan,
    title="Focus Reader API",
    description=(
        "Structure plain text for rapid serial visual presentation: cleaned "
        "words with optimal recognition points, detected sections, and the "
        "pacing schedule a reader front end plays back one word at a time."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_document_or_404(document_id: str) -> DocumentStructure:
    document = document_store.get_document(document_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found: {}".format(document_id))
    return document


def _make_formatter(key: str, wpm: Optional[int]) -> BaseFormatter:
    if key == "timeline":
        return TimelineFormatter(wpm=wpm, config=pacing_config)
    return FORMATTERS[key]()


def _summary(document: DocumentStructure) -> DocumentSummary:
    payload = document.to_dict()
    return DocumentSummary(
        id=payload["id"],
        title=payload["title"],
        total_words=payload["total_words"],
        created_at=payload["created_at"],
        sections=payload["sections"],
    )


# ---------------------------------------------------------------------------
# Endpoints: Documents
# ---------------------------------------------------------------------------


@app.post(
    "/documents",
    response_model=DocumentSummary,
    status_code=201,
    tags=["documents"],
    summary="Structure a text for reading",
    description=(
        "Clean the text, detect sections and tokenize it into word units. "
        "The structured document is cached; use its id in later requests."
    ),
    responses={
        422: {"model": StructuringErrorResponse, "description": "Text is empty, too short or too long"},
        503: {"model": ErrorResponse, "description": "Document cache is full"},
    },
)
def create_document(request: DocumentCreateRequest) -> DocumentSummary:
    try:
        document = structure(request.text, request.title or DEFAULT_TITLE)
    except StructuringError as exc:
        raise HTTPException(status_code=422, detail={
            "message": str(exc),
            "reason": exc.reason,
            "word_count": exc.word_count,
            "limit": exc.limit,
        })

    try:
        document_store.add_document(document)
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc))

    return _summary(document)


@app.get(
    "/documents/{document_id}",
    response_model=DocumentResponse,
    tags=["documents"],
    summary="Get a structured document",
    description="Returns every word unit and section of a cached document.",
    responses={404: {"model": ErrorResponse, "description": "Document not found"}},
)
async def get_document(document_id: str) -> DocumentResponse:
    document = _get_document_or_404(document_id)
    return DocumentResponse(**document.to_dict())


@app.get(
    "/documents/{document_id}/timeline",
    response_model=TimelineResponse,
    tags=["documents"],
    summary="Get the playback schedule",
    description=(
        "Computes when each word appears, how long it stays, and the pause "
        "after it, for an uninterrupted session at the given speed."
    ),
    responses={404: {"model": ErrorResponse, "description": "Document not found"}},
)
async def get_timeline(
    document_id: str,
    wpm: Annotated[
        Optional[int],
        Query(gt=0, description="Reading speed in words per minute; clamped to the allowed range."),
    ] = None,
) -> TimelineResponse:
    document = _get_document_or_404(document_id)
    speed = pacing_config.clamp_speed(pacing_config.base_speed_wpm if wpm is None else wpm)

    entries: List[TimelineEntry] = []
    cursor = 0.0
    for i in range(document.total_words):
        timing = compute_word_timing(document, i, speed, pacing_config)
        entries.append(TimelineEntry(
            index=i,
            word=timing.word.text,
            orp=timing.word.orp,
            start_ms=cursor,
            duration_ms=timing.duration_ms,
            pause_after_ms=timing.pause_after_ms,
            section_index=document.section_index_at(i),
        ))
        cursor += timing.total_ms

    return TimelineResponse(
        document_id=document.id,
        wpm=speed,
        total_duration_ms=cursor,
        entries=entries,
    )


@app.get(
    "/documents/{document_id}/files/{format_key}",
    tags=["documents"],
    summary="Export a document in one format",
    description="Runs one registered formatter on the cached document and returns the file.",
    responses={404: {"model": ErrorResponse, "description": "Document or format not found"}},
)
async def export_document(
    document_id: str,
    format_key: str,
    wpm: Annotated[
        Optional[int],
        Query(gt=0, description="Reading speed for the timeline format."),
    ] = None,
) -> Response:
    if format_key not in FORMATTERS:
        available = ", ".join(sorted(FORMATTERS.keys()))
        raise HTTPException(
            status_code=404,
            detail="Unknown format '{}'. Available: {}".format(format_key, available),
        )
    document = _get_document_or_404(document_id)

    output = _make_formatter(format_key, wpm).format(document)[0]
    filename = "{}{}".format(document.id, output.suffix)
    return Response(
        content=output.content,
        media_type=output.media_type,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


@app.delete(
    "/documents/{document_id}",
    status_code=204,
    tags=["documents"],
    summary="Remove a document from the cache",
    responses={404: {"model": ErrorResponse, "description": "Document not found"}},
)
async def delete_document(document_id: str) -> Response:
    if not document_store.delete_document(document_id):
        raise HTTPException(status_code=404, detail="Document not found: {}".format(document_id))
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: Formats and health
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available export formats",
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(key=key, name=formatter.name, suffix=formatter.suffix))
    return result


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, documents=len(document_store))


def run_api() -> None:
    """Entry point for the focus-reader-api console script."""
    import uvicorn

    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
