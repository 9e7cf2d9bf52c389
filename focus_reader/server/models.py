"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: One request model for structuring, response models mirroring the
DocumentStructure IR, a timeline model built from compute_word_timing,
and the shared error/health/format models.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Field names match DocumentStructure.to_dict() keys exactly
- SectionKind is reused from the IR (single source of truth)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from focus_reader.core.ir import SectionKind


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class DocumentCreateRequest(BaseModel):
    """Raw text submitted for structuring."""

    text: str = Field(description="Plain UTF-8 text extracted from the source document.")
    title: Optional[str] = Field(
        default=None,
        description="Document title. Defaults to 'Untitled Document'.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "title": "Study notes",
                "text": "INTRODUCTION\n\nReading one word at a time keeps the eyes still. "
                        "It helps some readers stay on task.",
            }
        ]
    }}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SectionModel(BaseModel):
    title: str = Field(description="Section title (heading text or derived label).")
    start_word_index: int = Field(description="Index of the first word in the section.")
    end_word_index: int = Field(description="Index of the last word in the section (inclusive).")
    kind: SectionKind = Field(description="Section kind: heading, bullet, paragraph or normal.")


class WordModel(BaseModel):
    text: str = Field(description="Word exactly as it appears, punctuation included.")
    orp: int = Field(description="Index of the optimal recognition point character.")
    base_delay_ms: int = Field(description="Length-based base delay in milliseconds.")
    punctuation_pause_ms: int = Field(description="Pause after the word caused by trailing punctuation.")
    is_long_word: bool = Field(description="True when the word gets the long-word multiplier.")


class DocumentSummary(BaseModel):
    """Returned when a document is structured.

    WHY: Clients need the id for later requests and an overview of the
    sections, without downloading every word.
    """

    id: str = Field(description="Document identifier for subsequent requests.")
    title: str = Field(description="Document title.")
    total_words: int = Field(description="Number of words after cleaning.")
    created_at: str = Field(description="Structuring timestamp (ISO 8601, UTC).")
    sections: List[SectionModel] = Field(description="Detected sections in reading order.")


class DocumentResponse(DocumentSummary):
    """Full structured document, every word included."""

    last_position: int = Field(description="Last known reading position (word index).")
    words: List[WordModel] = Field(description="Every word in reading order.")


class TimelineEntry(BaseModel):
    index: int = Field(description="Word index.")
    word: str = Field(description="Word text.")
    orp: int = Field(description="ORP index of the word.")
    start_ms: float = Field(description="Offset from session start when the word appears.")
    duration_ms: float = Field(description="How long the word stays on screen.")
    pause_after_ms: float = Field(description="Blank pause after the word.")
    section_index: Optional[int] = Field(default=None, description="Section containing the word.")


class TimelineResponse(BaseModel):
    """Schedule of an uninterrupted reading session at one speed."""

    document_id: str = Field(description="The document this schedule belongs to.")
    wpm: int = Field(description="Speed used, after clamping into the allowed range.")
    total_duration_ms: float = Field(description="Length of the whole session including pauses.")
    entries: List[TimelineEntry] = Field(description="One entry per word.")


class FormatInfo(BaseModel):
    key: str = Field(description="Format identifier used in API paths.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-outline.txt').")


class StructuringErrorDetail(BaseModel):
    """Why a text could not be structured."""

    message: str = Field(description="Human-readable error description.")
    reason: str = Field(description="One of 'empty', 'too_short', 'too_long'.")
    word_count: int = Field(description="Word count after cleaning.")
    limit: Optional[int] = Field(default=None, description="The violated bound, if any.")


class StructuringErrorResponse(BaseModel):
    detail: StructuringErrorDetail = Field(description="Structuring failure details.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
    documents: int = Field(description="Number of documents currently cached.")
