"""Document structure assembly and the structuring entry point.

WHY: The section detector and the tokenizer each walk the cleaned text
independently. The engine needs both results on one word-index axis in a
single read-only object. This module is the bridge between the pipeline
stages and the DocumentStructure IR, and it does not trust the detector
blindly: a detector bug must never hand the engine a range past the end.

HOW: structure() runs the whole pipeline: clean → validate word count →
detect sections → tokenize → assemble. assemble() clamps section ranges
to the word array, repairs coverage at both ends, falls back to a single
Normal section when nothing usable was detected, and stamps a unique id.

RULES:
- Section ranges are clamped into [0, len(words) - 1]; sections starting
  past the end are dropped
- The first section starts at 0 and the last one ends at len(words) - 1
- Empty input → StructuringError(EMPTY); counts outside the limits →
  TOO_SHORT / TOO_LONG; nothing partial is ever returned
- Identical input yields identical words and sections; only the id differs
- Document ids: "{title-slug}-{epoch-ms}-{random}", slug capped at 20 chars
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from focus_reader.config import StructuringLimits, TokenizerConfig
from focus_reader.core.cleaner import clean_text
from focus_reader.core.ir import DocumentStructure, Section, SectionKind, WordUnit
from focus_reader.core.sections import DEFAULT_SECTION_TITLE, detect_sections
from focus_reader.core.tokenizer import tokenize
from focus_reader.errors import StructuringError

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Document"

_SLUG_RE = re.compile(r"[^a-z0-9]")
_SLUG_MAX_CHARS = 20


def generate_document_id(title: str) -> str:
    """Build a unique id from a title slug, the current time and a random suffix.

    Two documents sharing a title still get distinct ids.
    """
    slug = _SLUG_RE.sub("-", title.lower())[:_SLUG_MAX_CHARS] or "document"
    timestamp_ms = int(time.time() * 1000)
    return "{}-{}-{}".format(slug, timestamp_ms, uuid.uuid4().hex[:6])


def _clamp_sections(sections: Sequence[Section], total_words: int) -> List[Section]:
    """Force section ranges into a contiguous cover of [0, total_words - 1]."""
    last_index = total_words - 1
    clamped: List[Section] = []
    next_start = 0

    for section in sections:
        start = max(section.start_word_index, next_start)
        end = min(section.end_word_index, last_index)
        if start > last_index or end < start:
            logger.warning(
                "Dropping section %r with range [%d, %d] (document has %d words)",
                section.title, section.start_word_index, section.end_word_index, total_words,
            )
            continue
        if (start, end) != (section.start_word_index, section.end_word_index):
            logger.warning(
                "Clamped section %r from [%d, %d] to [%d, %d]",
                section.title, section.start_word_index, section.end_word_index, start, end,
            )
        clamped.append(Section(
            title=section.title,
            start_word_index=start,
            end_word_index=end,
            kind=section.kind,
        ))
        next_start = end + 1

    if not clamped:
        return [Section(
            title=DEFAULT_SECTION_TITLE,
            start_word_index=0,
            end_word_index=last_index,
            kind=SectionKind.NORMAL,
        )]

    # Close gaps: each section runs up to the next one's start.
    repaired: List[Section] = []
    for i, section in enumerate(clamped):
        start = 0 if i == 0 else repaired[-1].end_word_index + 1
        if i + 1 < len(clamped):
            end = clamped[i + 1].start_word_index - 1
        else:
            end = last_index
        repaired.append(Section(
            title=section.title,
            start_word_index=start,
            end_word_index=end,
            kind=section.kind,
        ))
    return repaired


def assemble(
    cleaned_content: str,
    sections: Sequence[Section],
    words: Sequence[WordUnit],
    title: str = DEFAULT_TITLE,
    created_at: Optional[datetime] = None,
    last_position: int = 0,
) -> DocumentStructure:
    """Merge detected sections and tokenized words into a DocumentStructure.

    Args:
        cleaned_content: The cleaned text both inputs were derived from.
        sections: Section detector output (not trusted; clamped here).
        words: Tokenizer output.
        title: Document title, used for the id slug.
        created_at: Creation timestamp; now (UTC) when omitted.
        last_position: Starting position hint stored on the structure.

    Returns:
        A read-only DocumentStructure.

    Raises:
        StructuringError: If words is empty.
    """
    if not words:
        raise StructuringError(StructuringError.EMPTY, word_count=0)

    total_words = len(words)
    if len(cleaned_content.split()) != total_words:
        logger.warning(
            "Word count mismatch: content has %d tokens, tokenizer produced %d",
            len(cleaned_content.split()), total_words,
        )

    title = title.strip() or DEFAULT_TITLE
    return DocumentStructure(
        id=generate_document_id(title),
        title=title,
        total_words=total_words,
        sections=tuple(_clamp_sections(sections, total_words)),
        words=tuple(words),
        created_at=created_at or datetime.now(timezone.utc),
        last_position=max(0, min(last_position, total_words - 1)),
    )


def structure(
    raw_text: str,
    title: str = DEFAULT_TITLE,
    limits: Optional[StructuringLimits] = None,
    tokenizer_config: Optional[TokenizerConfig] = None,
) -> DocumentStructure:
    """Turn raw extracted text into a DocumentStructure.

    WHY: This is the single structuring entry point used by the CLI, the
    API and library callers. It owns the word-count validation so every
    caller gets the same typed failure.

    Args:
        raw_text: Plain text from the external extractor.
        title: Document title.
        limits: Accepted word-count bounds; environment defaults when omitted.
        tokenizer_config: Tokenizer tuning; module defaults when omitted.

    Returns:
        The assembled DocumentStructure.

    Raises:
        StructuringError: Empty, too short, or too long input.
    """
    limits = limits or StructuringLimits()
    cleaned = clean_text(raw_text)

    if cleaned.word_count == 0:
        raise StructuringError(StructuringError.EMPTY, word_count=0)
    if cleaned.word_count < limits.min_words:
        raise StructuringError(
            StructuringError.TOO_SHORT, word_count=cleaned.word_count, limit=limits.min_words,
        )
    if cleaned.word_count > limits.max_words:
        raise StructuringError(
            StructuringError.TOO_LONG, word_count=cleaned.word_count, limit=limits.max_words,
        )

    sections = detect_sections(cleaned.content)
    words = tokenize(cleaned.content, tokenizer_config)
    document = assemble(cleaned.content, sections, words, title=title)

    logger.info(
        "Structured %r: %d words, %d sections (structure detected: %s)",
        document.title, document.total_words, len(document.sections), cleaned.has_structure,
    )
    return document
