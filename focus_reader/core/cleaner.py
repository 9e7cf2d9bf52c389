"""Boilerplate stripping and whitespace normalization for raw extracted text.

WHY: Text pulled out of PDFs and DOCX files carries page numbers, running
"Page N" headers, "N of M" footers and a trailing bibliography. Showing
those one word at a time wastes the reader's attention. Inconsistent
whitespace would also throw off the per-line word counting that section
detection relies on.

HOW: Line endings are normalized first so every later step sees "\\n".
Horizontal whitespace is collapsed per line, page-number lines are
dropped, everything from the first references heading that follows
some text is cut, and runs of blank lines are capped at one.

RULES:
- Page-number lines: "^\\d+$", "Page \\d+...", "\\d+ of \\d+" on their own line
- A line that is exactly a references heading drops it and everything
  after, unless no text has been kept yet
- At most one empty line between paragraphs; result is stripped
- has_structure: heading-like line, bullet line, or blank-line paragraph break
- Never raises: empty or whitespace-only input returns an empty CleanedText
"""

from __future__ import annotations

import re
from typing import List

from focus_reader.core.ir import CleanedText

_PAGE_NUMBER_PATTERNS = (
    re.compile(r"^\d+$"),
    re.compile(r"^page \d+\b.*$", re.IGNORECASE),
    re.compile(r"^\d+ of \d+$", re.IGNORECASE),
)

_REFERENCES_HEADING_RE = re.compile(
    r"^(references?|bibliography|works cited|citations?)\s*:?$",
    re.IGNORECASE,
)

_HORIZONTAL_WS_RE = re.compile(r"[^\S\n]+")

# Structure probes. These are deliberately looser than the section
# detector's classification; they only answer "is there anything to find".
_HEADING_PROBE_RE = re.compile(r"^(?:[A-Z][^.!?]*|\d+\.\s+[A-Z].*)$", re.MULTILINE)
_BULLET_PROBE_RE = re.compile(r"^[•\-*]\s+", re.MULTILINE)


def normalize_line_endings(text: str) -> str:
    """Convert "\\r\\n" and lone "\\r" to "\\n"."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def is_page_number_line(line: str) -> bool:
    """True if a stripped line is only a page marker."""
    return any(p.match(line) for p in _PAGE_NUMBER_PATTERNS)


def is_references_heading(line: str) -> bool:
    """True if a stripped line opens a references/bibliography block."""
    return bool(_REFERENCES_HEADING_RE.match(line))


def count_words(text: str) -> int:
    return len(text.split())


def _collapse_blank_runs(lines: List[str]) -> List[str]:
    result: List[str] = []
    for line in lines:
        if not line and (not result or not result[-1]):
            continue
        result.append(line)
    while result and not result[-1]:
        result.pop()
    return result


def detect_structure(content: str) -> bool:
    """True if content has a heading-like line, a bullet, or a paragraph break."""
    if "\n\n" in content:
        return True
    return bool(_HEADING_PROBE_RE.search(content) or _BULLET_PROBE_RE.search(content))


def clean_text(raw: str) -> CleanedText:
    """Strip boilerplate from raw extracted text and normalize whitespace.

    Args:
        raw: Plain text as supplied by the external extractor.

    Returns:
        CleanedText with the cleaned content, its word count, and whether
        any structure worth detecting is present.
    """
    if not raw or not raw.strip():
        return CleanedText(content="", word_count=0, has_structure=False)

    text = normalize_line_endings(raw)

    kept: List[str] = []
    for line in text.split("\n"):
        line = _HORIZONTAL_WS_RE.sub(" ", line).strip()
        # Only a trailing block is cut; a heading before any text is kept.
        if any(kept) and is_references_heading(line):
            break
        if line and is_page_number_line(line):
            continue
        kept.append(line)

    content = "\n".join(_collapse_blank_runs(kept))
    if not content:
        return CleanedText(content="", word_count=0, has_structure=False)

    return CleanedText(
        content=content,
        word_count=count_words(content),
        has_structure=detect_structure(content),
    )
