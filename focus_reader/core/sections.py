"""Heuristic section detection over cleaned text.

WHY: Pacing depends on structure: bullet items get an extra pause and
the engine announces when a section is finished so an external feature
can offer a pause for reflection. Extracted text carries no markup, so
structure has to be inferred from the shape of each line.

HOW: Walk the cleaned content line by line with a running word-index
counter. Each line is classified as heading, bullet, blank, or text.
Headings always open a new section; consecutive bullets share one open
Bullet section; text joins the open section. When a bullet list is
followed by a blank line and then ordinary text, that text opens a
Paragraph section. Closing a section sets its end to one less than the
next section's start, or to the last word for the final section.

RULES:
- Heading: short line starting with a capital and no terminal punctuation,
  or a mostly uppercase short line, or a line starting with "N. "
- Bullet: line starting with "•", "-" or "*" followed by whitespace
- The first section always starts at word 0; sections never overlap
- No words → no sections; the assembler rejects such documents anyway
- This is best-effort: an all-caps short sentence that is not a heading
  will be classified as one, and that is accepted
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from focus_reader.core.ir import Section, SectionKind

MAX_HEADING_CHARS = 80
MAX_HEADING_WORDS = 12
UPPERCASE_RATIO = 0.8
MIN_UPPERCASE_LETTERS = 3

DEFAULT_SECTION_TITLE = "Document Content"
BULLET_SECTION_TITLE = "Bullet Points"
PARAGRAPH_TITLE_WORDS = 6

_BULLET_RE = re.compile(r"^[•\-*]\s+")
_ENUMERATOR_RE = re.compile(r"^\d+\.\s+\S")
_TERMINAL_PUNCTUATION = (".", "!", "?")


def is_bullet_line(line: str) -> bool:
    return bool(_BULLET_RE.match(line))


def _is_short(line: str) -> bool:
    return len(line) <= MAX_HEADING_CHARS and len(line.split()) <= MAX_HEADING_WORDS


def _is_mostly_uppercase(line: str) -> bool:
    letters = [c for c in line if c.isalpha()]
    if len(letters) < MIN_UPPERCASE_LETTERS:
        return False
    upper = sum(1 for c in letters if c.isupper())
    return upper / len(letters) >= UPPERCASE_RATIO


def is_heading_line(line: str) -> bool:
    """Classify a stripped, non-empty line as a heading.

    RULES:
    - Enumerated lines ("1. Introduction") are headings
    - Otherwise the line must be short, and either start with a capital
      letter and not end in ".", "!" or "?", or be mostly uppercase
    """
    if not line or is_bullet_line(line):
        return False
    if _ENUMERATOR_RE.match(line):
        return True
    if not _is_short(line):
        return False
    if _is_mostly_uppercase(line):
        return True
    return line[0].isupper() and not line.endswith(_TERMINAL_PUNCTUATION)


def _paragraph_title(line: str) -> str:
    words = line.split()
    title = " ".join(words[:PARAGRAPH_TITLE_WORDS])
    if len(words) > PARAGRAPH_TITLE_WORDS:
        title += "…"
    return title


@dataclass
class _OpenSection:
    """Mutable accumulator for the section currently being built."""

    title: str
    start: int
    kind: SectionKind


def detect_sections(content: str) -> List[Section]:
    """Locate headings, bullet lists and paragraphs on the word-index axis.

    Args:
        content: Text already passed through the cleaner.

    Returns:
        Ordered, contiguous sections covering every word of content.
        Empty when content has no words.
    """
    sections: List[Section] = []
    current: Optional[_OpenSection] = None
    word_index = 0
    after_blank = False

    def _close(end_index: int) -> None:
        nonlocal current
        if current is not None and end_index >= current.start:
            sections.append(Section(
                title=current.title,
                start_word_index=current.start,
                end_word_index=end_index,
                kind=current.kind,
            ))
        current = None

    def _open(title: str, kind: SectionKind) -> None:
        nonlocal current
        _close(word_index - 1)
        current = _OpenSection(title=title, start=word_index, kind=kind)

    for raw_line in content.split("\n"):
        line = raw_line.strip()
        if not line:
            after_blank = True
            continue

        if is_bullet_line(line):
            if current is None or current.kind is not SectionKind.BULLET:
                _open(BULLET_SECTION_TITLE, SectionKind.BULLET)
        elif is_heading_line(line):
            _open(line, SectionKind.HEADING)
        elif current is None:
            _open(DEFAULT_SECTION_TITLE, SectionKind.NORMAL)
        elif current.kind is SectionKind.BULLET and after_blank:
            _open(_paragraph_title(line), SectionKind.PARAGRAPH)

        word_index += len(line.split())
        after_blank = False

    _close(word_index - 1)
    return sections
