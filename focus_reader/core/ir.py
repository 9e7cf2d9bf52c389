"""Intermediate representation dataclasses for structured documents.

WHY: Raw extracted text has no structure a reader can be paced by. The
Playback Engine needs an ordered array of timed word units and the
document's logical sections located on the same word-index axis. The IR
provides one well-typed form that the engine, the formatters, and the
HTTP API all consume, decoupling structuring from playback.

HOW: Five types form a hierarchy:
  CleanedText       — output of the Text Cleaner (content + counts)
  WordUnit          — one displayable token with ORP and timing baselines
  SectionKind       — heading / bullet / paragraph / normal
  Section           — a contiguous word-index range with a title and kind
  DocumentStructure — the complete structured document

RULES:
- WordUnit and Section are frozen; DocumentStructure is never mutated after assembly
- Section ranges are inclusive on both ends and cover [0, total_words - 1]
- len(words) == total_words
- All times are integer or float milliseconds
"""

from __future__ import annotations

import bisect
import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class CleanedText:
    """Result of cleaning raw extracted text.

    RULES:
    - content: boilerplate removed, whitespace normalized, stripped
    - word_count: number of whitespace-separated tokens in content
    - has_structure: heading-like line, bullet-like line, or paragraph break present
    """

    content: str
    word_count: int
    has_structure: bool


@dataclass(frozen=True)
class WordUnit:
    """A single displayable token with its recognition point and timing baselines.

    WHY: The engine must know, per word, where the reader's eye should
    fixate and how much extra time punctuation and length deserve.

    RULES:
    - text: the raw token, punctuation included
    - orp: 0 <= orp < max(1, len(stripped text))
    - base_delay_ms: pre-speed-scaling baseline from raw length; the
      engine's WPM timing is separate and the two are never conflated
    - punctuation_pause_ms: pause from trailing punctuation
    - is_long_word: raw length exceeds the configured threshold
    """

    text: str
    orp: int
    base_delay_ms: int
    punctuation_pause_ms: int
    is_long_word: bool

    @property
    def ends_sentence(self) -> bool:
        """True when the token ends with '.', '!' or '?'."""
        return self.text.endswith((".", "!", "?"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "orp": self.orp,
            "base_delay_ms": self.base_delay_ms,
            "punctuation_pause_ms": self.punctuation_pause_ms,
            "is_long_word": self.is_long_word,
        }


class SectionKind(str, enum.Enum):
    """Structural role of a section.

    Inherits from str so values serialize cleanly to JSON.
    """

    HEADING = "heading"
    BULLET = "bullet"
    PARAGRAPH = "paragraph"
    NORMAL = "normal"


@dataclass(frozen=True)
class Section:
    """A contiguous span of the word sequence with a structural role.

    RULES:
    - start_word_index <= end_word_index (both inclusive)
    - Sections are ordered and never overlap
    """

    title: str
    start_word_index: int
    end_word_index: int
    kind: SectionKind

    @property
    def word_count(self) -> int:
        return self.end_word_index - self.start_word_index + 1

    def contains(self, index: int) -> bool:
        return self.start_word_index <= index <= self.end_word_index

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "start_word_index": self.start_word_index,
            "end_word_index": self.end_word_index,
            "kind": self.kind.value,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DocumentStructure:
    """The complete structured document handed to the Playback Engine.

    WHY: This is the top-level container that playback and formatters
    receive. It is created once by the assembler and only borrowed
    afterwards, so several sessions can share one instance safely.

    RULES:
    - id: slug of the title plus timestamp and random suffix, unique per assembly
    - total_words == len(words) and is always >= 1
    - sections: ordered, contiguous, covering every word index
    - last_position: the position the caller asked to start from (0 by default)
    """

    id: str
    title: str
    total_words: int
    sections: Tuple[Section, ...]
    words: Tuple[WordUnit, ...]
    created_at: datetime = field(default_factory=_utcnow)
    last_position: int = 0
    _section_starts: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_section_starts", tuple(s.start_word_index for s in self.sections)
        )

    def section_index_at(self, index: int) -> Optional[int]:
        """Return the index of the section containing word ``index``, or None."""
        # Sections are sorted and contiguous: the candidate is the last one
        # starting at or before index.
        i = bisect.bisect_right(self._section_starts, index) - 1
        if i < 0 or not self.sections[i].contains(index):
            return None
        return i

    def section_text(self, section_index: int) -> str:
        """Join the words of one section back into a single line of text."""
        section = self.sections[section_index]
        return " ".join(
            w.text for w in self.words[section.start_word_index:section.end_word_index + 1]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "total_words": self.total_words,
            "created_at": self.created_at.isoformat(),
            "last_position": self.last_position,
            "sections": [s.to_dict() for s in self.sections],
            "words": [w.to_dict() for w in self.words],
        }
