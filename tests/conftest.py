"""Shared test fixtures for the focus_reader test suite.

WHY: Structuring, playback, formatter and API tests all need the same
small set of documents. Centralizing them here keeps the expected word
indices in one place.

HOW: SAMPLE_TEXT is a realistic extracted text with a heading, prose,
page-number noise, a bullet list, trailing prose and a references block.
make_document() builds a DocumentStructure from explicit tokens and
section ranges, bypassing the cleaner and the detector, so engine tests
control every word and boundary exactly.

RULES:
- SAMPLE_TEXT structures to 45 words in 4 sections (see SAMPLE_SECTIONS)
- make_document() defaults to one Normal section over all words
- Pacing tests use PacingConfig(base_speed_wpm=250): 240 ms per word
"""

from typing import List, Optional, Sequence, Tuple

import pytest

from focus_reader.config import PacingConfig
from focus_reader.core.assembler import assemble, structure
from focus_reader.core.ir import DocumentStructure, Section, SectionKind
from focus_reader.core.tokenizer import make_word_unit

SAMPLE_TEXT = (
    "INTRODUCTION\r\n"
    "\r\n"
    "Reading one word at a time keeps the eyes still.   It helps some readers stay on task.\r\n"
    "\r\n"
    "1\r\n"
    "\r\n"
    "\r\n"
    "Key ideas\n"
    "• Short words flash quickly\n"
    "• Long words stay longer\n"
    "• Punctuation adds a pause\n"
    "\n"
    "After the list, ordinary prose continues here with more words.\n"
    "\n"
    "Page 2 of 9\n"
    "\n"
    "References\n"
    "Smith, J. (2020). A study of reading.\n"
)

# (title, start, end, kind) for structure(SAMPLE_TEXT)
SAMPLE_SECTIONS: List[Tuple[str, int, int, SectionKind]] = [
    ("INTRODUCTION", 0, 17, SectionKind.HEADING),
    ("Key ideas", 18, 19, SectionKind.HEADING),
    ("Bullet Points", 20, 34, SectionKind.BULLET),
    ("After the list, ordinary prose continues…", 35, 44, SectionKind.PARAGRAPH),
]

SAMPLE_TOTAL_WORDS = 45


def make_document(
    tokens: Sequence[str],
    sections: Optional[Sequence[Tuple[int, int, SectionKind]]] = None,
    title: str = "Test Document",
) -> DocumentStructure:
    """Build a DocumentStructure from explicit tokens and section ranges."""
    words = [make_word_unit(t) for t in tokens]
    if sections is None:
        sections = [(0, len(tokens) - 1, SectionKind.NORMAL)]
    section_objs = [
        Section(title="Section {}".format(i), start_word_index=s, end_word_index=e, kind=k)
        for i, (s, e, k) in enumerate(sections)
    ]
    return assemble(" ".join(tokens), section_objs, words, title=title)


def plain_tokens(count: int) -> List[str]:
    """Short punctuation-free tokens: 240 ms each at 250 wpm, no pauses."""
    return ["w{}".format(i % 10) for i in range(count)]


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_sections() -> List[Tuple[str, int, int, SectionKind]]:
    return list(SAMPLE_SECTIONS)


@pytest.fixture
def document_factory():
    """The make_document() builder, for tests that need custom documents."""
    return make_document


@pytest.fixture
def tokens_factory():
    """The plain_tokens() builder."""
    return plain_tokens


@pytest.fixture
def sample_document() -> DocumentStructure:
    return structure(SAMPLE_TEXT, "Sample")


@pytest.fixture
def twenty_word_document() -> DocumentStructure:
    return make_document(plain_tokens(20))


@pytest.fixture
def pacing() -> PacingConfig:
    return PacingConfig(base_speed_wpm=250)
