"""Tests for document assembly and the structure() entry point.

WHY: The assembler is the last line of defence before the engine. It
must clamp broken section ranges, reject unusable input with a typed
error, and produce identical structures for identical text.

HOW: assemble() is fed hand-built (sometimes deliberately broken)
section lists; structure() is run on the shared sample text and on
inputs that violate each word-count bound.

RULES:
- Ids differ between calls; everything else is deterministic
- Structuring failures raise StructuringError with a reason
"""

from __future__ import annotations

import re

import pytest

from focus_reader.config import StructuringLimits
from focus_reader.core.assembler import assemble, generate_document_id, structure
from focus_reader.core.ir import Section, SectionKind
from focus_reader.core.tokenizer import tokenize
from focus_reader.errors import FocusReaderError, StructuringError


def _section(start, end, kind=SectionKind.NORMAL, title="S"):
    return Section(title=title, start_word_index=start, end_word_index=end, kind=kind)


class TestDocumentId:

    def test_format(self):
        doc_id = generate_document_id("My Great Notes!")
        assert re.match(r"^my-great-notes--\d+-[0-9a-f]{6}$", doc_id)

    def test_slug_is_capped(self):
        doc_id = generate_document_id("a" * 50)
        assert doc_id.startswith("a" * 20 + "-")
        assert not doc_id.startswith("a" * 21)

    def test_same_title_gives_distinct_ids(self):
        assert generate_document_id("Notes") != generate_document_id("Notes")


class TestAssemble:

    def test_clamps_section_past_end(self):
        words = tokenize("one two three four")
        doc = assemble("one two three four", [_section(0, 10)], words)
        assert (doc.sections[0].start_word_index, doc.sections[0].end_word_index) == (0, 3)

    def test_drops_section_starting_past_end(self):
        words = tokenize("one two three")
        doc = assemble("one two three", [_section(0, 1), _section(5, 9)], words)
        assert len(doc.sections) == 1
        assert doc.sections[0].end_word_index == 2

    def test_repairs_gaps_and_overlaps(self):
        words = tokenize("a b c d e f")
        doc = assemble("a b c d e f", [_section(1, 2), _section(2, 3)], words)
        ranges = [(s.start_word_index, s.end_word_index) for s in doc.sections]
        assert ranges == [(0, 2), (3, 5)]

    def test_no_sections_falls_back_to_one_normal(self):
        words = tokenize("a b c")
        doc = assemble("a b c", [], words)
        assert len(doc.sections) == 1
        assert doc.sections[0].kind is SectionKind.NORMAL
        assert doc.sections[0].end_word_index == 2

    def test_no_words_raises(self):
        with pytest.raises(StructuringError) as exc_info:
            assemble("", [], [])
        assert exc_info.value.reason == StructuringError.EMPTY

    def test_blank_title_uses_default(self):
        doc = assemble("a b", [], tokenize("a b"), title="   ")
        assert doc.title == "Untitled Document"

    def test_last_position_is_clamped(self):
        doc = assemble("a b c", [], tokenize("a b c"), last_position=99)
        assert doc.last_position == 2

    def test_section_lookup(self):
        words = tokenize("a b c d")
        doc = assemble("a b c d", [_section(0, 1), _section(2, 3)], words)
        assert doc.section_index_at(0) == 0
        assert doc.section_index_at(3) == 1
        assert doc.section_index_at(4) is None
        assert doc.section_index_at(-1) is None
        assert doc.section_text(1) == "c d"

    def test_section_lookup_many_sections(self):
        text = " ".join("w{}".format(i) for i in range(30000))
        sections = [_section(i, i + 9) for i in range(0, 30000, 10)]
        doc = assemble(text, sections, tokenize(text))
        assert len(doc.sections) == 3000
        assert doc.section_index_at(0) == 0
        assert doc.section_index_at(9) == 0
        assert doc.section_index_at(10) == 1
        assert doc.section_index_at(12345) == 1234
        assert doc.section_index_at(29999) == 2999
        assert [doc.section_index_at(i) for i in range(0, 30000, 7)] == [
            i // 10 for i in range(0, 30000, 7)
        ]


class TestStructure:

    def test_sample_document(self, sample_document, sample_sections):
        assert sample_document.title == "Sample"
        assert sample_document.total_words == 45
        assert len(sample_document.words) == sample_document.total_words
        assert [
            (s.title, s.start_word_index, s.end_word_index, s.kind)
            for s in sample_document.sections
        ] == sample_sections

    def test_idempotent_except_id(self, sample_text):
        first = structure(sample_text, "Same")
        second = structure(sample_text, "Same")
        assert first.words == second.words
        assert first.sections == second.sections
        assert first.id != second.id

    def test_coverage_invariant(self, sample_document):
        sections = sample_document.sections
        assert sections[0].start_word_index == 0
        assert sections[-1].end_word_index == sample_document.total_words - 1
        for prev, nxt in zip(sections, sections[1:]):
            assert nxt.start_word_index == prev.end_word_index + 1

    def test_leading_references_line_keeps_document(self):
        text = "References\nThe chapter opens with a dozen ordinary words of plain prose here."
        doc = structure(text, "Contents")
        assert doc.total_words == 13
        assert doc.words[0].text == "References"

    def test_empty_input(self):
        with pytest.raises(StructuringError) as exc_info:
            structure("   \n\n  ", "Empty")
        assert exc_info.value.reason == StructuringError.EMPTY
        assert exc_info.value.word_count == 0

    def test_too_short(self):
        with pytest.raises(StructuringError) as exc_info:
            structure("Only four words here.", "Short", limits=StructuringLimits(min_words=10))
        err = exc_info.value
        assert err.reason == StructuringError.TOO_SHORT
        assert err.word_count == 4
        assert err.limit == 10
        assert "minimum 10" in str(err)

    def test_too_long(self):
        with pytest.raises(StructuringError) as exc_info:
            structure("word " * 30, "Long", limits=StructuringLimits(min_words=1, max_words=20))
        assert exc_info.value.reason == StructuringError.TOO_LONG
        assert exc_info.value.context == {"reason": "too_long", "word_count": 30, "limit": 20}

    def test_error_is_part_of_package_hierarchy(self):
        with pytest.raises(FocusReaderError):
            structure("", "Nothing")

    def test_invalid_limits_rejected(self):
        with pytest.raises(ValueError):
            StructuringLimits(min_words=50, max_words=10)
