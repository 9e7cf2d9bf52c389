"""Tests for the word tokenizer.

WHY: The ORP decides which letter the reader's eye lands on, and the
delay tiers and punctuation pauses set the rhythm. Off-by-one errors in
the tier lookups are easy to make and hard to notice on screen.

HOW: Each calculator is tested on the boundaries of its tiers; tokenize()
is tested on splitting and on the ORP bounds property over real text.

RULES:
- ORP is looked up on the punctuation-stripped length
- Base delay and is_long_word use the raw length
"""

from __future__ import annotations

import pytest

from focus_reader.config import TokenizerConfig
from focus_reader.core.tokenizer import (
    calculate_base_delay,
    calculate_orp,
    calculate_punctuation_pause,
    make_word_unit,
    strip_punctuation,
    tokenize,
)


class TestORP:

    @pytest.mark.parametrize("word, expected", [
        ("a", 0),
        ("an", 0),
        ("cat", 1),
        ("word", 1),
        ("hello", 2),
        ("reader", 2),
        ("elephant", 2),
        ("beautiful", 3),
        ("considerable", 3),
        ("extraordinary", 4),
        ("characteristics", 4),
        ("incomprehensibilities", 6),
    ])
    def test_length_tiers(self, word, expected):
        assert calculate_orp(word) == expected

    def test_punctuation_is_ignored(self):
        assert calculate_orp("cat.") == calculate_orp("cat")
        assert calculate_orp('"hello,"') == 2

    def test_punctuation_only_token(self):
        assert calculate_orp("...") == 0
        assert calculate_orp("•") == 0

    def test_custom_tiers(self):
        config = TokenizerConfig(orp_tiers=((3, 0), (10, 1)))
        assert calculate_orp("cat", config) == 0
        assert calculate_orp("elephant", config) == 1

    def test_strip_punctuation(self):
        assert strip_punctuation("(don't!)") == "dont"
        assert strip_punctuation("naïve,") == "naïve"


class TestBaseDelay:

    @pytest.mark.parametrize("token, expected", [
        ("cat", 200),
        ("cat.", 250),
        ("reader", 250),
        ("reading", 300),
        ("elephants", 300),
        ("elephants.", 350),
        ("extraordinary", 350),
    ])
    def test_raw_length_tiers(self, token, expected):
        assert calculate_base_delay(token) == expected


class TestPunctuationPause:

    @pytest.mark.parametrize("token, expected", [
        ("end.", 300),
        ("wow!", 300),
        ("why?", 300),
        ("wait,", 150),
        ("then;", 150),
        ("list:", 150),
        ("word", 0),
        ("(aside)", 0),
    ])
    def test_trailing_character(self, token, expected):
        assert calculate_punctuation_pause(token) == expected


class TestWordUnit:

    def test_long_word_threshold(self):
        assert make_word_unit("elephants").is_long_word is True
        assert make_word_unit("elephant").is_long_word is False

    def test_custom_long_word_threshold(self):
        config = TokenizerConfig(long_word_threshold=3)
        assert make_word_unit("word", config).is_long_word is True

    def test_fields(self):
        unit = make_word_unit("reading.")
        assert unit.text == "reading."
        assert unit.orp == 2
        assert unit.base_delay_ms == 300
        assert unit.punctuation_pause_ms == 300
        assert unit.ends_sentence


class TestTokenize:

    def test_splits_on_whitespace_runs(self):
        words = tokenize("one  two\nthree\n\n\tfour")
        assert [w.text for w in words] == ["one", "two", "three", "four"]

    def test_empty_content(self):
        assert tokenize("") == []
        assert tokenize("   \n ") == []

    def test_orp_bounds_hold_for_every_word(self, sample_text):
        for word in tokenize(sample_text):
            stripped = strip_punctuation(word.text)
            assert 0 <= word.orp < max(1, len(stripped))
