"""Configuration defaults, pacing tables, and .env loading.

WHY: The ORP table, the per-length delay tiers and the structural pauses
are empirically chosen product tuning, not structural invariants. They
live here as plain data so they are easy to find and override instead of
being buried as literals in the tokenizer and the engine.

HOW: python-dotenv loads the .env file on import. Environment-driven
defaults are module-level constants. The three config dataclasses group
the tuning values per consumer and validate themselves on construction.

RULES:
- TokenizerConfig feeds the Word Tokenizer (ORP, base delay, punctuation pause)
- PacingConfig feeds the Playback Engine (speed bounds, multipliers, pauses)
- StructuringLimits bounds the cleaned word count accepted by structure()
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError("{} must be an integer, got {!r}".format(name, raw))


# ---------------------------------------------------------------------------
# Environment defaults
# ---------------------------------------------------------------------------

DEFAULT_WPM = _env_int("FOCUS_READER_DEFAULT_WPM", 250)
DEFAULT_MIN_WORDS = _env_int("FOCUS_READER_MIN_WORDS", 10)
DEFAULT_MAX_WORDS = _env_int("FOCUS_READER_MAX_WORDS", 500_000)
LOG_LEVEL = os.getenv("FOCUS_READER_LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for the CLI and the API server.

    Library modules only create loggers; entry points call this once.
    """
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


# ---------------------------------------------------------------------------
# Tokenizer tuning
# ---------------------------------------------------------------------------

# (max stripped length, ORP index). Lengths above the last tier use the ratio.
ORP_TIERS: Tuple[Tuple[int, int], ...] = (
    (2, 0),
    (4, 1),
    (5, 2),
    (8, 2),
    (12, 3),
    (16, 4),
)
LONG_WORD_ORP_RATIO = 0.3

# (max raw length, base delay in ms). Longer tokens get DELAY_FALLBACK_MS.
DELAY_TIERS: Tuple[Tuple[int, int], ...] = (
    (3, 200),
    (6, 250),
    (9, 300),
)
DELAY_FALLBACK_MS = 350


@dataclass(frozen=True)
class TokenizerConfig:
    """Tuning values for the Word Tokenizer.

    RULES:
    - orp_tiers and delay_tiers are sorted ascending by their length bound
    - long_word_threshold: raw token length strictly above it is a long word
    """

    orp_tiers: Tuple[Tuple[int, int], ...] = ORP_TIERS
    long_word_orp_ratio: float = LONG_WORD_ORP_RATIO
    delay_tiers: Tuple[Tuple[int, int], ...] = DELAY_TIERS
    delay_fallback_ms: int = DELAY_FALLBACK_MS
    sentence_pause_ms: int = 300
    clause_pause_ms: int = 150
    long_word_threshold: int = 8

    def __post_init__(self) -> None:
        if self.long_word_threshold < 1:
            raise ValueError("long_word_threshold must be >= 1")
        if list(self.orp_tiers) != sorted(self.orp_tiers):
            raise ValueError("orp_tiers must be sorted by length bound")
        if list(self.delay_tiers) != sorted(self.delay_tiers):
            raise ValueError("delay_tiers must be sorted by length bound")
        if self.sentence_pause_ms < 0 or self.clause_pause_ms < 0:
            raise ValueError("punctuation pauses must be non-negative")


# ---------------------------------------------------------------------------
# Playback tuning
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PacingConfig:
    """Tuning values for the Playback Engine.

    RULES:
    - min_speed_wpm <= base_speed_wpm <= max_speed_wpm
    - speed_step_wpm is the WPM change for one adjust_speed step
    - min_frame_ms is the floor for any scheduled frame (never zero)
    """

    base_speed_wpm: int = DEFAULT_WPM
    min_speed_wpm: int = 100
    max_speed_wpm: int = 600
    speed_step_wpm: int = 25
    long_word_multiplier: float = 1.5
    bullet_pause_ms: int = 200
    paragraph_pause_ms: int = 400
    min_frame_ms: float = 1.0

    def __post_init__(self) -> None:
        if self.min_speed_wpm <= 0:
            raise ValueError("min_speed_wpm must be positive")
        if self.min_speed_wpm > self.max_speed_wpm:
            raise ValueError("min_speed_wpm must not exceed max_speed_wpm")
        if self.long_word_multiplier <= 0:
            raise ValueError("long_word_multiplier must be positive")
        if self.bullet_pause_ms < 0 or self.paragraph_pause_ms < 0:
            raise ValueError("structural pauses must be non-negative")
        if self.min_frame_ms <= 0:
            raise ValueError("min_frame_ms must be positive")

    def clamp_speed(self, wpm: float) -> int:
        """Clamp a WPM value into [min_speed_wpm, max_speed_wpm]."""
        return int(max(self.min_speed_wpm, min(self.max_speed_wpm, wpm)))


@dataclass(frozen=True)
class StructuringLimits:
    """Word-count bounds for accepted documents."""

    min_words: int = DEFAULT_MIN_WORDS
    max_words: int = DEFAULT_MAX_WORDS

    def __post_init__(self) -> None:
        if self.min_words < 1:
            raise ValueError("min_words must be >= 1")
        if self.min_words > self.max_words:
            raise ValueError("min_words must not exceed max_words")
