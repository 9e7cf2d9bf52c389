"""SRT timeline of a full uninterrupted reading session.

WHY: A precomputed schedule shows how long a document takes at a given
speed and where the long pauses fall. Exported as SRT, any video player
or subtitle editor can play it back as a word-by-word flash sequence.

HOW: Walks the words in order with compute_word_timing(), the same
function the live engine uses. Each word becomes one cue lasting its
display duration; the post-word pause is the gap before the next cue.

RULES:
- One cue per word, numbered from 1
- Cue text is the word with its ORP letter wrapped in square brackets
- wpm is clamped into the pacing config's speed bounds
- Timestamps are HH:MM:SS,mmm rounded to the nearest millisecond
- Output suffix: "-timeline.srt"; media type "application/x-subrip"
"""

from __future__ import annotations

from typing import List, Optional

from focus_reader.config import PacingConfig
from focus_reader.core.ir import DocumentStructure
from focus_reader.formatters.base import BaseFormatter, FormatterOutput
from focus_reader.playback.engine import compute_word_timing


def format_srt_timestamp(ms: float) -> str:
    """Format milliseconds as an SRT timestamp, e.g. 3723004 → 01:02:03,004."""
    total = int(round(ms))
    hours, rem = divmod(total, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    seconds, millis = divmod(rem, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, seconds, millis)


def highlight_orp(text: str, orp: int) -> str:
    """Wrap the ORP letter in brackets: ("reading", 2) → "re[a]ding"."""
    i = max(0, min(orp, len(text) - 1))
    return "{}[{}]{}".format(text[:i], text[i], text[i + 1:])


class TimelineFormatter(BaseFormatter):
    """Formatter producing a word-per-cue SRT schedule.

    Args:
        wpm: Reading speed for the schedule. Defaults to the pacing
             config's base speed.
        config: Pacing config. Defaults to PacingConfig().
    """

    def __init__(self, wpm: Optional[float] = None, config: Optional[PacingConfig] = None) -> None:
        self._config = config or PacingConfig()
        self._wpm = self._config.clamp_speed(self._config.base_speed_wpm if wpm is None else wpm)

    @property
    def name(self) -> str:
        return "Reading Timeline"

    @property
    def suffix(self) -> str:
        return "-timeline.srt"

    @property
    def wpm(self) -> int:
        return self._wpm

    def total_duration_ms(self, document: DocumentStructure) -> float:
        """Length of an uninterrupted session, including every pause."""
        return sum(
            compute_word_timing(document, i, self._wpm, self._config).total_ms
            for i in range(document.total_words)
        )

    def format(self, document: DocumentStructure) -> List[FormatterOutput]:
        cues: List[str] = []
        cursor = 0.0
        for i in range(document.total_words):
            timing = compute_word_timing(document, i, self._wpm, self._config)
            start = cursor
            end = start + timing.duration_ms
            cues.append("{}\n{} --> {}\n{}\n".format(
                i + 1,
                format_srt_timestamp(start),
                format_srt_timestamp(end),
                highlight_orp(timing.word.text, timing.word.orp),
            ))
            cursor = end + timing.pause_after_ms

        return [FormatterOutput(
            suffix=self.suffix,
            content="\n".join(cues),
            media_type="application/x-subrip",
        )]
