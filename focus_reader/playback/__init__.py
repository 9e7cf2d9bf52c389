"""Playback engine, events, scheduler and command dispatch.

WHY: Structuring produces a static DocumentStructure; playback turns it
into a timed sequence of words the reader can pause, seek and re-pace.

HOW: engine.py holds the state machine, events.py the event types and
subscription list, runner.py the asyncio scheduler, controls.py the
abstract command dispatch.

RULES:
- Engines are constructed explicitly; there is no module-level instance
- The engine borrows the document and owns only its session
"""

from focus_reader.playback.engine import (
    PlaybackEngine,
    PlaybackSession,
    PlaybackState,
    ReadingProgress,
    WordTiming,
    compute_word_timing,
)
from focus_reader.playback.events import (
    EventBus,
    PositionChanged,
    SectionBoundaryCrossed,
    SessionEnded,
    WordDisplayed,
)

__all__ = [
    "EventBus",
    "PlaybackEngine",
    "PlaybackSession",
    "PlaybackState",
    "PositionChanged",
    "ReadingProgress",
    "SectionBoundaryCrossed",
    "SessionEnded",
    "WordDisplayed",
    "WordTiming",
    "compute_word_timing",
]
