"""Playback engine: the timing state machine behind one reading session.

WHY: Pacing is the product. The engine decides which word is on screen,
for how long, and what happens next, and it must stay correct when the
reader pauses mid-word, seeks during playback, or changes speed mid-session.

HOW: States IDLE → READING ⇄ PAUSED → COMPLETED, plus ERROR on invalid
start input. The engine never sleeps. A scheduler (see runner.py) calls
tick() and waits the number of milliseconds it returns. Each tick first
finishes the word on screen (advance by one, announce a crossed section
boundary, complete at the end), then shows the word at the current
position. All timing is computed from the session state at tick time,
so a seek or speed change between ticks is picked up by the next tick.

RULES:
- start_reading: from IDLE, COMPLETED or ERROR; zero-word documents are
  rejected (ERROR state, no session); the start position is clamped
- pause_reading only from READING; resume_reading only from PAUSED
- adjust_speed / set_speed / jump_to_position need READING or PAUSED
- Wrong state → SessionStateError; NaN, Infinity, non-numbers → PlaybackValidationError
- Speed is clamped to [min_speed_wpm, max_speed_wpm] on every mutation
- duration = 60000 / wpm, × long_word_multiplier for long words
- pause_after = punctuation pause + bullet pause (Bullet section) +
  paragraph pause (word ends a sentence)
- Every scheduled frame is at least min_frame_ms long
- Section-boundary events fire only on auto-advance, never on an explicit jump
- SessionEnded fires exactly once, on natural completion only
- stop_reading runs the registered cancel hooks before releasing the session
"""

from __future__ import annotations

import enum
import logging
import math
import numbers
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from focus_reader.config import PacingConfig
from focus_reader.core.ir import DocumentStructure, SectionKind, WordUnit
from focus_reader.errors import PlaybackValidationError, SessionStateError
from focus_reader.playback.events import (
    EventBus,
    Listener,
    PositionChanged,
    SectionBoundaryCrossed,
    SessionEnded,
    WordDisplayed,
)

logger = logging.getLogger(__name__)


class PlaybackState(str, enum.Enum):
    """Valid states for the playback engine.

    Inherits from str so values serialize cleanly to JSON and error messages.
    """

    IDLE = "idle"
    READING = "reading"
    PAUSED = "paused"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class PlaybackSession:
    """Mutable state of one reading session, owned by the engine.

    RULES:
    - 0 <= current_position < total words while the session exists
    - base_speed_wpm stays within the engine's speed bounds
    """

    document_id: str
    start_time: datetime
    current_position: int
    base_speed_wpm: int
    is_paused: bool = False


@dataclass(frozen=True)
class WordTiming:
    """How long one word stays on screen and the pause that follows it."""

    index: int
    word: WordUnit
    duration_ms: float
    pause_after_ms: float

    @property
    def total_ms(self) -> float:
        return self.duration_ms + self.pause_after_ms


@dataclass(frozen=True)
class ReadingProgress:
    position: int
    total: int
    fraction: float
    remaining_ms: float


def _validate_number(field: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise PlaybackValidationError(field, value, "expected a number")
    number = float(value)
    if not math.isfinite(number):
        raise PlaybackValidationError(field, value, "must be finite")
    return number


def compute_word_timing(
    document: DocumentStructure,
    index: int,
    speed_wpm: float,
    config: PacingConfig,
) -> WordTiming:
    """Compute display duration and post-word pause for one word.

    Shared by the engine and the timeline formatter so a precomputed
    schedule matches live playback exactly.
    """
    word = document.words[index]

    duration = 60_000.0 / speed_wpm
    if word.is_long_word:
        duration *= config.long_word_multiplier
    duration = max(duration, config.min_frame_ms)

    pause_after = float(word.punctuation_pause_ms)
    section_index = document.section_index_at(index)
    if section_index is not None and document.sections[section_index].kind is SectionKind.BULLET:
        pause_after += config.bullet_pause_ms
    if word.ends_sentence:
        pause_after += config.paragraph_pause_ms

    return WordTiming(
        index=index,
        word=word,
        duration_ms=duration,
        pause_after_ms=max(0.0, pause_after),
    )


class PlaybackEngine:
    """Timing state machine for RSVP playback of one document at a time.

    WHY: Every reading surface (terminal, web preview, tests) needs the
    same pacing and the same guarantees under interruption. Constructing
    an engine explicitly, with its own event bus, keeps that state out of
    module globals so several previews can run side by side.

    HOW: The engine borrows a DocumentStructure for the lifetime of a
    session and owns a PlaybackSession. Control methods mutate the session
    synchronously. tick() is the only place the position advances on its own.

    RULES:
    - The document is never mutated
    - A scheduler registers a cancel hook; stop_reading calls it
    - Stale ticks (state is no longer READING) change nothing and return None
    """

    def __init__(
        self,
        config: Optional[PacingConfig] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        self.config = config or PacingConfig()
        self.events = events or EventBus()
        self._state = PlaybackState.IDLE
        self._session: Optional[PlaybackSession] = None
        self._document: Optional[DocumentStructure] = None
        # True while the word at current_position is on screen and still
        # owes its dwell time; the next tick advances past it.
        self._word_on_screen = False
        self._cancel_hooks: List[Callable[[], None]] = []
        self.last_error: Optional[Exception] = None

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def session(self) -> Optional[PlaybackSession]:
        return self._session

    @property
    def document(self) -> Optional[DocumentStructure]:
        return self._document

    @property
    def current_position(self) -> int:
        """Current word index; total_words once the session has completed."""
        if self._session is not None:
            return self._session.current_position
        if self._state is PlaybackState.COMPLETED and self._document is not None:
            return self._document.total_words
        return 0

    @property
    def current_speed(self) -> int:
        if self._session is not None:
            return self._session.base_speed_wpm
        return self.config.clamp_speed(self.config.base_speed_wpm)

    @property
    def is_reading(self) -> bool:
        return self._state is PlaybackState.READING

    @property
    def is_paused(self) -> bool:
        return self._state is PlaybackState.PAUSED

    def subscribe(self, listener: Listener, *kinds: type) -> Callable[[], None]:
        """Shortcut for ``engine.events.subscribe``."""
        return self.events.subscribe(listener, *kinds)

    def register_cancel_hook(self, hook: Callable[[], None]) -> Callable[[], None]:
        """Register a callable that cancels any pending scheduled tick."""
        self._cancel_hooks.append(hook)

        def _unregister() -> None:
            if hook in self._cancel_hooks:
                self._cancel_hooks.remove(hook)

        return _unregister

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_reading(self, document: DocumentStructure, start_position: int = 0) -> PlaybackSession:
        """Begin a session on ``document`` at ``start_position`` (clamped).

        Raises:
            SessionStateError: A session is already reading or paused.
            PlaybackValidationError: The document has no words, or the
                start position is not a finite number.
        """
        if self._state in (PlaybackState.READING, PlaybackState.PAUSED):
            raise SessionStateError(
                "start_reading", self._state.value, "stop the active session first",
            )

        if document.total_words <= 0 or not document.words:
            error = PlaybackValidationError("total_words", document.total_words, "document has no words")
            self._enter_error(error)
            raise error

        try:
            position = _validate_number("start_position", start_position)
        except PlaybackValidationError as error:
            self._enter_error(error)
            raise

        self._document = document
        self._session = PlaybackSession(
            document_id=document.id,
            start_time=datetime.now(timezone.utc),
            current_position=self._clamp_position(position, document.total_words),
            base_speed_wpm=self.config.clamp_speed(self.config.base_speed_wpm),
        )
        self._word_on_screen = False
        self.last_error = None
        self._state = PlaybackState.READING

        logger.info(
            "Started reading %s at word %d of %d (%d wpm)",
            document.id, self._session.current_position, document.total_words,
            self._session.base_speed_wpm,
        )
        return self._session

    def pause_reading(self) -> None:
        session = self._require_state("pause_reading", PlaybackState.READING)
        session.is_paused = True
        self._state = PlaybackState.PAUSED
        logger.info("Paused at word %d", session.current_position)

    def resume_reading(self) -> None:
        session = self._require_state("resume_reading", PlaybackState.PAUSED)
        session.is_paused = False
        self._state = PlaybackState.READING
        logger.info("Resumed at word %d", session.current_position)

    def stop_reading(self) -> None:
        """Cancel any pending tick, release the session, and return to IDLE.

        Valid from READING, PAUSED or COMPLETED. Does not emit SessionEnded.
        """
        if self._state not in (
            PlaybackState.READING, PlaybackState.PAUSED, PlaybackState.COMPLETED,
        ):
            raise SessionStateError("stop_reading", self._state.value, "no active session")

        for hook in list(self._cancel_hooks):
            hook()

        stopped_at = self.current_position
        self._session = None
        self._document = None
        self._word_on_screen = False
        self._state = PlaybackState.IDLE
        logger.info("Stopped reading at word %d", stopped_at)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def adjust_speed(self, delta_steps: float) -> int:
        """Change speed by ``delta_steps`` × speed_step_wpm, clamped.

        Returns:
            The new speed in WPM.
        """
        session = self._require_active("adjust_speed")
        steps = _validate_number("delta_steps", delta_steps)
        new_speed = self.config.clamp_speed(
            session.base_speed_wpm + steps * self.config.speed_step_wpm
        )
        if new_speed != session.base_speed_wpm:
            logger.info("Speed %d → %d wpm", session.base_speed_wpm, new_speed)
        session.base_speed_wpm = new_speed
        return new_speed

    def set_speed(self, wpm: float) -> int:
        session = self._require_active("set_speed")
        value = _validate_number("wpm", wpm)
        session.base_speed_wpm = self.config.clamp_speed(value)
        return session.base_speed_wpm

    def jump_to_position(self, index: float) -> int:
        """Move to word ``index`` (clamped). Never emits a section event.

        The next tick shows the word at the new position; an already
        scheduled tick is not rescheduled.

        Returns:
            The clamped position.
        """
        session = self._require_active("jump_to_position")
        value = _validate_number("index", index)
        position = self._clamp_position(value, self._document.total_words)
        session.current_position = position
        self._word_on_screen = False
        logger.debug("Jumped to word %d", position)
        self.events.publish(PositionChanged(index=position, total=self._document.total_words))
        return position

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------

    def current_section_index(self) -> Optional[int]:
        if self._session is None or self._document is None:
            return None
        return self._document.section_index_at(self._session.current_position)

    def current_word_timing(self) -> WordTiming:
        session = self._require_active("current_word_timing")
        return compute_word_timing(
            self._document, session.current_position, session.base_speed_wpm, self.config,
        )

    def resume_delay_ms(self) -> float:
        """Delay before the first tick after (re)entering the loop.

        A word left on screen by a pause gets its full dwell again; a
        fresh position is shown immediately.
        """
        if self._session is None or not self._word_on_screen:
            return 0.0
        return max(self.current_word_timing().total_ms, self.config.min_frame_ms)

    def progress(self) -> ReadingProgress:
        """Position, fraction read, and estimated remaining time at current speed."""
        document = self._document
        if document is None:
            raise SessionStateError("progress", self._state.value, "no document loaded")

        position = self.current_position
        total = document.total_words
        if self._session is None:
            return ReadingProgress(position=position, total=total, fraction=1.0, remaining_ms=0.0)

        speed = self._session.base_speed_wpm
        remaining = sum(
            compute_word_timing(document, i, speed, self.config).total_ms
            for i in range(position, total)
        )
        return ReadingProgress(
            position=position,
            total=total,
            fraction=position / total,
            remaining_ms=remaining,
        )

    def tick(self) -> Optional[float]:
        """Advance past the word on screen and show the next one.

        Returns:
            Milliseconds to wait before the next tick, or None when no
            further tick should be scheduled (paused, stopped, completed).
        """
        if self._state is not PlaybackState.READING or self._session is None:
            logger.debug("Ignoring tick in state %s", self._state.value)
            return None

        session = self._session
        document = self._document

        if self._word_on_screen:
            previous = session.current_position
            position = previous + 1
            self._word_on_screen = False

            finished = position >= document.total_words
            if not finished:
                session.current_position = position

            previous_section = document.section_index_at(previous)
            next_section = None if finished else document.section_index_at(position)
            if previous_section is not None and previous_section != next_section:
                self.events.publish(SectionBoundaryCrossed(section_index=previous_section, position=position))

            if finished:
                # A listener that stopped the session already released it.
                if self._session is session:
                    self._complete(document)
                return None

            # A listener may have paused or stopped the session.
            if self._state is not PlaybackState.READING:
                return None

        timing = compute_word_timing(document, session.current_position, session.base_speed_wpm, self.config)
        self._word_on_screen = True
        logger.debug("Word %d %r for %.0f+%.0f ms", timing.index, timing.word.text,
                     timing.duration_ms, timing.pause_after_ms)
        self.events.publish(WordDisplayed(
            word=timing.word.text,
            orp=timing.word.orp,
            duration_ms=timing.duration_ms,
            pause_after_ms=timing.pause_after_ms,
            index=timing.index,
        ))
        self.events.publish(PositionChanged(index=timing.index, total=document.total_words))
        return max(timing.total_ms, self.config.min_frame_ms)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _complete(self, document: DocumentStructure) -> None:
        self._session = None
        self._state = PlaybackState.COMPLETED
        logger.info("Completed %s (%d words)", document.id, document.total_words)
        self.events.publish(SessionEnded(document_id=document.id))

    def _enter_error(self, error: Exception) -> None:
        self.last_error = error
        self._session = None
        self._document = None
        self._word_on_screen = False
        self._state = PlaybackState.ERROR
        logger.warning("Playback start rejected: %s", error)

    @staticmethod
    def _clamp_position(position: float, total_words: int) -> int:
        return int(max(0, min(math.floor(position), total_words - 1)))

    def _require_state(self, operation: str, expected: PlaybackState) -> PlaybackSession:
        if self._state is not expected or self._session is None:
            raise SessionStateError(
                operation, self._state.value, "requires state '{}'".format(expected.value),
            )
        return self._session

    def _require_active(self, operation: str) -> PlaybackSession:
        if self._state not in (PlaybackState.READING, PlaybackState.PAUSED) or self._session is None:
            raise SessionStateError(operation, self._state.value, "no active session")
        return self._session
