"""Typed exception hierarchy for structuring and playback.

WHY: Callers (a keyboard handler, the CLI, the HTTP API) must be able to
tell "the input text is unusable" apart from "there is no session" and
from "you passed a malformed number". Silent failures here desynchronize
a displayed UI from the actual engine state.

HOW: One base class carrying a context dict, and three subclasses, one
per error category. Each subclass stores the attempted value and the
state it was attempted in so the message upstream can be specific.

RULES:
- StructuringError: empty / too short / too long input, terminal for that attempt
- SessionStateError: operation against an absent or wrong-state session
- PlaybackValidationError: malformed numeric input (NaN, Infinity, non-numbers)
- Nothing in the package retries; errors are raised, never swallowed
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class FocusReaderError(Exception):
    """Base class for every error raised by focus_reader.

    RULES:
    - context is always a dict (possibly empty) with the values involved
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.context: Dict[str, Any] = dict(context or {})
        super().__init__(message)


class StructuringError(FocusReaderError):
    """Raised when raw text cannot be turned into a DocumentStructure.

    WHY: A document that is empty, too short, or too long cannot be read.
    Nothing partial is returned; the caller must supply different input.

    RULES:
    - reason is one of EMPTY, TOO_SHORT, TOO_LONG
    - word_count is the cleaned word count (0 for empty input)
    - limit is the bound that was violated, or None for EMPTY
    """

    EMPTY = "empty"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"

    def __init__(
        self,
        reason: str,
        word_count: int,
        limit: Optional[int] = None,
    ) -> None:
        self.reason = reason
        self.word_count = word_count
        self.limit = limit
        if reason == self.EMPTY:
            message = "Document contains no readable words"
        elif reason == self.TOO_SHORT:
            message = "Document too short: {} words (minimum {})".format(word_count, limit)
        else:
            message = "Document too long: {} words (maximum {})".format(word_count, limit)
        super().__init__(
            message,
            {"reason": reason, "word_count": word_count, "limit": limit},
        )


class SessionStateError(FocusReaderError):
    """Raised when a playback operation is not valid in the engine's state.

    WHY: Pausing with no session, or resuming a session that is already
    reading, means the caller's picture of the engine is wrong. The caller
    decides whether to ignore or surface it; the engine never hides it.

    RULES:
    - operation is the public method name that was called
    - state is the engine state value at the time of the call
    """

    def __init__(self, operation: str, state: str, detail: str = "") -> None:
        self.operation = operation
        self.state = state
        message = "Cannot {} in state '{}'".format(operation, state)
        if detail:
            message = "{}: {}".format(message, detail)
        super().__init__(message, {"operation": operation, "state": state})


class PlaybackValidationError(FocusReaderError, ValueError):
    """Raised for malformed numeric input to speed and position calls.

    WHY: NaN or Infinity reaching adjust_speed indicates a caller bug.
    Reporting it separately from SessionStateError lets callers tell
    "you misused the API" from "there is no session".

    RULES:
    - field names the argument ("delta_steps", "wpm", "index", ...)
    - value is the rejected value, unchanged
    """

    def __init__(self, field: str, value: Any, detail: str = "") -> None:
        self.field = field
        self.value = value
        message = "Invalid {}: {!r}".format(field, value)
        if detail:
            message = "{} ({})".format(message, detail)
        super().__init__(message, {"field": field, "value": value})
