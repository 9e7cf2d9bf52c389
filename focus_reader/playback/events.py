"""Playback events and the explicit subscription list that delivers them.

WHY: The engine must tell a display, a progress bar and an optional
"pause for reflection" feature what happened without knowing any of
them exist. An explicit subscriber list owned by each engine instance
replaces ambient global listeners, so two engines never hear each other.

HOW: Four frozen event dataclasses, one per event kind, and an EventBus
holding an ordered list of (listener, kinds) pairs. publish() walks a
snapshot of the list so listeners may unsubscribe while being notified.

RULES:
- WordDisplayed: word text, ORP, duration and post-word pause in ms, index
- PositionChanged: index and total word count
- SectionBoundaryCrossed: index of the section just completed, new position
- SessionEnded: natural completion only, emitted exactly once per session
- Listener exceptions propagate to the publisher
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Type, Union


@dataclass(frozen=True)
class WordDisplayed:
    word: str
    orp: int
    duration_ms: float
    pause_after_ms: float
    index: int


@dataclass(frozen=True)
class PositionChanged:
    index: int
    total: int


@dataclass(frozen=True)
class SectionBoundaryCrossed:
    section_index: int
    position: int


@dataclass(frozen=True)
class SessionEnded:
    document_id: str


PlaybackEvent = Union[WordDisplayed, PositionChanged, SectionBoundaryCrossed, SessionEnded]
Listener = Callable[[PlaybackEvent], None]


class EventBus:
    """Ordered list of playback listeners for one engine instance."""

    def __init__(self) -> None:
        self._listeners: List[Tuple[Listener, Optional[Tuple[Type, ...]]]] = []

    def subscribe(
        self,
        listener: Listener,
        *kinds: Type,
    ) -> Callable[[], None]:
        """Register a listener, optionally filtered to some event classes.

        Returns:
            A callable that removes this subscription. Calling it twice is harmless.
        """
        entry = (listener, tuple(kinds) or None)
        self._listeners.append(entry)

        def _unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return _unsubscribe

    def publish(self, event: PlaybackEvent) -> None:
        for listener, kinds in list(self._listeners):
            if kinds is None or isinstance(event, kinds):
                listener(event)

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)
