"""Cooperative asyncio scheduler that drives a PlaybackEngine.

WHY: The engine is a pure state machine; something has to wait between
words. Keeping the waiting here means the engine stays deterministic and
testable with no clock, and any other scheduler (a GUI timer, a test
loop calling tick() by hand) can drive the same engine.

HOW: One asyncio task runs ``delay = engine.tick(); await sleep(delay)``
until tick() returns None. Pause needs no cooperation: the next tick
sees PAUSED and returns None, which ends the task. start() after a
resume either reuses the still-sleeping task or starts a new one that
first waits out the word left on screen. The runner registers cancel()
with the engine so stop_reading never leaves a zombie tick behind.

RULES:
- At most one playback task per runner
- The only suspension point is the sleep between ticks
- sleep is injectable (tests pass a fake that records delays)
- Cancellation is explicit: cancel(), or the engine's stop_reading()
- After cancel(), the next start() always creates a new task
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from focus_reader.playback.engine import PlaybackEngine

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class PlaybackRunner:
    """Drives ``engine.tick()`` on the running asyncio event loop."""

    def __init__(self, engine: PlaybackEngine, sleep: Sleep = asyncio.sleep) -> None:
        self.engine = engine
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._unregister = engine.register_cancel_hook(self.cancel)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Start (or keep) the playback loop. Must be called inside a running loop."""
        if self.running:
            return self._task
        initial_delay_ms = self.engine.resume_delay_ms()
        self._task = asyncio.get_running_loop().create_task(self._run(initial_delay_ms))
        return self._task

    def cancel(self) -> None:
        if self.running:
            logger.debug("Cancelling pending playback tick")
            self._task.cancel()
        # A cancelled task is not done() until the loop runs again; forget it
        # now so a start() in the same turn schedules a fresh loop.
        self._task = None

    async def wait(self) -> None:
        """Wait for the current loop to finish; a cancelled loop counts as finished."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def play(self) -> None:
        """Start the loop and wait until it ends (pause, stop, or completion)."""
        self.start()
        await self.wait()

    def close(self) -> None:
        """Cancel any pending tick and detach from the engine."""
        self.cancel()
        self._unregister()

    async def _run(self, initial_delay_ms: float) -> None:
        if initial_delay_ms > 0:
            await self._sleep(initial_delay_ms / 1000.0)
        while True:
            delay_ms = self.engine.tick()
            if delay_ms is None:
                break
            await self._sleep(delay_ms / 1000.0)
