"""Abstract reader commands and their dispatch onto a PlaybackEngine.

WHY: Keyboards, remote controls and chat bots all boil down to the same
handful of intents. Mapping raw input to an intent is the caller's job;
this module turns an intent into the right engine call so every input
surface shares one set of semantics (jump distance, speed step, toggle).

HOW: Command is a closed enum. apply_command() looks at the command and
the engine's state and calls exactly one engine method.

RULES:
- TOGGLE pauses while reading and resumes otherwise (errors propagate)
- SPEED_UP / SPEED_DOWN move by ``amount`` steps (default speed_increment)
- JUMP_BACK / JUMP_FORWARD move by ``amount`` words (default jump_distance)
- Engine errors are never caught here; the caller decides what to surface
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

from focus_reader.playback.engine import PlaybackEngine


class Command(str, enum.Enum):
    PAUSE = "pause"
    RESUME = "resume"
    TOGGLE = "toggle"
    SPEED_UP = "speed-up"
    SPEED_DOWN = "speed-down"
    JUMP_BACK = "jump-back"
    JUMP_FORWARD = "jump-forward"


@dataclass(frozen=True)
class ControlConfig:
    """Default magnitudes for commands sent without an explicit amount."""

    jump_distance: int = 5
    speed_increment: int = 1

    def __post_init__(self) -> None:
        if self.jump_distance < 1:
            raise ValueError("jump_distance must be >= 1")
        if self.speed_increment < 1:
            raise ValueError("speed_increment must be >= 1")


DEFAULT_CONTROLS = ControlConfig()


def apply_command(
    engine: PlaybackEngine,
    command: Union[Command, str],
    amount: Optional[int] = None,
    config: ControlConfig = DEFAULT_CONTROLS,
) -> None:
    """Dispatch one abstract command to the engine.

    Raises:
        ValueError: Unknown command string.
        SessionStateError / PlaybackValidationError: from the engine.
    """
    command = Command(command)

    if command is Command.PAUSE:
        engine.pause_reading()
    elif command is Command.RESUME:
        engine.resume_reading()
    elif command is Command.TOGGLE:
        if engine.is_reading:
            engine.pause_reading()
        else:
            engine.resume_reading()
    elif command is Command.SPEED_UP:
        engine.adjust_speed(config.speed_increment if amount is None else amount)
    elif command is Command.SPEED_DOWN:
        engine.adjust_speed(-(config.speed_increment if amount is None else amount))
    elif command is Command.JUMP_BACK:
        distance = config.jump_distance if amount is None else amount
        engine.jump_to_position(engine.current_position - distance)
    elif command is Command.JUMP_FORWARD:
        distance = config.jump_distance if amount is None else amount
        engine.jump_to_position(engine.current_position + distance)
