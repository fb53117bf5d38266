"""Session stack for nested sessions and breakout validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Tuple

from .errors import InvalidNestingLevel
from .output import view_clip
from .scope import Scope

LOGGER = logging.getLogger("burrow.nesting")


@dataclass
class SessionFrame:
    """One level of nested interactive context."""

    level: int
    receiver: Any
    scope: Scope
    label: str = ""


class SessionStack:
    """Ordered frames of the active sessions; frame 0 is always present."""

    def __init__(self, toplevel: Scope) -> None:
        self._frames: List[SessionFrame] = [
            SessionFrame(0, toplevel.receiver, toplevel, label=view_clip(toplevel.receiver))
        ]

    @property
    def depth(self) -> int:
        return len(self._frames) - 1

    @property
    def current(self) -> SessionFrame:
        return self._frames[-1]

    @property
    def frames(self) -> Tuple[SessionFrame, ...]:
        return tuple(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[SessionFrame]:
        return iter(tuple(self._frames))

    def __getitem__(self, level: int) -> SessionFrame:
        return self._frames[level]

    def push(self, receiver: Any, scope: Scope) -> SessionFrame:
        frame = SessionFrame(self.depth + 1, receiver, scope, label=view_clip(receiver))
        self._frames.append(frame)
        LOGGER.debug("entered level %d on %s", frame.level, frame.label)
        return frame

    def contains(self, frame: SessionFrame) -> bool:
        return frame.level < len(self._frames) and self._frames[frame.level] is frame

    def release(self, frame: SessionFrame) -> None:
        """Drop *frame* and everything above it, if it is still on the stack."""
        if frame.level == 0 or not self.contains(frame):
            return
        del self._frames[frame.level:]
        LOGGER.debug("left level %d", frame.level)

    def validate(self, level: int) -> None:
        if not isinstance(level, int) or level < 0 or level > self.depth:
            raise InvalidNestingLevel(level, self.depth)

    def breakout(self, target_level: int, value: Any = None) -> Any:
        """Unwind to *target_level* and return the value it receives.

        When the target is the current level nothing is popped; the loop
        running that level ends with *value*. Lower targets pop every frame
        above them. Invalid targets raise InvalidNestingLevel and leave the
        stack untouched.
        """
        self.validate(target_level)
        if target_level < self.depth:
            del self._frames[target_level + 1:]
            LOGGER.debug("breakout to level %d", target_level)
        return value


__all__ = ["SessionFrame", "SessionStack"]
