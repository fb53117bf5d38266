"""Control-flow signals returned by command bodies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


class _NoValue:
    """Marker for a Continue signal that carries nothing to display."""

    _instance = None

    def __new__(cls) -> "_NoValue":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_VALUE"

    def __bool__(self) -> bool:
        return False


NO_VALUE = _NoValue()


@dataclass(frozen=True)
class Continue:
    """Ordinary completion; ``value`` is shown when present."""

    value: Any = NO_VALUE

    @property
    def has_value(self) -> bool:
        return self.value is not NO_VALUE


@dataclass(frozen=True)
class Skip:
    """Abandon the rest of the body and resume reading at the same level."""


@dataclass(frozen=True)
class Breakout:
    """Leave nested sessions until ``target_level`` is reached."""

    target_level: int
    value: Any = None


ControlSignal = Union[Continue, Skip, Breakout]


def is_signal(obj: Any) -> bool:
    return isinstance(obj, (Continue, Skip, Breakout))


__all__ = ["NO_VALUE", "Continue", "Skip", "Breakout", "ControlSignal", "is_signal"]
