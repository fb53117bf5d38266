"""Exception types raised by the burrow engine."""

from __future__ import annotations

from typing import Optional


class BurrowError(Exception):
    """Base class for shell engine errors."""


class UnknownCommand(BurrowError):
    """Raised when an alias targets a command that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown command: {name}")
        self.name = name


class OptionError(BurrowError):
    """Base class for option parsing failures."""


class UnknownOption(OptionError):
    def __init__(self, token: str) -> None:
        super().__init__(f"unknown option: {token}")
        self.token = token


class MissingValue(OptionError):
    def __init__(self, flag: str) -> None:
        super().__init__(f"missing value for option: {flag}")
        self.flag = flag


class InvalidNestingLevel(BurrowError):
    """Raised when a breakout targets a level outside the session stack."""

    def __init__(self, level: int, depth: int) -> None:
        if depth > 0:
            message = f"Invalid nest level. Must be between 0 and {depth}. Got {level}."
        else:
            message = f"Invalid nest level. Only level 0 is active. Got {level}."
        super().__init__(message)
        self.level = level
        self.depth = depth


class EvaluationError(BurrowError):
    """Wraps an exception raised while evaluating source text."""

    def __init__(self, original: BaseException, source: Optional[str] = None) -> None:
        super().__init__(f"{type(original).__name__}: {original}")
        self.original = original
        self.source = source


__all__ = [
    "BurrowError",
    "UnknownCommand",
    "OptionError",
    "UnknownOption",
    "MissingValue",
    "InvalidNestingLevel",
    "EvaluationError",
]
