"""Command descriptor for burrow."""

from __future__ import annotations

import importlib.util
import shutil
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Pattern, Sequence

from ..context import CommandContext
from ..options import OptionSchema, ParsedOptions

Handler = Callable[[CommandContext, ParsedOptions], Any]


@dataclass(eq=False)
class Command:
    """A registered command: metadata, option schema and handler.

    Built-in commands subclass this and implement ``run``; commands added
    at runtime pass a plain ``handler`` function instead.
    """

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)
    options: OptionSchema = field(default_factory=OptionSchema)
    usage: str = ""
    hidden: bool = False
    requires: Optional[str] = None
    keep_retval: bool = False
    pattern: Optional[Pattern[str]] = None
    display_name: Optional[str] = None
    handler: Optional[Handler] = None

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> Any:
        if self.handler is None:
            raise NotImplementedError("Command must implement run() or provide a handler")
        return self.handler(ctx, opts)

    @property
    def listing_name(self) -> str:
        return self.display_name or self.name

    def format_help(self, aliases: Sequence[str] = ()) -> str:
        name = self.listing_name
        if aliases:
            name = f"{name} ({', '.join(aliases)})"
        text = f"{name:<28} {self.description}"
        if self.requires and not self.requirement_met():
            text += f" (requires {self.requires})"
        return text.rstrip()

    def format_usage(self) -> str:
        banner = self.usage or f"Usage: {self.name}"
        if not len(self.options):
            return banner
        return self.options.format_usage(banner)

    def match_pattern(self, line: str) -> Optional[str]:
        """Remainder text when this pattern command accepts *line*."""
        if self.pattern is None:
            return None
        match = self.pattern.match(line)
        if not match:
            return None
        if match.groups():
            return match.group(1) or ""
        return line[match.end():].strip()

    def requirement_met(self) -> bool:
        if not self.requires:
            return True
        if shutil.which(self.requires):
            return True
        try:
            return importlib.util.find_spec(self.requires) is not None
        except (ImportError, ValueError):
            return False


__all__ = ["Command", "Handler"]
