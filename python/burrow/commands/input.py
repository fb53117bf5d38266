"""Input buffer and history commands."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..context import CommandContext
from ..options import Flag, OptionSchema, ParsedOptions
from ..output import add_line_numbers, emit_error
from ..signals import Skip
from .base import Command
from .helpers import render_output

_RANGE = re.compile(r"^(-?\d+)(?:(\.\.\.?)(-?\d+))?$")


def parse_history_range(text: str) -> Optional[Tuple[int, Optional[int], bool]]:
    """``N``, ``N..M`` (inclusive) or ``N...M`` (exclusive) as ``(start, stop, exclusive)``."""
    match = _RANGE.match(text.strip())
    if not match:
        return None
    start = int(match.group(1))
    if match.group(2) is None:
        return start, None, False
    return start, int(match.group(3)), match.group(2) == "..."


def history_slice(bounds: Tuple[int, Optional[int], bool], count: int) -> Tuple[int, int]:
    """Resolve parsed bounds against *count* entries as a half-open slice."""
    start, stop, exclusive = bounds
    if start < 0:
        start += count
    if stop is None:
        stop = start + 1
    else:
        # Negative ends count from the newest entry before exclusivity applies.
        if stop < 0:
            stop += count
        if not exclusive:
            stop += 1
    return max(start, 0), max(stop, 0)


class ClearBufferCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "!",
            "Clear the input buffer. Useful if the parsing process goes wrong and you get stuck in the read loop.",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        ctx.control.pending_buffer.clear()
        ctx.puts("Input buffer cleared!")


class HistCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "hist",
            "Show and replay input history.",
            options=OptionSchema(
                [Flag("r", "replay", "The line (or range of lines) to replay.", takes_value=True, metavar="RANGE")],
                help=True,
            ),
            usage="Usage: hist [-r START..END]",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        history = ctx.state.history
        entries: List[str] = history.snapshot() if history is not None else []
        if not opts.given("replay"):
            render_output(ctx, add_line_numbers("\n".join(entries), 0))
            return None
        bounds = parse_history_range(opts.replay)
        if bounds is None:
            emit_error(ctx.output, f"invalid history range: {opts.replay}")
            return Skip()
        # The hist command itself is the newest entry; never replay it.
        if history is not None and entries and entries[-1] == ctx.line.strip():
            entries = entries[:-1]
        start, stop = history_slice(bounds, len(entries))
        selected = entries[start:stop]
        if not selected:
            emit_error(ctx.output, f"no history in range {opts.replay}")
            return Skip()
        ctx.state.replay.extend(selected)
        return None
