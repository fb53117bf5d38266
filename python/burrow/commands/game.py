"""A small number guessing game."""

from __future__ import annotations

import random

from ..context import CommandContext
from ..options import ParsedOptions
from ..output import emit_error
from ..signals import Skip
from .base import Command


class GameCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "game",
            "Guess a number between 0 and MAX (default 100).",
            usage="Usage: game [MAX]",
            hidden=True,
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        try:
            upper = int(opts.args[0]) if opts.args else 100
        except ValueError:
            emit_error(ctx.output, f"MAX must be an integer: {opts.args[0]}")
            return Skip()
        secret = random.randint(0, max(upper, 0))
        ctx.puts(f"Guess a number between 0 and {upper}. ('.' to quit)")
        attempts = 0
        while True:
            try:
                guess_text = ctx.state.read_line("game > ").strip()
            except EOFError:
                ctx.puts(f"The number was {secret}.")
                return Skip()
            if guess_text == ".":
                ctx.puts(f"The number was {secret}.")
                return Skip()
            try:
                guess = int(guess_text)
            except ValueError:
                ctx.puts("Please enter a number.")
                continue
            attempts += 1
            if guess < secret:
                ctx.puts("Too low.")
            elif guess > secret:
                ctx.puts("Too high.")
            else:
                ctx.puts(f"Well done! You guessed it in {attempts} attempts.")
                return None
