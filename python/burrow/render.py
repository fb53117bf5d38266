"""rich-backed highlighting, value rendering and paging."""

from __future__ import annotations

import io
import shutil
from typing import Any, Optional

from rich.console import Console
from rich.pretty import Pretty
from rich.syntax import Syntax
from rich.text import Text

from .output import OutputSink, add_line_numbers, view

SYNTAX_THEME = "ansi_dark"


class Renderer:
    """Text transforms used by commands; plain pass-through when colour is off."""

    def __init__(self, *, color: bool = True, pager: bool = True) -> None:
        self.color = color
        self.pager = pager

    @staticmethod
    def _width() -> int:
        return shutil.get_terminal_size((100, 24)).columns

    def _capture(self, renderable: Any) -> str:
        console = Console(
            file=io.StringIO(),
            force_terminal=True,
            color_system="standard",
            width=self._width(),
            highlight=False,
        )
        console.print(renderable, end="")
        return console.file.getvalue()  # type: ignore[attr-defined]

    def highlight(
        self,
        code: str,
        language: str = "python",
        *,
        line_numbers: bool = False,
        start_line: int = 1,
    ) -> str:
        if not self.color:
            return add_line_numbers(code, start_line) if line_numbers else code
        syntax = Syntax(
            code,
            language,
            theme=SYNTAX_THEME,
            line_numbers=line_numbers,
            start_line=start_line,
            background_color="default",
        )
        return self._capture(syntax)

    @staticmethod
    def guess_language(path: str, code: Optional[str] = None, override: Optional[str] = None) -> str:
        if override:
            return override
        return Syntax.guess_lexer(path, code=code)

    def value(self, value: Any) -> str:
        if not self.color:
            return view(value)
        return self._capture(Pretty(value))

    def bold(self, text: str) -> str:
        if not self.color:
            return text
        return self._capture(Text(text, style="bold"))

    def italic(self, text: str) -> str:
        if not self.color:
            return text
        return self._capture(Text(text, style="italic"))

    def page(self, output: OutputSink, text: str, *, flood: bool = False) -> None:
        """Write *text*, through the pager when it exceeds one screen."""
        height = shutil.get_terminal_size((100, 24)).lines
        if flood or not self.pager or not output.isatty() or text.count("\n") < height - 1:
            output.puts(text)
            return
        console = Console(file=output.stream, force_terminal=self.color)
        with console.pager(styles=self.color):
            console.print(Text.from_ansi(text))


__all__ = ["Renderer", "SYNTAX_THEME"]
