"""Shell state and the per-invocation command context."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Mapping, Optional

from .evaluator import Evaluator, PythonEvaluator
from .history import HistoryStore
from .nesting import SessionStack
from .options import ParsedOptions
from .output import OutputSink
from .render import Renderer
from .scope import Scope

if TYPE_CHECKING:  # pragma: no cover
    from .commands import CommandRegistry
    from .commands.base import Command
    from .dispatch import DispatchOutcome
    from .repl import Shell

LOGGER = logging.getLogger("burrow.context")

PROMPT_STYLES = ("default", "simple", "shell")


@dataclass
class ControlState:
    """Control fields shared between dispatch and command bodies."""

    trailing_text: str = ""
    nesting: Optional[SessionStack] = None
    pending_buffer: List[str] = field(default_factory=list)


@dataclass
class SessionState:
    """Holds shared shell state; passed by reference into dispatch."""

    registry: "CommandRegistry"
    stack: SessionStack
    evaluator: Evaluator = field(default_factory=PythonEvaluator)
    output: OutputSink = field(default_factory=OutputSink)
    renderer: Renderer = field(default_factory=Renderer)
    history: Optional[HistoryStore] = None
    prompt_style: str = "default"
    eval_unmatched: bool = True
    last_result: Any = None
    last_exception: Optional[BaseException] = None
    control: ControlState = field(default_factory=ControlState)
    replay: Deque[str] = field(default_factory=deque)
    shell: Optional["Shell"] = field(default=None, repr=False)
    input_exhausted: bool = False

    def __post_init__(self) -> None:
        self.control.nesting = self.stack

    @classmethod
    def create(
        cls,
        registry: Optional["CommandRegistry"] = None,
        *,
        namespace: Optional[Mapping[str, Any]] = None,
        scope: Optional[Scope] = None,
        **kwargs: Any,
    ) -> "SessionState":
        if registry is None:
            from .commands import build_registry

            registry = build_registry()
        toplevel = scope or Scope.create_toplevel(namespace)
        return cls(registry=registry, stack=SessionStack(toplevel), **kwargs)

    @property
    def color(self) -> bool:
        return self.renderer.color

    @color.setter
    def color(self, enabled: bool) -> None:
        self.renderer.color = bool(enabled)

    @property
    def pager(self) -> bool:
        return self.renderer.pager

    @pager.setter
    def pager(self, enabled: bool) -> None:
        self.renderer.pager = bool(enabled)

    @property
    def level(self) -> int:
        return self.stack.depth

    @property
    def target(self) -> Scope:
        return self.stack.current.scope

    def set_prompt_style(self, style: str) -> None:
        if style not in PROMPT_STYLES:
            raise ValueError(f"unknown prompt style: {style}")
        self.prompt_style = style

    def evaluate(self, source: str, scope: Optional[Scope] = None) -> Any:
        return self.evaluator.evaluate(scope or self.target, source)

    def read_line(self, prompt: str) -> str:
        """Read one line from the running shell; EOFError when none is attached."""
        if self.replay:
            return self.replay.popleft()
        if self.shell is None:
            raise EOFError
        return self.shell.read_line(prompt)


@dataclass
class CommandContext:
    """State handed to one command body; lives for a single dispatch."""

    state: SessionState
    command: "Command"
    line: str
    args: List[str]
    opts: ParsedOptions
    target: Scope

    @property
    def output(self) -> OutputSink:
        return self.state.output

    @property
    def renderer(self) -> Renderer:
        return self.state.renderer

    @property
    def control(self) -> ControlState:
        return self.state.control

    @property
    def registry(self) -> "CommandRegistry":
        return self.state.registry

    @property
    def nesting(self) -> SessionStack:
        return self.state.stack

    @property
    def level(self) -> int:
        return self.state.stack.depth

    @property
    def trailing_text(self) -> str:
        return self.control.trailing_text

    def puts(self, text: Any = "") -> None:
        self.output.puts(text)

    def eval(self, source: str, scope: Optional[Scope] = None) -> Any:
        return self.state.evaluate(source, scope or self.target)

    def eval_trailing(self) -> Any:
        """Evaluate the text after the command word; None when it is empty."""
        text = self.trailing_text.strip()
        if not text:
            return None
        return self.eval(text)

    def scope_for(self, source: str) -> Scope:
        """Child scope for the object *source* evaluates to."""
        return self.target.child(self.eval(source))

    def run(self, line: str) -> "DispatchOutcome":
        """Dispatch another command line with the same shell state."""
        from .dispatch import dispatch

        return dispatch(line, self.state)

    def start_session(self, receiver: Any) -> Any:
        shell = self.state.shell
        if shell is None:
            raise RuntimeError("no interactive shell is attached")
        return shell.start(receiver)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command.name,
            "args": list(self.args),
            "level": self.level,
            "trailing_text": self.trailing_text,
        }


__all__ = ["ControlState", "SessionState", "CommandContext", "PROMPT_STYLES"]
