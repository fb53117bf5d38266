"""burrow CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .context import SessionState
from .history import DEFAULT_HISTORY_LIMIT, HistoryStore, default_history_path
from .render import Renderer
from .repl import ScriptSource, Shell

LOG = logging.getLogger("burrow.cli")

DEFAULT_RC_PATH = Path.home() / ".burrowrc"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _default_rc_path() -> Path:
    override = os.environ.get("BURROW_RC")
    return Path(override).expanduser() if override else DEFAULT_RC_PATH


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="burrow interactive Python shell")
    parser.add_argument("--log-level", default=os.environ.get("BURROW_LOG", "WARNING"), help="Logging level (default WARNING)")
    parser.add_argument(
        "-c",
        "--command",
        help="Execute a single line non-interactively (quote the command string)",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=default_history_path(),
        help="Path to the input history file",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        default=DEFAULT_HISTORY_LIMIT,
        help="Maximum number of history entries kept",
    )
    parser.add_argument("--rc", type=Path, default=_default_rc_path(), help="Startup script run before the first prompt")
    parser.add_argument("--no-rc", action="store_true", help="Do not run the startup script")
    parser.add_argument("--no-color", action="store_true", help="Disable syntax highlighting")
    parser.add_argument("--no-pager", action="store_true", help="Never page long output")
    parser.add_argument("--simple-prompt", action="store_true", help="Start with the simple prompt")
    parser.add_argument(
        "--strict-commands",
        action="store_true",
        help="Report unknown commands instead of evaluating them as Python",
    )
    return parser


def build_state(args: argparse.Namespace, *, history: Optional[HistoryStore] = None) -> SessionState:
    state = SessionState.create(
        history=history,
        renderer=Renderer(color=not args.no_color, pager=not args.no_pager),
        eval_unmatched=not args.strict_commands,
    )
    if args.simple_prompt:
        state.set_prompt_style("simple")
    return state


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    if args.command:
        state = build_state(args)
        shell = Shell(state, line_source=ScriptSource(()))
        return _run_single_command(shell, args.command)
    history = HistoryStore(str(args.history), limit=args.history_limit)
    shell = Shell(build_state(args, history=history))
    try:
        if not args.no_rc and args.rc.is_file():
            _run_script(shell, args.rc)
        return shell.run()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        print()
        return 0


def _run_single_command(shell: Shell, command_line: str) -> int:
    if not command_line.strip():
        return 0
    try:
        shell.handle(command_line)
    except SystemExit as exc:
        return int(exc.code or 0)
    if shell.state.control.pending_buffer:
        print("Parse error: incomplete input")
        return 1
    return shell.status


def _run_script(shell: Shell, path: Path) -> int:
    """Run each line of *path* through the shell; non-zero if any line failed."""
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        LOG.warning("cannot read startup script %s: %s", path, exc)
        return 1
    status = 0
    for number, line in enumerate(lines, start=1):
        if not line.strip() or line.lstrip().startswith("#"):
            if not shell.state.control.pending_buffer:
                continue
        shell.handle(line)
        if shell.status:
            LOG.debug("%s:%d failed: %s", path, number, line)
            status = shell.status
    shell.state.control.pending_buffer.clear()
    return status


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
