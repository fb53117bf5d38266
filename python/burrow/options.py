"""Declarative per-command option schemas and the token parser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from .errors import MissingValue, UnknownOption

_NEGATIVE_NUMBER = re.compile(r"^-\d+(\.\d+)?$")


@dataclass(frozen=True)
class Flag:
    """One command-line switch: ``-x``/``--long``, boolean or value-taking."""

    short: Optional[str] = None
    long: Optional[str] = None
    help: str = ""
    takes_value: bool = False
    default: Any = None
    is_help: bool = False
    metavar: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.short and not self.long:
            raise ValueError("flag needs a short or long form")
        if self.short is not None:
            object.__setattr__(self, "short", self.short.lstrip("-"))
            if len(self.short) != 1:
                raise ValueError(f"short flag must be a single character: {self.short!r}")
        if self.long is not None:
            object.__setattr__(self, "long", self.long.lstrip("-"))

    @property
    def key(self) -> str:
        """Identifier used in ParsedOptions (long form with underscores)."""
        if self.long:
            return self.long.replace("-", "_")
        return self.short or ""

    @property
    def signature(self) -> str:
        forms = []
        if self.short:
            forms.append(f"-{self.short}")
        if self.long:
            forms.append(f"--{self.long}")
        text = ", ".join(forms)
        if self.takes_value:
            text += f" {self.metavar or self.key.upper()}"
        return text

    @property
    def initial(self) -> Any:
        if self.takes_value:
            return self.default
        return bool(self.default)


HELP_FLAG = Flag("h", "help", "This message.", is_help=True)


class OptionSchema:
    """Ordered set of flags with unique short and long forms."""

    def __init__(self, flags: Iterable[Flag] = (), *, help: bool = False) -> None:
        self._flags: List[Flag] = []
        self._short: Dict[str, Flag] = {}
        self._long: Dict[str, Flag] = {}
        for entry in flags:
            self.add(entry)
        if help:
            self.add(HELP_FLAG)

    def add(self, entry: Flag) -> None:
        if entry.short and entry.short in self._short:
            raise ValueError(f"duplicate short flag -{entry.short}")
        if entry.long and entry.long in self._long:
            raise ValueError(f"duplicate long flag --{entry.long}")
        self._flags.append(entry)
        if entry.short:
            self._short[entry.short] = entry
        if entry.long:
            self._long[entry.long] = entry

    def find_short(self, char: str) -> Optional[Flag]:
        return self._short.get(char)

    def find_long(self, name: str) -> Optional[Flag]:
        return self._long.get(name)

    @property
    def has_help(self) -> bool:
        return any(entry.is_help for entry in self._flags)

    def help_tokens(self) -> List[str]:
        tokens: List[str] = []
        for entry in self._flags:
            if entry.is_help:
                if entry.short:
                    tokens.append(f"-{entry.short}")
                if entry.long:
                    tokens.append(f"--{entry.long}")
        return tokens

    def __iter__(self) -> Iterator[Flag]:
        return iter(self._flags)

    def __len__(self) -> int:
        return len(self._flags)

    def format_usage(self, banner: Optional[str] = None) -> str:
        lines: List[str] = []
        if banner:
            lines.append(banner.rstrip("\n"))
        for entry in self._flags:
            lines.append(f"    {entry.signature:<30} {entry.help}".rstrip())
        return "\n".join(lines)


class ParsedOptions:
    """Flag values keyed by flag identifier plus leftover positional tokens."""

    def __init__(self, schema: Optional[OptionSchema] = None) -> None:
        self._values: Dict[str, Any] = {}
        self._given: set[str] = set()
        self.args: List[str] = []
        self.help_requested = False
        for entry in schema or ():
            if not entry.is_help:
                self._values[entry.key] = entry.initial

    def _set(self, entry: Flag, value: Any) -> None:
        self._values[entry.key] = value
        self._given.add(entry.key)

    def given(self, key: str) -> bool:
        """True when the flag appeared in the token list."""
        return key.replace("-", "_") in self._given

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key.replace("-", "_"), default)

    def __getitem__(self, key: str) -> Any:
        return self._values[key.replace("-", "_")]

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get("_values", {})
        if name in values:
            return values[name]
        raise AttributeError(name)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.replace("-", "_") in self._given

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"ParsedOptions({self._values!r}, args={self.args!r})"


def parse(schema: Optional[OptionSchema], tokens: Sequence[str]) -> ParsedOptions:
    """Walk *tokens* left to right, matching them against *schema*."""
    parsed = ParsedOptions(schema)
    tokens = list(tokens)
    if not schema:
        parsed.args = tokens
        return parsed
    # A help token anywhere wins, even as a flag value or after "--".
    help_tokens = schema.help_tokens()
    if help_tokens and any(token in help_tokens for token in tokens):
        parsed.help_requested = True
        return parsed
    idx = 0
    while idx < len(tokens):
        token = tokens[idx]
        idx += 1
        if token == "--":
            parsed.args.extend(tokens[idx:])
            break
        if token.startswith("--"):
            name, eq, inline = token[2:].partition("=")
            entry = schema.find_long(name)
            if entry is None:
                raise UnknownOption(token)
            if entry.is_help:
                parsed.help_requested = True
                return parsed
            if not entry.takes_value:
                if eq:
                    raise UnknownOption(token)
                parsed._set(entry, True)
                continue
            if eq:
                parsed._set(entry, inline)
            elif idx < len(tokens):
                parsed._set(entry, tokens[idx])
                idx += 1
            else:
                raise MissingValue(f"--{entry.long}")
            continue
        if token.startswith("-") and len(token) > 1 and not _NEGATIVE_NUMBER.match(token):
            cluster = token[1:]
            pos = 0
            while pos < len(cluster):
                char = cluster[pos]
                pos += 1
                entry = schema.find_short(char)
                if entry is None:
                    raise UnknownOption(f"-{char}")
                if entry.is_help:
                    parsed.help_requested = True
                    return parsed
                if not entry.takes_value:
                    parsed._set(entry, True)
                    continue
                rest = cluster[pos:]
                if rest:
                    parsed._set(entry, rest)
                elif idx < len(tokens):
                    parsed._set(entry, tokens[idx])
                    idx += 1
                else:
                    raise MissingValue(f"-{char}")
                break
            continue
        parsed.args.append(token)
    return parsed


__all__ = ["Flag", "HELP_FLAG", "OptionSchema", "ParsedOptions", "parse"]
