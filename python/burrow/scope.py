"""Evaluation scopes bound to the receiver of a session frame."""

from __future__ import annotations

import builtins
import sys
import types
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

TOPLEVEL_NAME = "__burrow__"


class ReceiverNamespace(dict):
    """Local namespace that falls back to attributes of the receiver."""

    def __init__(self, receiver: Any, initial: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(initial or {})
        self.receiver = receiver
        self.setdefault("self", receiver)

    def __missing__(self, key: str) -> Any:
        try:
            return getattr(self.receiver, key)
        except AttributeError:
            raise KeyError(key) from None


@dataclass
class Scope:
    """Globals plus receiver-backed locals for one session frame.

    A top-level scope evaluates with its globals as locals so that names
    assigned at the prompt are visible to functions defined there.
    """

    receiver: Any
    globals: Dict[str, Any]
    namespace: Optional[ReceiverNamespace] = None
    file: Optional[str] = None
    line: Optional[int] = None
    function_name: Optional[str] = None
    toplevel: bool = field(default=False)

    @classmethod
    def create_toplevel(cls, namespace: Optional[Mapping[str, Any]] = None) -> "Scope":
        module = types.ModuleType(TOPLEVEL_NAME)
        module.__dict__["__builtins__"] = builtins
        if namespace:
            module.__dict__.update(namespace)
        return cls(receiver=module, globals=module.__dict__, toplevel=True)

    @classmethod
    def from_frame(cls, frame: types.FrameType) -> "Scope":
        """Build a scope from a live frame (used by ``burrow.embed``)."""
        code = frame.f_code
        location = {"file": code.co_filename, "line": frame.f_lineno}
        if code.co_name == "<module>":
            module = sys.modules.get(frame.f_globals.get("__name__", ""))
            if module is None or module.__dict__ is not frame.f_globals:
                module = types.ModuleType(frame.f_globals.get("__name__", TOPLEVEL_NAME))
            return cls(receiver=module, globals=frame.f_globals, toplevel=True, **location)
        f_locals = dict(frame.f_locals)
        receiver = f_locals.get("self")
        return cls(
            receiver=receiver,
            globals=frame.f_globals,
            namespace=ReceiverNamespace(receiver, f_locals),
            function_name=code.co_name,
            **location,
        )

    def child(self, receiver: Any) -> "Scope":
        """Scope for a nested session on *receiver*, sharing these globals."""
        return Scope(receiver=receiver, globals=self.globals, namespace=ReceiverNamespace(receiver))

    @property
    def locals(self) -> Dict[str, Any]:
        if self.namespace is None:
            return self.globals
        return self.namespace

    def set_local(self, name: str, value: Any) -> None:
        self.locals[name] = value

    def get_local(self, name: str, default: Any = None) -> Any:
        return dict.get(self.locals, name, default)

    def local_names(self) -> List[str]:
        return [name for name in dict.keys(self.locals) if name not in ("self", "__builtins__")]

    def global_names(self) -> List[str]:
        return [name for name in self.globals if name != "__builtins__"]

    def completion_names(self) -> List[str]:
        names = set(self.local_names())
        names.update(self.global_names())
        names.update(dir(builtins))
        try:
            names.update(dir(self.receiver))
        except Exception:
            pass
        return sorted(names)


__all__ = ["Scope", "ReceiverNamespace", "TOPLEVEL_NAME"]
