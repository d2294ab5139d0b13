"""
Input specs for logickit.

An input is a declarative description of what to contribute to a logic.
The engine reads three fields itself: `key`, `path` and `extend`. All other
fields belong to the build steps. Inputs may be plain mappings or objects
with attributes; the engine never modifies them.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

_MISSING = object()


def get_input(input: Any, name: str, default: Any = None) -> Any:
    """
    Read a field from an input spec.

    Works for mappings ({"path": ...}) and attribute objects alike.
    """
    if isinstance(input, Mapping):
        return input.get(name, default)
    value = getattr(input, name, _MISSING)
    if value is _MISSING:
        return default
    return value


def iter_extends(input: Any) -> list[Any]:
    """Inputs listed under `extend`, in declaration order."""
    extend = get_input(input, "extend")
    if not extend:
        return []
    if isinstance(extend, Mapping) or not isinstance(extend, Sequence):
        return [extend]
    return list(extend)


@dataclass(frozen=True, eq=False)
class LogicInput:
    """
    Attribute-style input spec.

    Equality is identity: two LogicInput objects with the same fields are
    still different inputs and get different default paths.

    Example:
        counter = LogicInput(
            key=lambda props: props["id"],
            path=lambda props: ("counters", props["id"]),
            extra={"actions": {"increment": True}},
        )
    """

    key: Callable[[Any], Any] | None = None
    path: Sequence[Any] | Callable[[Any], Sequence[Any]] | None = None
    extend: Sequence[Any] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not dataclass fields
        extra = object.__getattribute__(self, "extra")
        try:
            return extra[name]
        except KeyError:
            raise AttributeError(name) from None
