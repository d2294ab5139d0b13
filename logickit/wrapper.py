"""
Logic wrappers.

A wrapper is what an application module defines and passes around. It
holds the inputs and builds one logic per key on demand; the wrapper
itself is stored on each logic it builds.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from logickit.build import Logic, LogicBuilder
from logickit.context import BuildContext, get_context
from logickit.errors import LogicNotMountedError


class LogicWrapper:
    """
    Builds logic from a fixed list of inputs.

    Example:
        counter = logic({"key": lambda props: props["id"], "actions": {...}})

        built = counter.build({"id": 7})
        unmount = built.mount()
        assert counter.find_mounted({"id": 7}) is built
        unmount()
    """

    def __init__(self, input: Any, *, context: BuildContext | None = None):
        self.inputs: list[Any] = [input]
        self._context = context

    @property
    def context(self) -> BuildContext:
        return self._context if self._context is not None else get_context()

    def _builder(self) -> LogicBuilder:
        return LogicBuilder(self.context)

    def extend(self, input: Any) -> LogicWrapper:
        """
        Add an input to the wrapper.

        Only logic built after this call picks up the input; use
        Logic.extend() to change a logic that is already built.
        """
        self.inputs.append(input)
        return self

    def build(self, props: Any = None, auto_connect_in_listener: bool = True) -> Logic:
        """Get or build the logic for `props`."""
        return self._builder().get_built_logic(
            self.inputs, props, self, auto_connect_in_listener
        )

    def mount(self, callback: Callable[[Logic], Any] | None = None, props: Any = None) -> Any:
        """Build and mount the logic for `props`. See Logic.mount."""
        return self.build(props).mount(callback)

    def is_mounted(self, props: Any = None) -> bool:
        builder = self._builder()
        _key, _path, path_string = builder.resolve_path(self.inputs, props)
        return builder.mounts.is_mounted(path_string)

    def find_mounted(self, props: Any = None) -> Logic:
        """
        Get the mounted logic for `props` without building it.

        Raises:
            LogicNotMountedError: If that logic is not mounted
        """
        builder = self._builder()
        _key, _path, path_string = builder.resolve_path(self.inputs, props)
        built = self.context.build.cache.get(path_string)
        if built is None or not builder.mounts.is_mounted(path_string):
            raise LogicNotMountedError(f"Logic '{path_string}' is not mounted")
        if props is not None:
            built.props = props
        return built

    def __repr__(self) -> str:
        return f"LogicWrapper(inputs={len(self.inputs)})"


def logic(input: Any, *, context: BuildContext | None = None) -> LogicWrapper:
    """Create a wrapper for `input`."""
    return LogicWrapper(input, context=context)
