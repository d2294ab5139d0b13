"""
The Logic object.

A logic is created once per path string by the LogicBuilder. Build steps
and plugin defaults add attributes to it freely; the identity attributes
below are fixed for its lifetime except `props`, which each build request
refreshes.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .builder import LogicBuilder

# Attributes plugin defaults may not overwrite
RESERVED_ATTRIBUTES = frozenset(
    {
        "key",
        "path",
        "path_string",
        "props",
        "wrapper",
        "connections",
        "extend",
        "mount",
        "is_mounted",
    }
)


class Logic:
    """
    A built, path-identified logic.

    Attributes:
        key: Instance key resolved from props (None for unkeyed inputs)
        path: Identity segments
        path_string: Joined path, the cache and connection key
        props: Props of the most recent build request
        wrapper: Identity of the producer that requested the build
        connections: path string -> logic this logic keeps mounted,
            always including itself once built
    """

    def __init__(
        self,
        *,
        key: Any,
        path: tuple[Any, ...],
        path_string: str,
        props: Any,
        wrapper: Any,
        builder: LogicBuilder,
    ):
        self.key = key
        self.path = path
        self.path_string = path_string
        self.props = props
        self.wrapper = wrapper
        self.connections: dict[str, Logic] = {}
        self._builder = builder

    def extend(self, input: Any) -> Logic:
        """Apply one more input to this already built logic."""
        self._builder.apply_input(self, input)
        return self

    def is_mounted(self) -> bool:
        return self._builder.mounts.is_mounted(self)

    def mount(self, callback: Callable[[Logic], Any] | None = None) -> Any:
        """
        Mount this logic.

        Without a callback, returns a function that unmounts it. With a
        callback, calls it with the logic and unmounts afterwards:
        - plain return value: unmounted before mount() returns the value
        - awaitable return value: unmounted once it settles; inside a running
          event loop mount() returns a Task that is already scheduled,
          otherwise a coroutine that must be awaited for the unmount to happen

        Example:
            unmount = logic.mount()
            ...
            unmount()

            value = logic.mount(lambda logic: logic.props["id"])
            value = await logic.mount(fetch_async)
        """
        mounts = self._builder.mounts
        mounts.mount_logic(self)

        if callback is None:
            return lambda: mounts.unmount_logic(self)

        try:
            response = callback(self)
        except BaseException:
            mounts.unmount_logic(self)
            raise

        if inspect.isawaitable(response):
            pending = self._unmount_after(response)
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                return pending
            return asyncio.ensure_future(pending)

        mounts.unmount_logic(self)
        return response

    async def _unmount_after(self, response: Any) -> Any:
        try:
            return await response
        finally:
            self._builder.mounts.unmount_logic(self)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "path_string" and "path_string" in self.__dict__:
            raise AttributeError("path_string cannot be changed after creation")
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        return f"Logic(path_string={self.path_string!r})"
