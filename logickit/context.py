"""
Build Context for logickit.

The context owns all shared state of the engine:
- build.cache: path string -> built logic, the single source of identity
- build.heap: logic currently under construction (LIFO)
- run.heap: logic whose listener or mount hook is currently executing (LIFO)
- mount.counter: path string -> mount reference count
- plugins: activated plugins and build steps

A process-wide instance is created lazily. Tests swap it with
reset_context() or set_context().
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from logickit.config import EngineOptions
from logickit.plugins import PluginRegistry

if TYPE_CHECKING:
    from logickit.build.logic import Logic

logger = logging.getLogger(__name__)


@dataclass
class BuildState:
    """Logic under construction and the cache of finished logic."""

    heap: list[Logic] = field(default_factory=list)
    cache: dict[str, Logic] = field(default_factory=dict)


@dataclass
class RunState:
    """Logic whose listeners are currently executing."""

    heap: list[Logic] = field(default_factory=list)


@dataclass
class MountState:
    """Mount reference counts by path string."""

    counter: dict[str, int] = field(default_factory=dict)


@dataclass
class InputState:
    """
    Paths synthesized for inputs that declare none, by input identity.

    Every such input stays referenced until clear_cache(), so inputs created
    anew for each build request grow this state without bound. Declare a
    path on inputs that are not module-level constants.
    """

    inline_path_counter: int = 0
    # id(input) -> (input, number); the input is held so its id is not reused
    inline_paths: dict[int, tuple[Any, int]] = field(default_factory=dict)


@dataclass
class BuildContext:
    """
    Shared state for building, running and mounting logic.

    No caller outside the engine should mutate the heaps directly; use the
    building() and running() scopes, which always pop what they pushed.
    """

    options: EngineOptions = field(default_factory=EngineOptions)
    plugins: PluginRegistry = field(default_factory=PluginRegistry)
    build: BuildState = field(default_factory=BuildState)
    run: RunState = field(default_factory=RunState)
    mount: MountState = field(default_factory=MountState)
    input: InputState = field(default_factory=InputState)

    @contextmanager
    def building(self, logic: Logic) -> Iterator[Logic]:
        """Scope during which `logic` is on top of the build heap."""
        self.build.heap.append(logic)
        try:
            yield logic
        finally:
            self.build.heap.pop()

    @contextmanager
    def running(self, logic: Logic) -> Iterator[Logic]:
        """
        Scope during which `logic` is on top of the run heap.

        Wrap listener execution in this so logic built by the listener is
        connected to (and mounted with) the running logic.
        """
        self.run.heap.append(logic)
        try:
            yield logic
        finally:
            self.run.heap.pop()

    @property
    def building_logic(self) -> Logic | None:
        """Logic on top of the build heap, if any."""
        return self.build.heap[-1] if self.build.heap else None

    @property
    def running_logic(self) -> Logic | None:
        """Logic on top of the run heap, if any."""
        return self.run.heap[-1] if self.run.heap else None

    def clear_cache(self) -> None:
        """Forget all built logic and mount counts."""
        self.build.cache.clear()
        self.mount.counter.clear()
        self.input = InputState()


# Global context instance
_context: BuildContext | None = None


def get_context() -> BuildContext:
    """
    Get the current build context.

    Creates the context on first access (lazy initialization).
    """
    global _context
    if _context is None:
        _context = BuildContext()
    return _context


def set_context(context: BuildContext) -> BuildContext:
    """Install `context` as the current build context and return it."""
    global _context
    _context = context
    return context


def reset_context(options: EngineOptions | None = None) -> BuildContext:
    """
    Tear down the current context and install a fresh one.

    Calls every activated plugin's clear_cache hook.

    Args:
        options: Options for the new context (defaults if None)

    Returns:
        The new context
    """
    global _context
    if _context is not None:
        _context.plugins.clear()
        _context.clear_cache()
    _context = BuildContext(options=options or EngineOptions())
    logger.info("[context] Build context reset")
    return _context
