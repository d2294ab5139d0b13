"""
Logic Builder.

Turns a list of inputs into a logic exactly once per path string:

    resolve key -> resolve path -> cache lookup
        miss: build (defaults, hooks, steps per input, self connection), cache
        hit:  refresh props
    -> auto-connect to the logic being built or the logic whose listener runs

Usage:
    logic = get_built_logic([counter_input], props={"id": 7})
    assert get_built_logic([counter_input], props={"id": 7}) is logic
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from logickit.context import BuildContext, get_context
from logickit.errors import CircularBuildError, PluginError
from logickit.plugins import PluginHook

from .connections import add_connection
from .inputs import iter_extends
from .logic import RESERVED_ATTRIBUTES, Logic
from .mount import MountManager
from .path import get_path_for_input, path_to_string, resolve_key

logger = logging.getLogger(__name__)


class LogicBuilder:
    """
    Builds, caches and connects logic on a BuildContext.

    The builder holds no state of its own; everything lives on the context,
    so any number of builders may share one context.
    """

    def __init__(self, context: BuildContext | None = None):
        self.context = context if context is not None else get_context()
        self.mounts = MountManager(self.context)

    def resolve_path(self, inputs: Sequence[Any], props: Any) -> tuple[Any, tuple[Any, ...], str]:
        """
        Resolve key, path and path string for a build request.

        Raises:
            ValueError: If `inputs` is empty
            MissingKeyError: If the first input's key function yields no key
        """
        if not inputs:
            raise ValueError("At least one input is required to build logic")

        input = inputs[0]
        key = resolve_key(input, props)
        path = get_path_for_input(input, props, key, self.context)
        return key, path, path_to_string(path, self.context.options.path_separator)

    def get_built_logic(
        self,
        inputs: Sequence[Any],
        props: Any = None,
        wrapper: Any = None,
        auto_connect_in_listener: bool = True,
    ) -> Logic:
        """
        Get the logic for `inputs` and `props`, building it if needed.

        Args:
            inputs: Input specs, the first one determines key and path
            props: Props for this request; replace the props of a cached logic
            wrapper: Identity of the requester, stored on a newly built logic
            auto_connect_in_listener: Connect and mount the logic when it is
                requested from a running listener

        Returns:
            The cached logic for the resolved path string
        """
        inputs = list(inputs)
        key, path, path_string = self.resolve_path(inputs, props)
        cache = self.context.build.cache

        logic = cache.get(path_string)
        if logic is None:
            building = [b.path_string for b in self.context.build.heap]
            if path_string in building:
                raise CircularBuildError(path_string, building)

            logic = self.build_logic(inputs, path, path_string, key, props, wrapper)
            cache[path_string] = logic
        else:
            logic.props = props
            if self.context.options.debug:
                logger.debug(f"[builder] Reusing logic: {path_string}")

        if self.context.options.auto_connect:
            self._auto_connect(logic, auto_connect_in_listener)

        return logic

    def build_logic(
        self,
        inputs: list[Any],
        path: tuple[Any, ...],
        path_string: str,
        key: Any,
        props: Any,
        wrapper: Any,
    ) -> Logic:
        """
        Build a logic. Does not check or write the cache.

        Exceptions from hooks and steps propagate after the build heap has
        been restored.
        """
        logic = Logic(
            key=key,
            path=path,
            path_string=path_string,
            props=props,
            wrapper=wrapper,
            builder=self,
        )
        self.apply_defaults(logic)

        plugins = self.context.plugins
        with self.context.building(logic):
            plugins.run(PluginHook.BEFORE_BUILD, logic, inputs)

            for input in inputs:
                self.apply_input(logic, input)

            # Added last so dependencies come first in iteration order
            logic.connections[logic.path_string] = logic

            plugins.run(PluginHook.AFTER_BUILD, logic, inputs)

        logger.debug(f"[builder] Built logic: {path_string}")
        return logic

    def apply_defaults(self, logic: Logic) -> None:
        """Merge the defaults of all plugins onto `logic`, later plugins winning."""
        for plugin in self.context.plugins.activated:
            for name, value in plugin.resolve_defaults().items():
                if name in RESERVED_ATTRIBUTES or name.startswith("_"):
                    raise PluginError(
                        f"Plugin '{plugin.name}' cannot set default for reserved attribute '{name}'"
                    )
                setattr(logic, name, value)

    def apply_input(self, logic: Logic, input: Any) -> Logic:
        """
        Run all build steps for one input, then for each input it extends.
        """
        plugins = self.context.plugins
        plugins.run(PluginHook.BEFORE_LOGIC, logic, input)

        for _group, steps in plugins.steps_in_order():
            for step in steps:
                step(logic, input)

        plugins.run(PluginHook.AFTER_LOGIC, logic, input)

        for inner in iter_extends(input):
            self.apply_input(logic, inner)

        return logic

    def _auto_connect(self, logic: Logic, auto_connect_in_listener: bool) -> None:
        building = self.context.building_logic
        if building is not None:
            # Dependencies of a logic under construction always follow its lifetime
            if logic.path_string not in building.connections:
                add_connection(building, logic)
            return

        running = self.context.running_logic
        if auto_connect_in_listener and running is not None:
            if logic.path_string not in running.connections:
                add_connection(running, logic)
                # Unmounted through the connection when `running` unmounts
                count = self.context.mount.counter.get(running.path_string, 1)
                self.mounts.mount_logic(logic, count)


def get_built_logic(
    inputs: Sequence[Any],
    props: Any = None,
    wrapper: Any = None,
    auto_connect_in_listener: bool = True,
) -> Logic:
    """Get or build logic on the current context. See LogicBuilder.get_built_logic."""
    return LogicBuilder(get_context()).get_built_logic(
        inputs, props, wrapper, auto_connect_in_listener
    )
