"""
Plugin Registry for logickit.

Ordered registry of activated plugins and of the build step groups they
contribute. Lives on the BuildContext; the module-level helpers act on the
current context's registry.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from logickit.errors import PluginError

from .base import Plugin, PluginHook

if TYPE_CHECKING:
    from .base import BuildStep

logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    Registry of activated plugins.

    Plugins run in registration order. Activating the same plugin twice
    registers it twice.

    Example:
        registry = PluginRegistry()
        registry.activate(Plugin(name="listeners", after_mount=start_listeners))

        registry.run(PluginHook.AFTER_MOUNT, logic)
    """

    def __init__(self) -> None:
        self.activated: list[Plugin] = []
        self.build_order: list[str] = []
        self.build_steps: dict[str, list[BuildStep]] = {}

    def activate(self, plugin: Plugin) -> None:
        """
        Activate a plugin.

        Merges the plugin's step groups into the global build order and
        appends its step functions to their groups.

        Args:
            plugin: Plugin to activate

        Raises:
            PluginError: If the plugin has no name or a step is not callable
        """
        if not isinstance(plugin, Plugin):
            raise PluginError(f"Expected a Plugin, got {type(plugin).__name__}")
        if not plugin.name:
            raise PluginError("Plugin must have a name")

        steps_by_group = {group: plugin.steps_for(group) for group in plugin.build_steps}
        for group, steps in steps_by_group.items():
            for step in steps:
                if not callable(step):
                    raise PluginError(
                        f"Build step for group '{group}' of plugin '{plugin.name}' is not callable"
                    )

        for group, anchor in plugin.build_order.items():
            self._insert_group(group, anchor or {})

        for group, steps in steps_by_group.items():
            self.build_steps.setdefault(group, []).extend(steps)

        self.activated.append(plugin)
        logger.info(f"[plugins] Activated plugin: {plugin.name}")

    def _insert_group(self, group: str, anchor: Mapping[str, str]) -> None:
        if group in self.build_order:
            return

        before = anchor.get("before")
        after = anchor.get("after")
        if before and before in self.build_order:
            index = self.build_order.index(before)
        elif after and after in self.build_order:
            index = self.build_order.index(after) + 1
        else:
            if before or after:
                logger.warning(
                    f"[plugins] Anchor '{before or after}' for step group '{group}' "
                    f"not found, appending"
                )
            index = len(self.build_order)

        self.build_order.insert(index, group)

    def run(self, hook: PluginHook | str, *args: Any) -> None:
        """
        Call a hook on every activated plugin that implements it.

        Return values are ignored. Exceptions propagate to the caller.

        Args:
            hook: Hook name
            *args: Positional arguments passed to each hook
        """
        hook = PluginHook(hook)
        for plugin in list(self.activated):
            func = plugin.get_hook(hook)
            if func is not None:
                func(*args)

    def steps_in_order(self) -> list[tuple[str, list[BuildStep]]]:
        """Step groups in build order with their step functions."""
        return [(group, self.build_steps.get(group, [])) for group in self.build_order]

    def clear(self) -> None:
        """
        Deactivate all plugins.

        Calls every plugin's clear_cache hook first. Used for teardown in tests.
        """
        self.run(PluginHook.CLEAR_CACHE)
        self.activated = []
        self.build_order = []
        self.build_steps = {}
        logger.debug("[plugins] Cleared all activated plugins")

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.activated]


def activate_plugin(plugin: Plugin) -> None:
    """Activate a plugin on the current context."""
    from logickit.context import get_context

    get_context().plugins.activate(plugin)


def clear_activated_plugins() -> None:
    """Clear all plugins on the current context."""
    from logickit.context import get_context

    get_context().plugins.clear()


def run_plugins(hook: PluginHook | str, *args: Any) -> None:
    """Run a hook on the current context's plugins."""
    from logickit.context import get_context

    get_context().plugins.run(hook, *args)
