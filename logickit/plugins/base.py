"""
Plugin declaration for logickit.

A plugin is a record of optional hook callables drawn from a closed set
(see PluginHook), plus optional defaults and build steps. The engine never
inspects what a hook does; hooks act by mutating the logic they receive.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Step callables receive (logic, input) and mutate the logic in place
BuildStep = Callable[[Any, Any], None]


class PluginHook(str, Enum):
    """Hook names a plugin may implement, with their call signatures."""

    BEFORE_BUILD = "before_build"  # (logic, inputs)
    AFTER_BUILD = "after_build"  # (logic, inputs)
    BEFORE_LOGIC = "before_logic"  # (logic, input)
    AFTER_LOGIC = "after_logic"  # (logic, input)
    AFTER_MOUNT = "after_mount"  # (logic)
    BEFORE_UNMOUNT = "before_unmount"  # (logic)
    MOUNTED_PATH = "mounted_path"  # (path_string, logic)
    UNMOUNTED_PATH = "unmounted_path"  # (path_string, logic)
    CLEAR_CACHE = "clear_cache"  # ()


@dataclass
class Plugin:
    """
    A named set of build extensions.

    Example:
        def add_actions(logic, input):
            logic.actions.update(get_input(input, "actions", {}))

        plugin = Plugin(
            name="actions",
            defaults=lambda: {"actions": {}},
            build_order={"actions": {"after": "connect"}},
            build_steps={"actions": add_actions},
        )
        activate_plugin(plugin)

    Attributes:
        name: Plugin identifier used in logs
        defaults: Mapping, or zero-argument factory returning one, merged onto
            every newly built logic before any step runs
        build_order: Step groups this plugin introduces, each optionally
            anchored with {"before": group} or {"after": group}
        build_steps: Step callable(s) per group
    """

    name: str
    defaults: Mapping[str, Any] | Callable[[], Mapping[str, Any]] | None = None
    build_order: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    build_steps: Mapping[str, BuildStep | list[BuildStep]] = field(default_factory=dict)

    before_build: Callable[..., None] | None = None
    after_build: Callable[..., None] | None = None
    before_logic: Callable[..., None] | None = None
    after_logic: Callable[..., None] | None = None
    after_mount: Callable[..., None] | None = None
    before_unmount: Callable[..., None] | None = None
    mounted_path: Callable[..., None] | None = None
    unmounted_path: Callable[..., None] | None = None
    clear_cache: Callable[[], None] | None = None

    def get_hook(self, hook: PluginHook | str) -> Callable[..., None] | None:
        """Return the hook callable, or None if the plugin does not implement it."""
        return getattr(self, PluginHook(hook).value)

    def resolve_defaults(self) -> dict[str, Any]:
        """Evaluate the defaults declaration into a fresh dict."""
        if self.defaults is None:
            return {}
        defaults = self.defaults() if callable(self.defaults) else self.defaults
        return dict(defaults)

    def steps_for(self, group: str) -> list[BuildStep]:
        steps = self.build_steps.get(group)
        if steps is None:
            return []
        if callable(steps):
            return [steps]
        return list(steps)
