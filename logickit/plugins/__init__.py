"""
logickit Plugins

Plugins extend the build without the engine knowing their content:
- Hooks observe or mutate a logic at fixed points of the build and mount cycle
- Defaults seed fields on every new logic
- Build steps turn each input into concrete fields, grouped and ordered
"""

from .base import BuildStep, Plugin, PluginHook
from .registry import (
    PluginRegistry,
    activate_plugin,
    clear_activated_plugins,
    run_plugins,
)

__all__ = [
    "BuildStep",
    "Plugin",
    "PluginHook",
    "PluginRegistry",
    "activate_plugin",
    "clear_activated_plugins",
    "run_plugins",
]
