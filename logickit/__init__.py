"""
logickit - a logic build engine for declarative state containers.

Given a stack of input specs and props, logickit builds a cached,
path-identified logic object exactly once, runs it through an ordered
plugin/build step pipeline, and wires it into a graph of connected logic:

- **Build cache**: one logic per path string, props refreshed on reuse
- **Plugins**: hooks, defaults and ordered build steps
- **Auto-connect**: logic built while another is building, or while another
  logic's listener runs, is connected to it
- **Mounting**: reference counted, evicts logic from the cache at zero

Quick Start:
    >>> from logickit import Plugin, activate_plugin, logic
    >>>
    >>> activate_plugin(Plugin(
    ...     name="values",
    ...     defaults=lambda: {"values": {}},
    ...     build_order={"values": {}},
    ...     build_steps={"values": lambda built, input: built.values.update(input.get("values", {}))},
    ... ))
    >>> item = logic({"key": lambda p: p["id"], "path": lambda p: ("item", p["id"])})
    >>> built = item.build({"id": 7})
    >>> built.path_string
    'item.7'
"""

__version__ = "0.1.0"
__license__ = "MIT"

from logickit.build import (
    Logic,
    LogicBuilder,
    LogicInput,
    MountManager,
    add_connection,
    get_built_logic,
)
from logickit.config import EngineOptions
from logickit.context import BuildContext, get_context, reset_context, set_context
from logickit.errors import (
    CircularBuildError,
    InvalidPathError,
    LogicError,
    LogicNotMountedError,
    MissingKeyError,
    PluginError,
)
from logickit.plugins import (
    Plugin,
    PluginHook,
    PluginRegistry,
    activate_plugin,
    clear_activated_plugins,
    run_plugins,
)
from logickit.wrapper import LogicWrapper, logic

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Building
    "Logic",
    "LogicBuilder",
    "LogicInput",
    "LogicWrapper",
    "MountManager",
    "add_connection",
    "get_built_logic",
    "logic",
    # Context and config
    "BuildContext",
    "EngineOptions",
    "get_context",
    "reset_context",
    "set_context",
    # Plugins
    "Plugin",
    "PluginHook",
    "PluginRegistry",
    "activate_plugin",
    "clear_activated_plugins",
    "run_plugins",
    # Errors
    "CircularBuildError",
    "InvalidPathError",
    "LogicError",
    "LogicNotMountedError",
    "MissingKeyError",
    "PluginError",
]
