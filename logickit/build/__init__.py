"""
logickit Build Layer.

Components:
    - LogicBuilder: cache lookup, construction and auto-connect
    - Logic: the built object
    - MountManager: mount reference counting and cache eviction
    - Path helpers: key and path resolution for inputs
    - Connections: the dependency graph between logic
"""

from .builder import LogicBuilder, get_built_logic
from .connections import add_connection, dependencies_of, mount_order
from .inputs import LogicInput, get_input, iter_extends
from .logic import Logic
from .mount import MountManager
from .path import get_path_for_input, path_to_string, resolve_key

__all__ = [
    "Logic",
    "LogicBuilder",
    "LogicInput",
    "MountManager",
    "add_connection",
    "dependencies_of",
    "mount_order",
    "get_built_logic",
    "get_input",
    "get_path_for_input",
    "iter_extends",
    "path_to_string",
    "resolve_key",
]
