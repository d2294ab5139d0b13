"""
Connection graph bookkeeping.

`a.connections[b.path_string] = b` means a's mount keeps b mounted. A logic
always contains itself, added last, so iterating connections in insertion
order visits dependencies before the logic that depends on them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .logic import Logic

logger = logging.getLogger(__name__)


def add_connection(logic: Logic, other: Logic) -> bool:
    """
    Connect `other` (and everything it is connected to) to `logic`.

    Existing entries are kept; nothing is ever removed here.

    Returns:
        True if a connection was added, False if already connected
    """
    if other.path_string in logic.connections:
        return False

    # `other` may still be under construction and lack its self entry
    connections = dict(other.connections)
    connections.setdefault(other.path_string, other)

    for path_string, connected in connections.items():
        if path_string not in logic.connections:
            logic.connections[path_string] = connected

    logger.debug(f"[connections] Connected {other.path_string} to {logic.path_string}")
    return True


def dependencies_of(logic: Logic) -> list[Logic]:
    """Connected logic other than `logic` itself, in insertion order."""
    return [
        connected
        for path_string, connected in logic.connections.items()
        if path_string != logic.path_string
    ]


def mount_order(logic: Logic) -> list[Logic]:
    """
    Everything reachable through connections, dependencies first, `logic` last.

    Follows connections added to dependencies after `logic` was built, such as
    logic built by a dependency's mount hooks.
    """
    order: list[Logic] = []
    seen: set[str] = set()

    def visit(node: Logic) -> None:
        seen.add(node.path_string)
        for dependency in dependencies_of(node):
            if dependency.path_string not in seen:
                visit(dependency)
        order.append(node)

    visit(logic)
    return order
