"""
Mount reference counting.

Mounting a logic mounts everything reachable through its connections,
dependencies first. Each path string keeps a counter; a logic is evicted
from the build cache when its counter drops back to zero.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from logickit.plugins import PluginHook

from .connections import mount_order

if TYPE_CHECKING:
    from logickit.context import BuildContext

    from .logic import Logic

logger = logging.getLogger(__name__)


class MountManager:
    """
    Mounts and unmounts logic on a BuildContext.

    While the mount hooks of a logic run, that logic is on top of the run
    heap, so logic built by those hooks is connected to it and mounted as
    many times as it is. Mount and unmount both walk all connections
    reachable from the logic, which includes such later connections.
    """

    def __init__(self, context: BuildContext):
        self.context = context

    def mount_logic(self, logic: Logic, count: int = 1) -> None:
        """
        Mount `logic` and its connections `count` times.

        Args:
            logic: Logic to mount
            count: Amount added to every connected counter; used when a logic
                is mounted on behalf of another that is already mounted
                `count` times
        """
        counter = self.context.mount.counter
        plugins = self.context.plugins

        for connected in mount_order(logic):
            path_string = connected.path_string
            previous = counter.get(path_string, 0)
            counter[path_string] = previous + count

            if previous == 0:
                with self.context.running(connected):
                    plugins.run(PluginHook.AFTER_MOUNT, connected)
                    plugins.run(PluginHook.MOUNTED_PATH, path_string, connected)
                logger.debug(f"[mount] Mounted {path_string}")

    def unmount_logic(self, logic: Logic) -> None:
        """
        Unmount `logic` and its connections once, the logic itself first.

        Logic whose counter reaches zero is removed from the build cache.
        """
        counter = self.context.mount.counter
        cache = self.context.build.cache
        plugins = self.context.plugins

        for connected in reversed(mount_order(logic)):
            path_string = connected.path_string
            if path_string not in counter:
                logger.warning(f"[mount] Unmounting {path_string}, which is not mounted")
                continue

            counter[path_string] -= 1
            if counter[path_string] > 0:
                continue

            plugins.run(PluginHook.BEFORE_UNMOUNT, connected)
            plugins.run(PluginHook.UNMOUNTED_PATH, path_string, connected)
            del counter[path_string]
            if cache.get(path_string) is connected:
                del cache[path_string]
            logger.debug(f"[mount] Unmounted {path_string}")

    def mount_count(self, logic: Logic | str) -> int:
        path_string = logic if isinstance(logic, str) else logic.path_string
        return self.context.mount.counter.get(path_string, 0)

    def is_mounted(self, logic: Logic | str) -> bool:
        return self.mount_count(logic) > 0
