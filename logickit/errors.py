"""
Errors raised by the logic build engine.

Exceptions raised by build steps and plugin hooks are never wrapped in
these types; they propagate to the caller unchanged.
"""

from __future__ import annotations


class LogicError(Exception):
    """Base class for logickit errors."""

    pass


class MissingKeyError(LogicError):
    """
    Raised when an input declares a key function but the props do not yield a key.

    The build is aborted before anything is cached or pushed on the build heap.
    """

    def __init__(self, message: str = "Must have key to build logic", *, input=None, props=None):
        super().__init__(message)
        self.input = input
        self.props = props


class InvalidPathError(LogicError):
    """Raised when an input declares an explicit path that is empty."""

    pass


class CircularBuildError(LogicError):
    """
    Raised when a logic requests itself while it is still under construction.

    Example: input A builds B in a step, and B's step builds A again.
    """

    def __init__(self, path_string: str, chain: list[str]):
        self.path_string = path_string
        self.chain = chain
        super().__init__(
            f"Logic '{path_string}' requested while it is being built "
            f"(build chain: {' -> '.join(chain + [path_string])})"
        )


class PluginError(LogicError):
    """Raised when a plugin declaration is invalid."""

    pass


class LogicNotMountedError(LogicError):
    """Raised when looking up a mounted logic that is not mounted."""

    pass
