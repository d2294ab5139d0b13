"""
Path and key resolution for logickit.

Every logic is identified by its path: a non-empty tuple of segments. The
path string (segments joined with the configured separator) is the cache
key and the connection key.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from logickit.errors import InvalidPathError, MissingKeyError

from .inputs import get_input

if TYPE_CHECKING:
    from logickit.context import BuildContext


def resolve_key(input: Any, props: Any) -> Any:
    """
    Resolve the instance key of an input for the given props.

    Args:
        input: First input spec of the logic
        props: Props supplied by the caller

    Returns:
        The key, or None if the input declares no key function

    Raises:
        MissingKeyError: If the input declares a key function and it returns
            None or raises KeyError for `props`
    """
    key_func = get_input(input, "key")
    if key_func is None:
        return None

    if props is None:
        raise MissingKeyError(input=input, props=props)
    try:
        key = key_func(props)
    except KeyError as err:
        raise MissingKeyError(
            f"Must have key to build logic, props lack {err}",
            input=input,
            props=props,
        ) from err
    if key is None:
        raise MissingKeyError(input=input, props=props)
    return key


def get_path_for_input(
    input: Any,
    props: Any,
    key: Any,
    context: BuildContext,
) -> tuple[Any, ...]:
    """
    Get the path for an input, even if no path was specified in it.

    An explicit path (sequence, or callable taking the props) is used as
    given. Otherwise the path is the configured default prefix, a number
    assigned once per input object and, if present, the key.

    Raises:
        InvalidPathError: If an explicit path is empty
    """
    path = get_input(input, "path")
    if path is not None:
        if callable(path):
            path = path(props)
        if isinstance(path, (str, bytes)) or not isinstance(path, Sequence):
            path = (path,)
        path = tuple(path)
        if not path:
            raise InvalidPathError("Logic path must have at least one segment")
        return path

    inline = context.input.inline_paths.get(id(input))
    if inline is None or inline[0] is not input:
        context.input.inline_path_counter += 1
        inline = (input, context.input.inline_path_counter)
        context.input.inline_paths[id(input)] = inline

    path = (*context.options.default_path_prefix, str(inline[1]))
    if key is not None:
        path = (*path, key)
    return path


def path_to_string(path: Sequence[Any], separator: str = ".") -> str:
    """Join path segments into the path string."""
    return separator.join(str(segment) for segment in path)
