"""
Configuration Schemas for logickit.

Pydantic models for the options a BuildContext is created with.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, field_validator


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class EngineOptions(BaseModel):
    """
    Options for the logic build engine.

    Attributes:
        auto_connect: Connect logic built inside another build or a running
            listener to that logic
        path_separator: Separator used to join path segments into path strings
        default_path_prefix: Leading segments of paths synthesized for inputs
            that declare no path
        debug: Log every cache hit, connection and mount transition
    """

    auto_connect: bool = Field(True, description="Enable automatic connections")
    path_separator: str = Field(".", min_length=1, description="Path segment separator")
    default_path_prefix: tuple[str, ...] = Field(
        ("logic", "inline"),
        description="Prefix for paths synthesized for inputs without a path",
    )
    debug: bool = Field(False, description="Verbose build logging")

    model_config = {"frozen": True}

    @field_validator("default_path_prefix")
    @classmethod
    def _prefix_not_empty(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("default_path_prefix must have at least one segment")
        return value

    @classmethod
    def from_env(cls) -> EngineOptions:
        """
        Load options from LOGICKIT_* environment variables.

        Variables:
            LOGICKIT_AUTO_CONNECT: "true"/"false"
            LOGICKIT_PATH_SEPARATOR: separator string
            LOGICKIT_DEFAULT_PATH_PREFIX: prefix segments joined by the separator
            LOGICKIT_DEBUG: "true"/"false"
        """
        separator = os.getenv("LOGICKIT_PATH_SEPARATOR", ".")
        prefix = os.getenv("LOGICKIT_DEFAULT_PATH_PREFIX")
        return cls(
            auto_connect=_env_flag("LOGICKIT_AUTO_CONNECT", True),
            path_separator=separator,
            default_path_prefix=(
                tuple(s for s in prefix.split(separator) if s)
                if prefix
                else ("logic", "inline")
            ),
            debug=_env_flag("LOGICKIT_DEBUG", False),
        )
