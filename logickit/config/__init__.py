"""
logickit Configuration

Engine options shared by every build in a context.
"""

from .schemas import EngineOptions

__all__ = [
    "EngineOptions",
]
