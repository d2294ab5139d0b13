"""
Pytest configuration and fixtures for logickit tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from logickit.build import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from logickit import Plugin, reset_context  # noqa: E402


@pytest.fixture(autouse=True)
def context():
    """Fresh build context for every test."""
    ctx = reset_context()
    yield ctx
    reset_context()


@pytest.fixture
def values_plugin():
    """Plugin that copies an input's "values" mapping onto the logic."""

    def add_values(logic, input):
        values = input.get("values", {}) if isinstance(input, dict) else {}
        logic.values.update(values)

    return Plugin(
        name="values",
        defaults=lambda: {"values": {}},
        build_order={"values": {}},
        build_steps={"values": add_values},
    )


@pytest.fixture
def item_input():
    """Keyed input with an explicit path built from props."""
    return {
        "key": lambda props: props.get("id"),
        "path": lambda props: ["item", props["id"]],
    }
