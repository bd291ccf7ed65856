"""Pytest configuration for dataknobs_schematics tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_schematics import Model, field  # noqa: E402
from dataknobs_schematics.constraints import (  # noqa: E402
    gte,
    lte,
    matches,
    max_length,
    min_length,
    one_of,
)


class User(Model):
    """User model shared by model and serialization tests."""

    email = field(str, required=True, validators=[min_length(5), matches(r"@")])
    username = field(str, required=True, validators=[min_length(3), max_length(20)])
    age = field(int | None, validators=[gte(0), lte(120)])
    role = field(str, default="user", validators=[one_of(["admin", "user", "guest"])])
    active = field(bool, default=True)


@pytest.fixture
def user_cls():
    """The shared User model type."""
    return User


@pytest.fixture
def valid_user():
    """A user that passes every rule."""
    return User(email="test@example.com", username="testuser", age=30)


@pytest.fixture
def mixed_values():
    """Inputs of many representations for type/consistency checks."""
    return [
        0, 1, -42, 2**63, 1.0, 0.0, -0.0, float("inf"), True, False, None,
        "", "hello", "日本語", [], [1, 2], ["a"], (1, 2), {}, {"a": 1}, {1: "a"},
        [[1, 2], [3, "4"]], {"a": [1, 2]}, b"bytes", object(),
    ]


@pytest.fixture
def schema_yaml(tmp_path):
    """Write a YAML schema definition and return its path."""
    path = tmp_path / "scores.yaml"
    path.write_text(
        "name: scores\n"
        "type: dict\n"
        "keys:\n"
        "  type: str\n"
        "  min_length: 1\n"
        "values:\n"
        "  type: list\n"
        "  min_size: 1\n"
        "  items:\n"
        "    type: int\n"
        "    min_value: 0\n"
        "    max_value: 100\n"
    )
    return path
