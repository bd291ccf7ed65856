"""Constraint factories.

Each factory returns a ``CustomValidator`` closing over its own threshold or
pattern, so built-in rules and user predicates share one mechanism:

    ```python
    from dataknobs_schematics import Model, field
    from dataknobs_schematics.constraints import gte, matches, min_length

    class User(Model):
        email = field(str, required=True, validators=[min_length(5), matches(r"@")])
        age = field(int, default=0, validators=[gte(0)])
    ```
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from numbers import Real
from re import Pattern as RegexPattern
from typing import Any

from .exceptions import SchemaDefinitionError
from .validators import CustomValidator

NUMBER = (int, float)


def characters(count: int) -> str:
    return f"{count} character" if count == 1 else f"{count} characters"


def min_length(length: int) -> CustomValidator:
    return CustomValidator(
        str, lambda s: len(s) >= length, f"must be at least {characters(length)}"
    )


def max_length(length: int) -> CustomValidator:
    return CustomValidator(
        str, lambda s: len(s) <= length, f"must be at most {characters(length)}"
    )


def matches(pattern: str | RegexPattern[str]) -> CustomValidator:
    """String must contain a match for ``pattern`` (``re.search`` semantics).

    Anchor the pattern with ``^``/``$`` to require a full match.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    return CustomValidator(
        str, lambda s: regex.search(s) is not None, "does not match required format"
    )


format = matches  # noqa: A001


def one_of(values: Iterable[Any]) -> CustomValidator:
    allowed = list(values)
    if not allowed:
        raise SchemaDefinitionError("one_of requires at least one allowed value")
    expected = tuple(dict.fromkeys(type(v) for v in allowed))
    return CustomValidator(
        expected if len(expected) > 1 else expected[0],
        lambda v: v in allowed,
        f"must be one of: {', '.join(str(v) for v in allowed)}",
    )


def gte(bound: Real) -> CustomValidator:
    return CustomValidator(NUMBER, lambda n: n >= bound, f"must be >= {bound}")


def lte(bound: Real) -> CustomValidator:
    return CustomValidator(NUMBER, lambda n: n <= bound, f"must be <= {bound}")


def gt(bound: Real) -> CustomValidator:
    return CustomValidator(NUMBER, lambda n: n > bound, f"must be > {bound}")


def lt(bound: Real) -> CustomValidator:
    return CustomValidator(NUMBER, lambda n: n < bound, f"must be < {bound}")


def in_range(minimum: Real, maximum: Real) -> CustomValidator:
    if minimum > maximum:
        raise SchemaDefinitionError(f"minimum ({minimum}) cannot be greater than maximum ({maximum})")
    return CustomValidator(
        NUMBER,
        lambda n: minimum <= n <= maximum,
        f"must be between {minimum} and {maximum}",
    )
