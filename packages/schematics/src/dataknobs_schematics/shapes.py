"""Selection of a base validator from a declared Python type.

A declared type is an ordinary type expression (``int``, ``list[str]``,
``dict[str, list[int]]``, ``int | None`` ...). ``validator_for`` maps it to a
validator tree once, at schema or model definition time.
"""

from __future__ import annotations

import types
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any, Union, get_args, get_origin

from .exceptions import SchemaDefinitionError
from .validators import (
    ArrayValidator,
    MappingValidator,
    OptionalValidator,
    TypeValidator,
    UnionValidator,
    Validator,
)

SEQUENCE_ORIGINS = (list, Sequence, MutableSequence)
MAPPING_ORIGINS = (dict, Mapping, MutableMapping)
NUMERIC_TYPES = (int, float)

SEQUENCE = "sequence"
MAPPING = "mapping"
TEXT = "text"
NUMERIC = "numeric"
OTHER = "other"


def is_union(origin: Any) -> bool:
    return origin is Union or origin is types.UnionType


def validator_for(declared: Any) -> Validator:
    """Build the base validator for a declared type.

    Args:
        declared: A type expression, or a Validator used as supplied

    Returns:
        Validator tree for ``declared``

    Raises:
        SchemaDefinitionError: If the type expression is not supported
    """
    if isinstance(declared, Validator):
        return declared
    if declared is Any or declared is object:
        return TypeValidator(object)
    if declared is None or declared is type(None):
        return TypeValidator(type(None), type_name="None")

    origin = get_origin(declared)
    args = get_args(declared)

    if declared in SEQUENCE_ORIGINS or origin in SEQUENCE_ORIGINS:
        element = args[0] if args else Any
        return ArrayValidator(validator_for(element))

    if declared in MAPPING_ORIGINS or origin in MAPPING_ORIGINS:
        key, value = args if len(args) == 2 else (Any, Any)
        return MappingValidator(validator_for(key), validator_for(value))

    if is_union(origin):
        members = [arg for arg in args if arg is not type(None)]
        nullable = len(members) != len(args)
        if len(members) == 1:
            inner = validator_for(members[0])
        else:
            inner = UnionValidator([validator_for(member) for member in members])
        return OptionalValidator(inner) if nullable else inner

    if origin is None and isinstance(declared, type):
        return TypeValidator(declared)

    raise SchemaDefinitionError(
        f"Unsupported declared type: {declared!r}",
        context={"declared_type": repr(declared)},
    )


def shape_of(declared: Any) -> str:
    """Classify a declared type for constraint applicability.

    Returns:
        One of ``"sequence"``, ``"mapping"``, ``"text"``, ``"numeric"``
        or ``"other"``
    """
    origin = get_origin(declared)
    if declared in SEQUENCE_ORIGINS or origin in SEQUENCE_ORIGINS:
        return SEQUENCE
    if declared in MAPPING_ORIGINS or origin in MAPPING_ORIGINS:
        return MAPPING
    if declared is str:
        return TEXT
    if declared in NUMERIC_TYPES:
        return NUMERIC
    return OTHER
