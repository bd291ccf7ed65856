"""Factory for building schemas from configuration.

Configuration Options:
    type (str): str, int, float, bool, any, none, list, dict, optional, union
    items (dict): Element definition (list)
    keys (dict): Key definition (dict, default ``{type: str}``)
    values (dict): Value definition (dict, default ``{type: any}``)
    inner (dict): Wrapped definition (optional)
    variants (list): Member definitions (union)
    min_size / max_size (int): Sequence size bounds, inclusive
    min_length / max_length (int): Text length bounds, inclusive
    min_value / max_value (number): Numeric bounds, inclusive
    pattern (str): Regular expression text must contain a match for
    one_of (list): Allowed values

Example Configuration:
    ```yaml
    type: dict
    keys: {type: str}
    values:
      type: list
      min_size: 1
      items:
        type: int
        min_value: 0
    ```
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

import yaml  # type: ignore[import-untyped]

from .constraints import matches, one_of
from .exceptions import SchemaDefinitionError
from .schema import Schema, SchemaBuilder
from .shapes import TEXT
from .validators import (
    ArrayValidator,
    MappingValidator,
    OptionalValidator,
    TypeValidator,
    UnionValidator,
    Validator,
)

logger = logging.getLogger(__name__)

SCALAR_TYPES: dict[str, Any] = {
    "str": str,
    "string": str,
    "int": int,
    "integer": int,
    "float": float,
    "bool": bool,
    "boolean": bool,
    "any": Any,
    "none": type(None),
    "null": type(None),
}

COMPOSITE_TYPES = ("list", "dict", "optional", "union")

STRUCTURE_KEYS = {"type", "items", "keys", "values", "inner", "variants", "description", "name"}
BOUND_KEYS = ("min_size", "max_size", "min_length", "max_length", "min_value", "max_value")
RULE_KEYS = {"pattern", "one_of"}


class FactoryBase(ABC):
    """Builds an object from keyword configuration via ``create(**config)``."""

    @abstractmethod
    def create(self, **config: Any) -> Any:
        pass


class SchemaFactory(FactoryBase):
    """Factory for creating Schema instances from configuration."""

    def create(self, **config: Any) -> Schema:
        """Create a Schema from configuration.

        Args:
            **config: Schema configuration

        Returns:
            Schema instance

        Raises:
            SchemaDefinitionError: For unknown types or malformed definitions
        """
        declared, validator = self._build(config, "schema")
        logger.info(f"Creating schema: {config.get('name', validator.type_name)}")
        return Schema(declared, validator=validator)

    def _build(self, config: Any, where: str) -> tuple[Any, Validator]:
        """Build the declared type and validator for one definition node."""
        if not isinstance(config, dict):
            raise SchemaDefinitionError(
                f"Schema definition at {where} must be a mapping, got {type(config).__name__}",
                context={"location": where},
            )

        type_name = str(config.get("type", "any")).lower()
        for key in config:
            if key not in STRUCTURE_KEYS and key not in BOUND_KEYS and key not in RULE_KEYS:
                logger.warning(f"Unknown schema configuration key at {where}: {key}")

        declared, base = self._build_base(type_name, config, where)

        builder = SchemaBuilder(declared, validator=base)
        for key in BOUND_KEYS:
            if key in config:
                getattr(builder, key)(config[key])
        if "pattern" in config:
            if builder.shape == TEXT:
                builder.add(matches(config["pattern"]))
            else:
                logger.warning(f"Ignoring pattern at {where}: only applies to text types")
        if "one_of" in config:
            builder.add(one_of(config["one_of"]))

        return declared, builder.build().validator

    def _build_base(self, type_name: str, config: dict, where: str) -> tuple[Any, Validator]:
        if type_name in SCALAR_TYPES:
            declared = SCALAR_TYPES[type_name]
            if declared is Any:
                return declared, TypeValidator(object)
            return declared, TypeValidator(declared)

        if type_name == "list":
            item_type, item_validator = self._build(config.get("items", {}), f"{where}.items")
            return list[item_type], ArrayValidator(item_validator)  # type: ignore[valid-type]

        if type_name == "dict":
            key_type, key_validator = self._build(config.get("keys", {"type": "str"}), f"{where}.keys")
            value_type, value_validator = self._build(config.get("values", {}), f"{where}.values")
            return (
                dict[key_type, value_type],  # type: ignore[valid-type]
                MappingValidator(key_validator, value_validator),
            )

        if type_name == "optional":
            if "inner" not in config:
                raise SchemaDefinitionError(
                    f"Optional definition at {where} requires 'inner'", context={"location": where}
                )
            inner_type, inner_validator = self._build(config["inner"], f"{where}.inner")
            return Optional[inner_type], OptionalValidator(inner_validator)

        if type_name == "union":
            variants = config.get("variants") or []
            if not variants:
                raise SchemaDefinitionError(
                    f"Union definition at {where} requires 'variants'", context={"location": where}
                )
            built = [self._build(v, f"{where}.variants[{i}]") for i, v in enumerate(variants)]
            declared = Union[tuple(t for t, _ in built)]
            return declared, UnionValidator([v for _, v in built])

        raise SchemaDefinitionError(
            f"Unknown schema type at {where}: {type_name}",
            context={"location": where, "type": type_name,
                     "known": sorted(SCALAR_TYPES) + list(COMPOSITE_TYPES)},
        )


def load_schema(path: str | Path) -> Schema:
    """Load a schema definition from a YAML or JSON file.

    Args:
        path: Path to the definition file

    Returns:
        Schema instance

    Raises:
        SchemaDefinitionError: If the file is missing, has an unsupported
            extension or holds an invalid definition
    """
    path = Path(path).resolve()
    if not path.exists():
        raise SchemaDefinitionError(
            f"Schema configuration file not found: {path}", context={"path": str(path)}
        )

    suffix = path.suffix.lower()
    with open(path) as f:
        if suffix in [".yaml", ".yml"]:
            data = yaml.safe_load(f) or {}
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise SchemaDefinitionError(
                f"Unsupported file format: {suffix}", context={"path": str(path)}
            )

    if not isinstance(data, dict):
        raise SchemaDefinitionError(
            f"Schema configuration must be a mapping: {path}", context={"path": str(path)}
        )
    return schema_factory.create(**data)


# Create singleton instance for registration
schema_factory = SchemaFactory()
