"""Field descriptors for Model types.

Fields are declared as class attributes with ``field(...)``. When a Model
subclass is created, ``FieldTable.build`` turns those declarations into an
ordered, immutable table of ``Field`` descriptors attached to the class.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from .exceptions import SchemaDefinitionError
from .result import ValidationResult
from .shapes import validator_for
from .validators import Validator, ValidatorChain

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

#: Names a field may not take because the Model runtime uses them.
RESERVED_NAMES = frozenset({
    "errors", "is_valid", "validate", "validate_model", "add_error",
    "to_dict", "from_dict", "to_json", "from_json",
})


@dataclass(frozen=True)
class FieldDeclaration:
    """What ``field(...)`` leaves in a class body until the table is built."""

    declared_type: Any
    required: bool = False
    default: Any = MISSING
    validators: tuple[Validator, ...] = ()
    description: str | None = None


def field(
    declared_type: Any,
    *,
    required: bool = False,
    default: Any = MISSING,
    validators: Iterable[Validator] = (),
    description: str | None = None,
) -> Any:
    """Declare a model field.

    Args:
        declared_type: Type expression for the field's values
        required: Whether an absent (None) value is an error
        default: Value used when the field is not supplied; mutable defaults
            are copied per instance
        validators: Validators run, in order, over a present value
        description: Optional human-readable description

    Returns:
        A declaration consumed when the Model subclass is created
    """
    return FieldDeclaration(
        declared_type=declared_type,
        required=required,
        default=default,
        validators=tuple(validators),
        description=description,
    )


@dataclass(frozen=True)
class Field:
    """A built field descriptor.

    Attributes:
        name: Field name
        declared_type: Type expression for the field's values
        base_validator: Validator selected from ``declared_type``
        validator: Base validator followed by the configured validators
        validators: Configured validators, in declaration order
        required: Whether an absent value is an error
        default: Default value, or MISSING
        description: Optional description
    """

    name: str
    declared_type: Any
    base_validator: Validator
    validator: Validator
    validators: tuple[Validator, ...] = ()
    required: bool = False
    default: Any = MISSING
    description: str | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def get_default(self) -> Any:
        if not self.has_default:
            return None
        return copy.deepcopy(self.default)

    def validate(self, value: Any, path: str | None = None) -> ValidationResult:
        return self.validator.validate(value, path or self.name)

    @classmethod
    def from_declaration(cls, name: str, declaration: FieldDeclaration) -> Field:
        try:
            base = validator_for(declaration.declared_type)
        except SchemaDefinitionError as e:
            raise SchemaDefinitionError(
                f"Field '{name}': {e}", context={"field": name, **e.context}
            ) from e
        validator = (
            ValidatorChain([base, *declaration.validators]) if declaration.validators else base
        )
        return cls(
            name=name,
            declared_type=declaration.declared_type,
            base_validator=base,
            validator=validator,
            validators=declaration.validators,
            required=declaration.required,
            default=declaration.default,
            description=declaration.description,
        )


class FieldTable(Sequence[Field]):
    """Ordered, immutable collection of a model type's fields."""

    def __init__(self, fields: Iterable[Field] = ()):
        self._fields = tuple(fields)
        self._by_name = {f.name: f for f in self._fields}

    @classmethod
    def build(cls, model_cls: type) -> FieldTable:
        """Build the table for a model class.

        Parent fields come first, in their declaration order; a redeclared
        name replaces the parent's field in place. Declarations in the class
        body are replaced by their built ``Field``.

        Args:
            model_cls: The class being defined

        Returns:
            FieldTable for ``model_cls``

        Raises:
            SchemaDefinitionError: For reserved names or unsupported types
        """
        fields: dict[str, Field] = {}
        for base in reversed(model_cls.__mro__[1:]):
            for inherited in getattr(base, "__dict__", {}).get("__fields__", ()):
                fields[inherited.name] = inherited

        for name, attr in list(vars(model_cls).items()):
            if not isinstance(attr, FieldDeclaration):
                continue
            if name in RESERVED_NAMES or name.startswith("_"):
                raise SchemaDefinitionError(
                    f"Invalid field name '{name}' on {model_cls.__name__}",
                    context={"model": model_cls.__name__, "field": name},
                )
            built = Field.from_declaration(name, attr)
            fields[name] = built
            setattr(model_cls, name, built)

        table = cls(fields.values())
        logger.debug(f"Built field table for {model_cls.__name__}: {table.names()}")
        return table

    def names(self) -> list[str]:
        return [f.name for f in self._fields]

    def get(self, name: str) -> Field | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, str):
            return self._by_name[index]
        return self._fields[index]

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldTable({self.names()})"
