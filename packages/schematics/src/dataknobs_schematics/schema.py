"""Schema definition with fluent builder API.

A ``Schema`` binds one validator tree to a declared type:

    ```python
    from dataknobs_schematics import Schema, SchemaBuilder

    Schema(list[int]).validate([1, "two"]).paths()    # ['root[1]']

    username = (
        SchemaBuilder(str)
        .min_length(3)
        .max_length(20)
        .add_validator("must be lowercase", str.islower)
        .build()
    )
    username.parse("alice")                           # 'alice'
    ```
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from numbers import Real
from typing import Any

from .constraints import characters
from .exceptions import ParseError, SchemaDefinitionError
from .result import ValidationResult
from .shapes import NUMERIC, SEQUENCE, TEXT, shape_of, validator_for
from .validators import (
    INVALID,
    SEQUENCE_TYPES,
    ArrayValidator,
    CustomValidator,
    MappingValidator,
    OptionalValidator,
    TypeValidator,
    Validator,
    ValidatorChain,
)

logger = logging.getLogger(__name__)

ROOT = "root"


def accepted_by(validator: Validator) -> Any:
    """The representation check a predicate over ``validator``'s values needs.

    Plain, sequence and mapping validators reduce to a class check; anything
    else (unions, for instance) gates on the validator's own parse.
    """
    if isinstance(validator, TypeValidator):
        return validator.expected
    if isinstance(validator, ArrayValidator):
        return SEQUENCE_TYPES
    if isinstance(validator, MappingValidator):
        return Mapping
    if isinstance(validator, ValidatorChain):
        return accepted_by(validator.validators[0])
    return validator


class Schema:
    """A validator tree fixed to one declared type."""

    def __init__(self, declared_type: Any = Any, validator: Validator | None = None):
        """Initialize schema.

        Args:
            declared_type: Type expression the schema describes
            validator: Optional explicit root validator; when omitted one is
                selected from the shape of ``declared_type``
        """
        self.declared_type = declared_type
        self.validator = validator if validator is not None else validator_for(declared_type)
        logger.debug(f"Created schema for {self.validator.type_name}")

    def validate(self, data: Any) -> ValidationResult:
        """Validate data, collecting every defect.

        Args:
            data: Value to validate

        Returns:
            ValidationResult rooted at ``"root"``
        """
        return self.validator.validate(data, ROOT)

    def parse(self, data: Any) -> Any:
        """Validate data and return it narrowed to the declared type.

        Args:
            data: Value to parse

        Returns:
            Parsed value

        Raises:
            ParseError: With the first collected error if data is invalid
        """
        result = self.validate(data)
        if not result.valid:
            first = result.errors[0]
            raise ParseError(str(first), error=first)

        parsed = self.validator.attempt_parse(data)
        if parsed is INVALID:
            raise ParseError(
                f"{ROOT}: failed to parse value as {self.validator.type_name}",
                context={"path": ROOT, "type": self.validator.type_name},
            )
        return parsed

    def is_valid(self, data: Any) -> bool:
        return self.validate(data).valid

    def __repr__(self) -> str:
        return f"Schema({self.validator.type_name})"


class SchemaBuilder:
    """Fluent accumulation of constraints on top of a base validator.

    The builder is mutable until ``build()``; afterwards it refuses changes.
    Bound methods that do not apply to the declared type (``min_length`` on a
    numeric schema, for instance) are ignored with a warning.
    """

    def __init__(self, declared_type: Any, validator: Validator | None = None):
        """Initialize builder.

        Args:
            declared_type: Type expression the schema describes
            validator: Optional explicit base validator
        """
        self.declared_type = declared_type
        self.shape = shape_of(declared_type)
        base = validator if validator is not None else validator_for(declared_type)
        self.validators: list[Validator] = [base]
        self._built = False

    def add_validator(self, message: str, predicate: Callable[[Any], bool]) -> SchemaBuilder:
        """Append a predicate validator over the declared type (fluent API).

        Args:
            message: Error message used when ``predicate`` returns False
            predicate: Callable returning True for acceptable values

        Returns:
            Self for chaining
        """
        self._check_open()
        self.validators.append(self._custom(predicate, message))
        return self

    def add(self, validator: Validator) -> SchemaBuilder:
        """Append an already constructed validator (fluent API)."""
        self._check_open()
        self.validators.append(validator)
        return self

    def min_size(self, size: int) -> SchemaBuilder:
        self._check_bound("min_size", size)
        if self._applies("min_size", SEQUENCE):
            self.validators.append(
                self._custom(lambda v: len(v) >= size, f"size must be at least {size}")
            )
        return self

    def max_size(self, size: int) -> SchemaBuilder:
        self._check_bound("max_size", size)
        if self._applies("max_size", SEQUENCE):
            self.validators.append(
                self._custom(lambda v: len(v) <= size, f"size must be at most {size}")
            )
        return self

    def min_length(self, length: int) -> SchemaBuilder:
        self._check_bound("min_length", length)
        if self._applies("min_length", TEXT):
            self.validators.append(
                self._custom(
                    lambda s: len(s) >= length, f"length must be at least {characters(length)}"
                )
            )
        return self

    def max_length(self, length: int) -> SchemaBuilder:
        self._check_bound("max_length", length)
        if self._applies("max_length", TEXT):
            self.validators.append(
                self._custom(
                    lambda s: len(s) <= length, f"length must be at most {characters(length)}"
                )
            )
        return self

    def min_value(self, minimum: Real) -> SchemaBuilder:
        self._check_open()
        if self._applies("min_value", NUMERIC):
            self.validators.append(self._custom(lambda n: n >= minimum, f"must be >= {minimum}"))
        return self

    def max_value(self, maximum: Real) -> SchemaBuilder:
        self._check_open()
        if self._applies("max_value", NUMERIC):
            self.validators.append(self._custom(lambda n: n <= maximum, f"must be <= {maximum}"))
        return self

    def build(self) -> Schema:
        """Finalize into an immutable Schema.

        Returns:
            Schema over the base validator alone, or over a ValidatorChain of
            every accumulated validator in add order
        """
        self._check_open()
        self._built = True
        if len(self.validators) == 1:
            root = self.validators[0]
        else:
            root = ValidatorChain(self.validators)
        return Schema(self.declared_type, validator=root)

    def _custom(self, predicate: Callable[[Any], bool], message: str) -> Validator:
        base = self.validators[0]
        if isinstance(base, OptionalValidator):
            # None passes without reaching the predicate
            inner = CustomValidator(
                accepted_by(base.inner), predicate, message, type_name=base.inner.type_name
            )
            return OptionalValidator(inner)
        if self.shape in (TEXT, NUMERIC):
            expected: Any = self.declared_type
        else:
            expected = accepted_by(base)
        return CustomValidator(expected, predicate, message, type_name=base.type_name)

    def _applies(self, method: str, shape: str) -> bool:
        if self.shape == shape:
            return True
        logger.warning(
            f"Ignoring {method}() on schema for {self.validators[0].type_name}: "
            f"only applies to {shape} types"
        )
        return False

    def _check_bound(self, method: str, bound: int) -> None:
        self._check_open()
        if bound < 0:
            raise SchemaDefinitionError(
                f"{method} cannot be negative: {bound}",
                context={"method": method, "bound": bound},
            )

    def _check_open(self) -> None:
        if self._built:
            raise SchemaDefinitionError("SchemaBuilder cannot be modified after build()")
