"""Validator implementations with a consistent, composable API.

Every validator exposes two independent entry points:

- ``validate(value, path)`` walks the value and returns a ``ValidationResult``
  holding *every* defect it can find. It never raises.
- ``attempt_parse(value)`` is a fast existence check. It returns the value
  narrowed to the declared type, or ``INVALID``, and may stop at the first
  failure.

The two must agree on pass/fail for every input.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from .result import ValidationResult


class _Invalid:
    """Sentinel returned by ``attempt_parse`` when a value does not parse."""

    _instance: _Invalid | None = None

    def __new__(cls) -> _Invalid:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "INVALID"

    def __bool__(self) -> bool:
        return False


INVALID: Any = _Invalid()

TypeSpec = type | tuple[type, ...]

SEQUENCE_TYPES: tuple[type, ...] = (list, tuple)


def type_label(expected: TypeSpec) -> str:
    """Human-readable name for a class or tuple of classes."""
    if isinstance(expected, tuple):
        return " | ".join(type_label(t) for t in expected)
    if expected is object:
        return "Any"
    return expected.__name__


def matches_type(value: Any, expected: TypeSpec) -> bool:
    """Exact-representation type check.

    ``isinstance`` semantics, except that a ``bool`` only satisfies a
    declaration that names ``bool`` (or ``object``) itself.
    """
    classes = expected if isinstance(expected, tuple) else (expected,)
    if object in classes:
        return True
    if isinstance(value, bool) and bool not in classes:
        return False
    return isinstance(value, classes)


def type_mismatch(path: str, expected: str, value: Any) -> ValidationResult:
    return ValidationResult.failure(
        path, f"expected type {expected}, got {type(value).__name__}", value
    )


class Validator(ABC):
    """Base class for all validators."""

    #: Rendering of the declared type, used in messages.
    type_name: str = "Any"

    @abstractmethod
    def validate(self, value: Any, path: str = "root") -> ValidationResult:
        """Check a value and collect every defect.

        Args:
            value: Value to validate
            path: Location of ``value`` within the root input

        Returns:
            ValidationResult, empty when the value is valid
        """
        pass

    @abstractmethod
    def attempt_parse(self, value: Any) -> Any:
        """Return ``value`` narrowed to the declared type, or ``INVALID``."""
        pass

    def is_valid(self, value: Any) -> bool:
        return self.validate(value).valid

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type_name})"


class TypeValidator(Validator):
    """Exact representation check against a class or tuple of classes."""

    def __init__(self, expected: TypeSpec, type_name: str | None = None):
        self.expected = expected
        self.type_name = type_name or type_label(expected)

    def validate(self, value: Any, path: str = "root") -> ValidationResult:
        if matches_type(value, self.expected):
            return ValidationResult.success()
        return type_mismatch(path, self.type_name, value)

    def attempt_parse(self, value: Any) -> Any:
        return value if matches_type(value, self.expected) else INVALID


class CustomValidator(Validator):
    """A predicate over values of one type, plus a static failure message.

    Every semantic rule (length and numeric bounds, patterns, enumerations,
    comparisons) is an instance of this class closing over its threshold.

    ``expected`` is either a class (or tuple of classes) checked with
    ``matches_type``, or a validator whose ``attempt_parse`` decides which
    values the predicate may see.
    """

    def __init__(
        self,
        expected: TypeSpec | Validator,
        predicate: Callable[[Any], bool],
        message: str = "custom validation failed",
        type_name: str | None = None,
    ):
        """Initialize custom validator.

        Args:
            expected: Class, tuple of classes or validator gating the values
                the predicate accepts
            predicate: Callable returning True when the value is acceptable
            message: Error message used when the predicate returns False
            type_name: Optional rendering of ``expected`` for messages
        """
        self.expected = expected
        self.predicate = predicate
        self.message = message
        if type_name is None:
            type_name = expected.type_name if isinstance(expected, Validator) else type_label(expected)
        self.type_name = type_name

    def accepts(self, value: Any) -> bool:
        """True when ``value`` has a representation the predicate may see."""
        if isinstance(self.expected, Validator):
            return self.expected.attempt_parse(value) is not INVALID
        return matches_type(value, self.expected)

    def validate(self, value: Any, path: str = "root") -> ValidationResult:
        if not self.accepts(value):
            return type_mismatch(path, self.type_name, value)
        try:
            passed = self.predicate(value)
        except Exception as e:
            return ValidationResult.failure(path, f"custom validation error: {e!s}", value)
        if passed:
            return ValidationResult.success()
        return ValidationResult.failure(path, self.message, value)

    def attempt_parse(self, value: Any) -> Any:
        if not self.accepts(value):
            return INVALID
        try:
            passed = self.predicate(value)
        except Exception:
            return INVALID
        return value if passed else INVALID

    def __repr__(self) -> str:
        return f"CustomValidator({self.type_name}, {self.message!r})"


class ArrayValidator(Validator):
    """Validates ordered sequences element by element."""

    def __init__(
        self,
        element_validator: Validator,
        min_size: int | None = None,
        max_size: int | None = None,
    ):
        self.element_validator = element_validator
        self.min_size = min_size
        self.max_size = max_size
        self.type_name = f"list[{element_validator.type_name}]"

    def validate(self, value: Any, path: str = "root") -> ValidationResult:
        if not isinstance(value, SEQUENCE_TYPES):
            return ValidationResult.failure(
                path, f"expected list, got {type(value).__name__}", value
            )

        result = ValidationResult.success()
        size = len(value)
        if self.min_size is not None and size < self.min_size:
            result.add_error(path, f"array size must be at least {self.min_size}, got {size}")
        if self.max_size is not None and size > self.max_size:
            result.add_error(path, f"array size must be at most {self.max_size}, got {size}")

        for index, element in enumerate(value):
            result.merge(self.element_validator.validate(element, f"{path}[{index}]"))
        return result

    def attempt_parse(self, value: Any) -> Any:
        if not isinstance(value, SEQUENCE_TYPES):
            return INVALID
        size = len(value)
        if self.min_size is not None and size < self.min_size:
            return INVALID
        if self.max_size is not None and size > self.max_size:
            return INVALID

        parsed = []
        for element in value:
            item = self.element_validator.attempt_parse(element)
            if item is INVALID:
                return INVALID
            parsed.append(item)
        return parsed


class MappingValidator(Validator):
    """Validates every key/value pair present in a mapping.

    Only pairs actually present are checked; required keys are the Model
    layer's concern.
    """

    def __init__(self, key_validator: Validator, value_validator: Validator):
        self.key_validator = key_validator
        self.value_validator = value_validator
        self.type_name = f"dict[{key_validator.type_name}, {value_validator.type_name}]"

    def validate(self, value: Any, path: str = "root") -> ValidationResult:
        if not isinstance(value, Mapping):
            return ValidationResult.failure(
                path, f"expected dict, got {type(value).__name__}", value
            )

        result = ValidationResult.success()
        for key, item in value.items():
            result.merge(self.key_validator.validate(key, f"{path}.<key:{key}>"))
            result.merge(self.value_validator.validate(item, f"{path}[{key}]"))
        return result

    def attempt_parse(self, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return INVALID

        parsed = {}
        for key, item in value.items():
            parsed_key = self.key_validator.attempt_parse(key)
            parsed_item = self.value_validator.attempt_parse(item)
            if parsed_key is INVALID or parsed_item is INVALID:
                return INVALID
            parsed[parsed_key] = parsed_item
        return parsed


class OptionalValidator(Validator):
    """Accepts None; otherwise defers to the wrapped validator."""

    def __init__(self, inner: Validator):
        self.inner = inner
        self.type_name = f"{inner.type_name} | None"

    def validate(self, value: Any, path: str = "root") -> ValidationResult:
        if value is None:
            return ValidationResult.success()
        return self.inner.validate(value, path)

    def attempt_parse(self, value: Any) -> Any:
        if value is None:
            return None
        return self.inner.attempt_parse(value)


class UnionValidator(Validator):
    """Accepts a value matching any one of its variants."""

    def __init__(self, variants: list[Validator]):
        if not variants:
            raise ValueError("UnionValidator requires at least one variant")
        self.variants = list(variants)
        self.type_name = " | ".join(v.type_name for v in self.variants)

    def validate(self, value: Any, path: str = "root") -> ValidationResult:
        for variant in self.variants:
            if variant.validate(value, path).valid:
                return ValidationResult.success()
        return ValidationResult.failure(
            path,
            f"expected one of types in ({self.type_name}), got {type(value).__name__}",
            value,
        )

    def attempt_parse(self, value: Any) -> Any:
        for variant in self.variants:
            parsed = variant.attempt_parse(value)
            if parsed is not INVALID:
                return parsed
        return INVALID


class ValidatorChain(Validator):
    """Ordered AND-composition that runs every validator.

    Every validator sees the same original input; a chain is not a transform
    pipeline.
    """

    def __init__(self, validators: list[Validator]):
        if not validators:
            raise ValueError("ValidatorChain requires at least one validator")
        self.validators = list(validators)
        self.type_name = self.validators[0].type_name

    def validate(self, value: Any, path: str = "root") -> ValidationResult:
        result = ValidationResult.success()
        for validator in self.validators:
            result.merge(validator.validate(value, path))
        return result

    def attempt_parse(self, value: Any) -> Any:
        for validator in self.validators:
            if validator.attempt_parse(value) is INVALID:
                return INVALID
        return value

    def __len__(self) -> int:
        return len(self.validators)

    def __repr__(self) -> str:
        return f"ValidatorChain({self.validators!r})"
