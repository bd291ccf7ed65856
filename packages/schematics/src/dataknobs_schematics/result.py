"""Validation result types.

A ``ValidationResult`` is an ordered collection of ``ValidationError`` records.
Its validity is derived, never stored: a result is valid exactly when it holds
no errors.
"""

from __future__ import annotations

import reprlib
from dataclasses import dataclass, field
from typing import Any

_value_repr = reprlib.Repr()
_value_repr.maxlevel = 4
_value_repr.maxstring = 80
_value_repr.maxother = 80


def describe_value(value: Any) -> str:
    """Render a raw input value for diagnostics.

    Strings are returned as-is; everything else goes through a size- and
    depth-limited repr so huge or deeply nested inputs stay printable.
    """
    if isinstance(value, str):
        return value
    return _value_repr.repr(value)


@dataclass(frozen=True)
class ValidationError:
    """A single defect found while validating a value.

    Attributes:
        path: Location of the defect within the root input (e.g. ``root[2]``)
        message: What is wrong
        value: Optional raw-value text of the offending input
    """

    path: str
    message: str
    value: str | None = None

    def __str__(self) -> str:
        text = f"{self.path}: {self.message}"
        if self.value is not None:
            text += f" (got: {self.value})"
        return text


@dataclass
class ValidationResult:
    """Ordered collection of validation errors.

    The result is mutable while a validator assembles it; callers treat the
    returned object as a value.
    """

    errors: list[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def invalid(self) -> bool:
        return bool(self.errors)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    def __len__(self) -> int:
        return len(self.errors)

    @classmethod
    def success(cls) -> ValidationResult:
        return cls()

    @classmethod
    def failure(cls, path: str, message: str, value: Any = None) -> ValidationResult:
        """Create a result holding exactly one error.

        Args:
            path: Location of the defect
            message: Error message
            value: Optional offending value; rendered to text for diagnostics

        Returns:
            Failed ValidationResult
        """
        return cls([_make_error(path, message, value)])

    def add_error(self, path: str, message: str, value: Any = None) -> ValidationResult:
        """Append an error (fluent API).

        Returns:
            Self for chaining
        """
        self.errors.append(_make_error(path, message, value))
        return self

    def merge(self, other: ValidationResult, prefix: str | None = None) -> ValidationResult:
        """Append another result's errors in order.

        Args:
            other: Result whose errors are appended
            prefix: When given and non-empty, each incoming path is re-rooted
                as ``"{prefix}.{path}"``

        Returns:
            Self for chaining
        """
        if not prefix:
            self.errors.extend(other.errors)
            return self
        for error in other.errors:
            self.errors.append(
                ValidationError(f"{prefix}.{error.path}", error.message, error.value)
            )
        return self

    def paths(self) -> list[str]:
        return [error.path for error in self.errors]

    def messages(self) -> list[str]:
        return [error.message for error in self.errors]

    def __str__(self) -> str:
        if self.valid:
            return "Validation successful"
        lines = [f"Validation failed with {len(self.errors)} error(s):"]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)


def _make_error(path: str, message: str, value: Any) -> ValidationError:
    return ValidationError(path, message, None if value is None else describe_value(value))
