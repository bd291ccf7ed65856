"""Exception hierarchy for dataknobs_schematics.

The validation engine itself never raises: ``Validator.validate`` always
returns a ``ValidationResult``. Exceptions are reserved for the raising
boundaries (``Schema.parse``, ``Model.validate``, deserialization) and for
mistakes made while *defining* a schema or model.

Example:
    ```python
    from dataknobs_schematics import Schema, ParseError

    try:
        Schema(int).parse("42")
    except ParseError as e:
        print(e.error.path)     # 'root'
        print(e.context)        # {'path': 'root', 'value': '42'}
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .result import ValidationError


class SchematicsError(Exception):
    """Base exception for all dataknobs_schematics errors.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}
        self.details = self.context


class SchemaDefinitionError(SchematicsError, ValueError):
    """Raised when a schema, builder or model declaration is malformed.

    Common scenarios include:
    - Declared type the engine cannot map to a validator
    - Negative size or length bounds
    - Modifying a SchemaBuilder after build()
    - Invalid schema configuration documents
    """

    pass


class ParseError(SchematicsError):
    """Raised by ``Schema.parse`` when the data does not satisfy the schema.

    Attributes:
        error: The first collected ValidationError, or None when validation
            passed but the value could not be narrowed
    """

    def __init__(
        self,
        message: str,
        error: ValidationError | None = None,
        context: dict[str, Any] | None = None,
    ):
        if context is None and error is not None:
            context = {"path": error.path, "value": error.value}
        super().__init__(message, context=context)
        self.error = error


class ModelValidationError(SchematicsError):
    """Raised by ``Model.validate`` bundling every field error.

    Attributes:
        errors: Mapping of field name to its list of messages
    """

    def __init__(self, message: str, errors: dict[str, list[str]]):
        super().__init__(message, context={"fields": list(errors)})
        self.errors = errors


class SerializationError(SchematicsError):
    """Raised when converting a model to or from a document fails."""

    pass
