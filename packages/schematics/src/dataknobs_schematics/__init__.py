"""Structured validation of nested runtime data.

The dataknobs-schematics package checks values against a declared shape and
reports *every* mismatch with its location, rather than a single pass/fail.

## Modules

### Validators - The checking engine
Composable validators sharing one contract, ``validate(value, path)`` and
``attempt_parse(value)``:
- TypeValidator: exact representation match (``1`` is not ``1.0``)
- ArrayValidator / MappingValidator: recursive sequence and mapping checks
- OptionalValidator / UnionValidator: absence and variant handling
- CustomValidator: predicate plus message, the basis of every constraint
- ValidatorChain: AND-composition with full error collection

### Schema - Declared types
- Schema: binds a validator tree to a declared type (``list[int]``, ...)
- SchemaBuilder: fluent size, length and value bounds

### Model - Declarative records
- Model / field: named, typed fields with a per-instance error bucket

## Example

    ```python
    from dataknobs_schematics import Schema

    result = Schema(list[int]).validate([1, 2, "three", 4, "five"])
    result.paths()      # ['root[2]', 'root[4]']
    ```
"""

from .constraints import gt, gte, in_range, lt, lte, matches, max_length, min_length, one_of
from .exceptions import (
    ModelValidationError,
    ParseError,
    SchemaDefinitionError,
    SchematicsError,
    SerializationError,
)
from .factory import SchemaFactory, load_schema, schema_factory
from .fields import MISSING, Field, FieldTable, field
from .model import Model
from .result import ValidationError, ValidationResult
from .schema import Schema, SchemaBuilder
from .serialization import Serializable, deserialize, serialize
from .shapes import shape_of, validator_for
from .validators import (
    INVALID,
    ArrayValidator,
    CustomValidator,
    MappingValidator,
    OptionalValidator,
    TypeValidator,
    UnionValidator,
    Validator,
    ValidatorChain,
)

__version__ = "0.1.0"

__all__ = [
    # Results
    "ValidationError",
    "ValidationResult",
    # Validators
    "Validator",
    "TypeValidator",
    "CustomValidator",
    "ArrayValidator",
    "MappingValidator",
    "OptionalValidator",
    "UnionValidator",
    "ValidatorChain",
    "INVALID",
    "validator_for",
    "shape_of",
    # Constraints
    "min_length",
    "max_length",
    "matches",
    "one_of",
    "gte",
    "lte",
    "gt",
    "lt",
    "in_range",
    # Schema
    "Schema",
    "SchemaBuilder",
    "SchemaFactory",
    "schema_factory",
    "load_schema",
    # Model
    "Model",
    "Field",
    "FieldTable",
    "field",
    "MISSING",
    # Serialization
    "Serializable",
    "serialize",
    "deserialize",
    # Exceptions
    "SchematicsError",
    "SchemaDefinitionError",
    "ParseError",
    "ModelValidationError",
    "SerializationError",
    "__version__",
]
