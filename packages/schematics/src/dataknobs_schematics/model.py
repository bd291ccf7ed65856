"""Model base class backed by a per-type field table.

Example:
    ```python
    from dataknobs_schematics import Model, field
    from dataknobs_schematics.constraints import gte, matches, min_length

    class User(Model):
        email = field(str, required=True, validators=[min_length(5), matches(r"@")])
        username = field(str, required=True, validators=[min_length(3)])
        age = field(int | None)

        def validate_model(self) -> None:
            if self.age is not None and self.age < 18 and self.email.endswith(".gov"):
                self.add_error("email", "Government emails require age 18+")

    user = User(email="bad", username="ab")
    user.is_valid()     # False
    user.errors         # {'email': [...], 'username': ['must be at least 3 characters']}
    ```

A model *type* is safe to share between threads. A model *instance* is not:
its error bucket is rewritten in place by every ``is_valid()`` call.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from typing import Any, ClassVar, get_args, get_origin

from .exceptions import ModelValidationError, SerializationError
from .fields import Field, FieldTable
from .serialization import Serializable, deserialize, serialize
from .shapes import MAPPING_ORIGINS, SEQUENCE_ORIGINS, is_union
from .validators import INVALID

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "is required"


class Model:
    """Base class for declarative models.

    Subclasses declare fields with ``field(...)``; the field table is built
    once, when the subclass is created, and stored on ``__fields__``.
    """

    __fields__: ClassVar[FieldTable] = FieldTable()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.__fields__ = FieldTable.build(cls)

    def __init__(self, **values: Any):
        unknown = [name for name in values if name not in self.__fields__]
        if unknown:
            raise TypeError(
                f"{type(self).__name__}() got unexpected field(s): {', '.join(unknown)}"
            )
        for f in self.__fields__:
            setattr(self, f.name, values[f.name] if f.name in values else f.get_default())
        self._errors: dict[str, list[str]] = {}

    @property
    def errors(self) -> dict[str, list[str]]:
        """Field name to messages, as of the last ``is_valid()`` call."""
        return self._errors

    def is_valid(self) -> bool:
        """Validate every field, then run ``validate_model``.

        The error bucket is cleared first, so it reflects only this call.

        Returns:
            True if no errors were recorded
        """
        self._errors.clear()
        for f in self.__fields__:
            value = getattr(self, f.name)
            if value is None:
                if f.required:
                    self.add_error(f.name, REQUIRED_MESSAGE)
                continue
            result = f.validate(value)
            for error in result.errors:
                self.add_error(f.name, error.message)
            for location, nested in _nested_models(value):
                if nested.is_valid():
                    continue
                for name, messages in nested._ordered_errors():
                    for message in messages:
                        label = f"{location}.{name}" if location else name
                        self.add_error(f.name, f"{label}: {message}")

        self.validate_model()
        return not self._errors

    def validate(self) -> bool:
        """Validate and raise if invalid.

        Returns:
            True when the model is valid

        Raises:
            ModelValidationError: Bundling every field's messages
        """
        if not self.is_valid():
            message = "; ".join(
                f"{name}: {', '.join(messages)}" for name, messages in self._ordered_errors()
            )
            raise ModelValidationError(message, errors=dict(self._ordered_errors()))
        return True

    def validate_model(self) -> None:
        """Hook for cross-field rules; record problems with ``add_error``."""
        pass

    def add_error(self, field_name: str, message: str) -> None:
        self._errors.setdefault(field_name, []).append(message)

    def _ordered_errors(self) -> list[tuple[str, list[str]]]:
        # Declared fields first, in declaration order, then any extra keys
        # recorded by validate_model.
        names = [f.name for f in self.__fields__ if f.name in self._errors]
        names += [name for name in self._errors if name not in self.__fields__]
        return [(name, self._errors[name]) for name in names]

    # -- document boundary --------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain document of scalars, lists and dicts."""
        return {f.name: _to_document(getattr(self, f.name)) for f in self.__fields__}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Model:
        """Create an instance from a document.

        Missing fields take their default (or None). Present values must have
        the field's declared representation; constraints are not checked here.

        Raises:
            SerializationError: If ``data`` is not a mapping or a value has
                the wrong representation
        """
        if not isinstance(data, Mapping):
            raise SerializationError(
                f"{cls.__name__}.from_dict expects a mapping, got {type(data).__name__}",
                context={"model": cls.__name__, "data_type": type(data).__name__},
            )

        ignored = [key for key in data if key not in cls.__fields__]
        if ignored:
            logger.debug(f"{cls.__name__}.from_dict ignoring unknown keys: {ignored}")

        values = {}
        for f in cls.__fields__:
            if f.name not in data:
                continue
            values[f.name] = _from_document(cls, f, data[f.name])
        return cls(**values)

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(serialize(self), **kwargs)

    @classmethod
    def from_json(cls, text: str | bytes) -> Model:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SerializationError(
                f"Invalid JSON for {cls.__name__}: {e}",
                context={"model": cls.__name__, "error": str(e)},
            ) from e
        return deserialize(cls, data)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, f.name) == getattr(other, f.name) for f in self.__fields__)

    def __repr__(self) -> str:
        values = ", ".join(f"{f.name}={getattr(self, f.name)!r}" for f in self.__fields__)
        return f"{type(self).__name__}({values})"


def _to_document(value: Any) -> Any:
    if isinstance(value, Serializable):
        return serialize(value)
    if isinstance(value, (list, tuple)):
        return [_to_document(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _to_document(item) for key, item in value.items()}
    return value


def _nested_models(value: Any, location: str = "") -> Iterator[tuple[str, Model]]:
    """Yield every Model held by a field value with its location.

    The location is ``""`` for the value itself, and ``"[0]"``, ``"[key]"``
    or ``"[0][key]"`` for models inside sequences and mappings.
    """
    if isinstance(value, Model):
        yield location, value
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            yield from _nested_models(item, f"{location}[{index}]")
    elif isinstance(value, Mapping):
        for key, item in value.items():
            yield from _nested_models(item, f"{location}[{key}]")


def _rebuild(declared: Any, raw: Any) -> Any:
    """Turn nested documents back into the objects ``declared`` names.

    Walks sequence, mapping and ``X | None`` declarations the same way
    ``validator_for`` does; anything else is returned unchanged for the
    field's validator to judge.
    """
    if raw is None:
        return None
    origin = get_origin(declared)
    args = get_args(declared)

    if origin is None:
        if (
            isinstance(declared, type)
            and issubclass(declared, Serializable)
            and isinstance(raw, Mapping)
        ):
            return deserialize(declared, raw)
        return raw

    if origin in SEQUENCE_ORIGINS and args and isinstance(raw, (list, tuple)):
        return [_rebuild(args[0], item) for item in raw]

    if origin in MAPPING_ORIGINS and len(args) == 2 and isinstance(raw, Mapping):
        return {key: _rebuild(args[1], item) for key, item in raw.items()}

    if is_union(origin):
        members = [arg for arg in args if arg is not type(None)]
        if len(members) == 1:
            return _rebuild(members[0], raw)
    return raw


def _from_document(model_cls: type[Model], f: Field, raw: Any) -> Any:
    if raw is None:
        return None

    parsed = f.base_validator.attempt_parse(_rebuild(f.declared_type, raw))
    if parsed is INVALID:
        raise SerializationError(
            f"{model_cls.__name__}.{f.name}: expected {f.base_validator.type_name}, "
            f"got {type(raw).__name__}",
            context={"model": model_cls.__name__, "field": f.name, "value": raw},
        )
    return parsed
