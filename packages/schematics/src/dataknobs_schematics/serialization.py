"""The document boundary between objects and plain data.

A document is a dict of scalars, lists and dicts. Any object with a
``to_dict`` method and a ``from_dict`` classmethod is ``Serializable``; Model
fields may hold such objects directly or inside lists and dicts, and
``Model.to_dict`` / ``Model.from_dict`` convert them through ``serialize`` and
``deserialize``.

Example:
    ```python
    from dataknobs_schematics.serialization import deserialize, serialize

    data = serialize(user)              # {'email': ..., 'age': ...}
    restored = deserialize(User, data)
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

from .exceptions import SerializationError

T = TypeVar("T")


@runtime_checkable
class Serializable(Protocol):
    """Objects that convert to and from documents."""

    def to_dict(self) -> dict[str, Any]:
        ...

    @classmethod
    def from_dict(cls: type[T], data: Mapping[str, Any]) -> T:
        ...


def serialize(obj: Any) -> dict[str, Any]:
    """Convert an object to a document.

    Raises:
        SerializationError: If the object cannot produce a document
    """
    kind = type(obj).__name__
    if not callable(getattr(obj, "to_dict", None)):
        raise SerializationError(f"Cannot serialize {kind}: no to_dict()", context={"type": kind})

    try:
        document = obj.to_dict()
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(
            f"Cannot serialize {kind}: {e}", context={"type": kind, "error": str(e)}
        ) from e

    if not isinstance(document, dict):
        raise SerializationError(
            f"Cannot serialize {kind}: to_dict() returned {type(document).__name__}",
            context={"type": kind, "document_type": type(document).__name__},
        )
    return document


def deserialize(cls: type[T], data: Any) -> T:
    """Build an instance of ``cls`` from a document.

    Errors raised while building nested objects propagate unchanged, so the
    innermost failing field is the one reported.

    Raises:
        SerializationError: If ``cls`` has no from_dict, ``data`` is not a
            mapping, or construction fails
    """
    kind = cls.__name__
    if not callable(getattr(cls, "from_dict", None)):
        raise SerializationError(
            f"Cannot deserialize {kind}: no from_dict()", context={"type": kind}
        )

    if not isinstance(data, Mapping):
        raise SerializationError(
            f"Cannot deserialize {kind}: expected a mapping, got {type(data).__name__}",
            context={"type": kind, "data_type": type(data).__name__},
        )

    try:
        return cls.from_dict(data)  # type: ignore[attr-defined]
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(
            f"Cannot deserialize {kind}: {e}", context={"type": kind, "error": str(e)}
        ) from e


__all__ = [
    "Serializable",
    "serialize",
    "deserialize",
]
