"""Structural, type-agnostic rendering of attribute values.

Values arriving from the endpoint have shapes only known at runtime.  They
are classified into a tagged variant and rendered accordingly:

* scalars print as their canonical text (``42``, ``true``, ``null``);
* anything exposing named fields prints as ``Type[name=value, ...]``;
* sequences print as ``[a, b, ...]``;
* everything else falls back to ``repr()``.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum, auto
from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class FieldEnumerable(Protocol):
    """A value that can list its own named fields."""

    def fields(self) -> Dict[str, Any]:
        ...


class ValueKind(Enum):
    SCALAR = auto()
    STRUCTURED = auto()
    SEQUENCE = auto()
    UNKNOWN = auto()


_SCALARS = (bool, int, float, str, type(None))


def classify(value: Any) -> ValueKind:
    """Return the rendering variant of *value*."""
    if isinstance(value, _SCALARS):
        return ValueKind.SCALAR
    if isinstance(value, FieldEnumerable) or isinstance(value, Mapping):
        return ValueKind.STRUCTURED
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.UNKNOWN


def is_composite(value: Any) -> bool:
    """Return whether *value* has named fields a dotted path can select."""
    return classify(value) is ValueKind.STRUCTURED


def fields_of(value: Any) -> Dict[str, Any]:
    """Return the named fields of a structured value."""
    if isinstance(value, FieldEnumerable):
        return dict(value.fields())
    return dict(value)


def _scalar_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _type_label(value: Any) -> str:
    return getattr(value, "type_name", None) or type(value).__name__


def render_value(value: Any, max_depth: int = 1, _depth: int = 0) -> str:
    """Render *value* as text.

    Structured values show their fields; nested structures are expanded up
    to *max_depth* levels below the top and elided as ``Type[...]`` beyond.
    """
    kind = classify(value)
    if kind is ValueKind.SCALAR:
        return _scalar_text(value)

    if kind is ValueKind.STRUCTURED:
        label = _type_label(value)
        if _depth > max_depth:
            return f"{label}[...]"
        parts = [
            f"{name}={render_value(item, max_depth, _depth + 1)}"
            for name, item in fields_of(value).items()
        ]
        return f"{label}[{', '.join(parts)}]"

    if kind is ValueKind.SEQUENCE:
        if _depth > max_depth:
            return "[...]"
        return "[" + ", ".join(
            render_value(item, max_depth, _depth + 1) for item in value
        ) + "]"

    return repr(value)
