"""Shared validation helpers for frozen dataclass models.

Private module -- not part of the public API. Used by ``__post_init__``
methods in sibling model modules to enforce runtime type constraints and
to convert mutable inputs (lists, dicts) into immutable equivalents.

Only types are checked here. Protocol rules such as length limits, hex
formats or timestamp drift belong to
[nostrcore.protocol.validation][nostrcore.protocol.validation].
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any


def validate_instance(value: Any, expected: type, name: str) -> None:
    """Raise ``TypeError`` if *value* is not an instance of *expected*."""
    if not isinstance(value, expected):
        article = "an" if expected.__name__[0] in "AEIOUaeiou" else "a"
        raise TypeError(f"{name} must be {article} {expected.__name__}, got {type(value).__name__}")


def validate_int(value: Any, name: str) -> None:
    """Raise ``TypeError`` if *value* is not an ``int`` (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


def validate_optional_int(value: Any, name: str) -> None:
    """Like [validate_int][nostrcore.models._validation.validate_int] but allows ``None``."""
    if value is not None:
        validate_int(value, name)


def validate_optional_str(value: Any, name: str) -> None:
    """Raise ``TypeError`` if *value* is neither ``None`` nor a ``str``."""
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{name} must be a str or None, got {type(value).__name__}")


def validate_mapping(value: Any, name: str) -> None:
    """Raise ``TypeError`` if *value* is not a ``Mapping``."""
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be a Mapping, got {type(value).__name__}")


def _iter_sequence(value: Any, name: str) -> Iterable[Any]:
    # Strings and mappings are iterable but never valid sequences here.
    if isinstance(value, str | bytes | Mapping) or not isinstance(value, Iterable):
        raise TypeError(f"{name} must be a sequence, got {type(value).__name__}")
    return value


def freeze_str_sequence(value: Any, name: str) -> tuple[str, ...]:
    """Return *value* as a tuple of strings, raising ``TypeError`` otherwise."""
    items = tuple(_iter_sequence(value, name))
    for i, item in enumerate(items):
        if not isinstance(item, str):
            raise TypeError(f"{name}[{i}] must be a str, got {type(item).__name__}")
    return items


def freeze_int_sequence(value: Any, name: str) -> tuple[int, ...]:
    """Return *value* as a tuple of ints, raising ``TypeError`` otherwise."""
    items = tuple(_iter_sequence(value, name))
    for i, item in enumerate(items):
        validate_int(item, f"{name}[{i}]")
    return items


def freeze_tags(value: Any, name: str = "tags") -> tuple[tuple[str, ...], ...]:
    """Return a tag list as a tuple of string tuples, preserving order."""
    return tuple(
        freeze_str_sequence(tag, f"{name}[{i}]")
        for i, tag in enumerate(_iter_sequence(value, name))
    )


def deep_freeze(obj: Any) -> Any:
    """Recursively wrap dicts with ``MappingProxyType`` and lists as tuples."""
    if isinstance(obj, Mapping):
        return MappingProxyType({k: deep_freeze(v) for k, v in obj.items()})
    if isinstance(obj, list | tuple):
        return tuple(deep_freeze(item) for item in obj)
    return obj
