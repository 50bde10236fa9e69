"""
Key normalization helpers for analytics event payloads.

Provides the building blocks every data layout relies on:
- ABSENT sentinel for "no value" (distinct from an explicit null)
- to_snake_case / normalize_keys for recursive key normalization
- strip_absent for pruning absent mapping entries
- omit / merge for explicit, ordered record assembly
"""

import re
from collections.abc import Mapping
from typing import Any

_UPPER_AFTER_ALNUM = re.compile(r"(?<=[a-zA-Z0-9])([A-Z])")


class _Absent:
    """Marker for a value that is not present at all."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __copy__(self) -> "_Absent":
        return self

    def __deepcopy__(self, memo: dict) -> "_Absent":
        return self


ABSENT: Any = _Absent()


def to_snake_case(key: str) -> str:
    """
    Convert a camel or mixed-case identifier to lower snake case.

    An underscore is inserted before each uppercase letter that directly
    follows a letter or digit, then the whole key is lowercased.

    Example:
        >>> to_snake_case("userAgent")
        'user_agent'
        >>> to_snake_case("_timestamp")
        '_timestamp'
    """
    return _UPPER_AFTER_ALNUM.sub(r"_\1", key).lower()


def normalize_keys(value: Any) -> Any:
    """
    Recursively normalize mapping keys to snake case.

    Args:
        value: Any JSON-like value

    Returns:
        A new structure with every mapping key converted; sequences keep
        their order and length, scalars are returned unchanged.
    """
    if isinstance(value, list | tuple):
        return [normalize_keys(item) for item in value]
    if isinstance(value, Mapping):
        return {to_snake_case(str(k)): normalize_keys(v) for k, v in value.items()}
    return value


def strip_absent(value: Any) -> Any:
    """
    Recursively drop mapping entries whose value is ABSENT.

    Keys are left untouched and ``None`` is kept. Elements of sequences are
    never removed, only descended into.
    """
    if isinstance(value, list | tuple):
        return [strip_absent(item) for item in value]
    if isinstance(value, Mapping):
        return {k: strip_absent(v) for k, v in value.items() if v is not ABSENT}
    return value


def omit(mapping: Mapping[str, Any] | None, *keys: str) -> dict[str, Any]:
    """Return a shallow copy of ``mapping`` without ``keys``."""
    if not isinstance(mapping, Mapping):
        return {}
    return {k: v for k, v in mapping.items() if k not in keys}


def merge(*sources: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Merge sources left to right; later sources win on key collision.

    Only present values win: an ABSENT value never replaces an earlier one.
    Sources that are not mappings (None, ABSENT, free-form scalars)
    contribute nothing.
    """
    merged: dict[str, Any] = {}
    for source in sources:
        if not isinstance(source, Mapping):
            continue
        for k, v in source.items():
            if v is not ABSENT:
                merged[k] = v
    return merged


def get_value(mapping: Mapping[str, Any] | None, key: str) -> Any:
    """Get ``key`` from ``mapping`` or ABSENT when either is missing."""
    if not isinstance(mapping, Mapping):
        return ABSENT
    return mapping.get(key, ABSENT)


def as_mapping(value: Any) -> dict[str, Any]:
    """Return ``value`` when it is a mapping, otherwise an empty dict."""
    return dict(value) if isinstance(value, Mapping) else {}
