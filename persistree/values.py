from __future__ import annotations

from typing import Any


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Sentinel for "no such node", distinct from a stored None.
MISSING: Any = _Missing()


def is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def clone_value(value: Any) -> Any:
    """
    Structural copy of a JSON-like value.

    Mappings and sequences are rebuilt recursively (tuples become lists, keys
    become strings, as they would after a JSON round-trip); scalars are
    immutable and returned as-is.
    """
    if isinstance(value, dict):
        return {str(k): clone_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [clone_value(v) for v in value]
    return value
