from __future__ import annotations

from typing import Any

from .values import MISSING, is_container


def split_key(key: str, delimiter: str) -> list[str]:
    """
    Decompose a delimited key into its segments.

    Empty segments (leading, trailing or doubled delimiters) are kept, so
    join_key(split_key(k, d), d) == k for every key.
    """
    return key.split(delimiter)


def join_key(segments: list[str], delimiter: str) -> str:
    return delimiter.join(segments)


def _list_index(container: list[Any], segment: str) -> int | None:
    if not segment.isdigit():
        return None
    idx = int(segment)
    return idx if idx < len(container) else None


def _child(node: Any, segment: str) -> Any:
    if isinstance(node, dict):
        return node.get(segment, MISSING)
    if isinstance(node, list):
        idx = _list_index(node, segment)
        return MISSING if idx is None else node[idx]
    return MISSING


def resolve_for_read(tree: dict[str, Any], key: str | None, delimiter: str) -> Any:
    """
    Walk `key` down from the root without creating anything.

    Returns the live node, or MISSING as soon as a segment cannot be followed.
    An empty or None key yields the root itself.
    """
    if not key:
        return tree
    node: Any = tree
    for segment in split_key(key, delimiter):
        node = _child(node, segment)
        if node is MISSING:
            return MISSING
    return node


def _writable_slot(container: Any, segment: str) -> bool:
    if isinstance(container, dict):
        return True
    if isinstance(container, list):
        # an existing index, or one past the end (append)
        return segment.isdigit() and int(segment) <= len(container)
    return False


def resolve_for_write(tree: dict[str, Any], key: str, delimiter: str) -> tuple[Any, str]:
    """
    Return (container, final_segment) for assigning at `key`.

    Every intermediate segment that is absent, or whose value is not a mapping
    or list, gets an empty mapping. Existing lists are never replaced: a numeric
    segment indexes into one, and the index equal to its length appends. When a
    segment cannot address a list the container is MISSING and nothing is
    created. The caller assigns with assign_child(container, final_segment, value).
    """
    segments = split_key(key, delimiter)
    node: Any = tree
    for segment in segments[:-1]:
        if not _writable_slot(node, segment):
            return MISSING, segments[-1]
        child = _child(node, segment)
        if not is_container(child):
            child = {}
            assign_child(node, segment, child)
        node = child
    if not _writable_slot(node, segments[-1]):
        return MISSING, segments[-1]
    return node, segments[-1]


def resolve_for_remove(tree: dict[str, Any], key: str, delimiter: str) -> tuple[Any, str]:
    """Like resolve_for_write, but never creates; the container may be MISSING."""
    segments = split_key(key, delimiter)
    node: Any = tree
    for segment in segments[:-1]:
        node = _child(node, segment)
        if node is MISSING:
            break
    return node, segments[-1]


def assign_child(container: Any, segment: str, value: Any) -> None:
    if isinstance(container, list):
        idx = int(segment)
        if idx == len(container):
            container.append(value)
        else:
            container[idx] = value
    else:
        container[segment] = value


def delete_child(container: Any, segment: str) -> bool:
    """Delete `segment` from `container` if present. Returns whether anything was removed."""
    if isinstance(container, dict):
        if segment in container:
            del container[segment]
            return True
        return False
    if isinstance(container, list):
        idx = _list_index(container, segment)
        if idx is not None:
            del container[idx]
            return True
    return False
