from __future__ import annotations

from persistree.keypath import (
    assign_child,
    delete_child,
    join_key,
    resolve_for_read,
    resolve_for_remove,
    resolve_for_write,
    split_key,
)
from persistree.values import MISSING, clone_value


def test_split_keeps_empty_segments():
    assert split_key("a.b.c", ".") == ["a", "b", "c"]
    assert split_key(".a.", ".") == ["", "a", ""]
    assert split_key("plain", ".") == ["plain"]
    for key in ("a.b", ".a.", "a..b", ""):
        assert join_key(split_key(key, "."), ".") == key


def test_read_empty_key_returns_root():
    tree = {"a": 1}
    assert resolve_for_read(tree, "", ".") is tree
    assert resolve_for_read(tree, None, ".") is tree


def test_read_short_circuits_without_creating():
    tree = {"a": {"b": 1}}
    assert resolve_for_read(tree, "a.x.y", ".") is MISSING
    assert resolve_for_read(tree, "a.b.c", ".") is MISSING
    assert tree == {"a": {"b": 1}}


def test_read_follows_list_indices():
    tree = {"names": ["test0", "test1"]}
    assert resolve_for_read(tree, "names.1", ".") == "test1"
    assert resolve_for_read(tree, "names.2", ".") is MISSING
    assert resolve_for_read(tree, "names.x", ".") is MISSING


def test_read_distinguishes_stored_none():
    tree = {"a": None}
    assert resolve_for_read(tree, "a", ".") is None
    assert resolve_for_read(tree, "a.b", ".") is MISSING


def test_write_single_segment_targets_root():
    tree: dict = {}
    container, last = resolve_for_write(tree, "port", ".")
    assert container is tree
    assert last == "port"


def test_write_creates_intermediate_mappings():
    tree: dict = {"a": 5}
    container, last = resolve_for_write(tree, "a.b.c", ".")
    assign_child(container, last, 1)
    assert tree == {"a": {"b": {"c": 1}}}


def test_write_into_existing_list_index():
    tree: dict = {"l": [{"x": 1}, {"x": 2}]}
    container, last = resolve_for_write(tree, "l.1.x", ".")
    assign_child(container, last, 3)
    assert tree == {"l": [{"x": 1}, {"x": 3}]}

    container, last = resolve_for_write(tree, "l.0", ".")
    assign_child(container, last, "first")
    assert tree["l"][0] == "first"


def test_write_appends_at_list_length():
    tree: dict = {"l": [1, 2]}
    container, last = resolve_for_write(tree, "l.2", ".")
    assign_child(container, last, 3)
    assert tree == {"l": [1, 2, 3]}

    container, last = resolve_for_write(tree, "l.3.x", ".")
    assign_child(container, last, "v")
    assert tree == {"l": [1, 2, 3, {"x": "v"}]}


def test_write_never_replaces_a_list():
    tree: dict = {"l": [1, 2]}
    for key in ("l.name", "l.5", "l.name.deeper", "l.-1"):
        container, last = resolve_for_write(tree, key, ".")
        assert container is MISSING
    assert tree == {"l": [1, 2]}


def test_write_replaces_scalars_and_none():
    tree: dict = {"a": None, "b": 3, "l": [7]}
    for key in ("a.x", "b.x", "l.0.x"):
        container, last = resolve_for_write(tree, key, ".")
        assign_child(container, last, 1)
    assert tree == {"a": {"x": 1}, "b": {"x": 1}, "l": [{"x": 1}]}


def test_remove_resolution_never_creates():
    tree: dict = {"a": {"b": 1}}
    container, last = resolve_for_remove(tree, "x.y", ".")
    assert container is MISSING
    assert tree == {"a": {"b": 1}}

    container, last = resolve_for_remove(tree, "a.b", ".")
    assert delete_child(container, last) is True
    assert tree == {"a": {}}
    assert delete_child(container, last) is False


def test_delete_child_on_list():
    items = ["a", "b", "c"]
    assert delete_child(items, "1") is True
    assert items == ["a", "c"]
    assert delete_child(items, "9") is False


def test_clone_value_is_structural():
    src = {"a": [1, {"b": (2, 3)}], 4: "four"}
    out = clone_value(src)
    assert out == {"a": [1, {"b": [2, 3]}], "4": "four"}
    out["a"][1]["b"].append(9)
    assert src["a"][1]["b"] == (2, 3)
