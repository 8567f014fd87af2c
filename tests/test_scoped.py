from __future__ import annotations

import json


def test_bound_view_set_and_get(store):
    store.set("app", {"app1": {"name": "one"}, "app2": {"name": "two", "x": 2}})
    app = store.bind("app")

    app("app3").set("name", "three")
    assert store.get("app.app3") == {"name": "three"}
    assert app("app1").get() == {"name": "one"}
    assert app("app2").get("name") == "two"
    assert app("missing").get("name", "anon") == "anon"


def test_bound_view_remove(store):
    store.set("app", {"app2": {"name": "two", "x": 2}})
    app = store.bind("app")
    app("app2").remove("name")
    assert app("app2").get() == {"x": 2}
    app("app2").remove()
    assert store.get("app") == {}


def test_view_without_sub_key_replaces_instance(store):
    app = store.bind("app")
    app("one").set(None, {"k": 1})
    assert store.get("app.one") == {"k": 1}


def test_view_honours_store_delimiter(tmp_path):
    from persistree.disk_store import DocumentStore

    with DocumentStore(tmp_path / "s.json", "/") as store:
        view = store.bind("users")("u.1")
        assert view.key == "users/u.1"
        view.set("name", "ann")
        assert store.get() == {"users": {"u.1": {"name": "ann"}}}


def test_binding_does_no_io(store):
    before = store.coordinator.write_count
    factory = store.bind("app")
    factory("x")
    factory("y")
    assert store.coordinator.write_count == before


def test_view_writes_reach_disk(store):
    done = []
    store.bind("app")("a").set("n", 1, done.append)
    store.flush(5)
    assert done == [None]
    assert json.loads(store.path.read_text(encoding="utf-8")) == {"app": {"a": {"n": 1}}}
