from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .interfaces import SaveCallback

if TYPE_CHECKING:
    from .disk_store import DocumentStore


class ScopedView:
    """
    get/set/remove under `<base><delim><instance>[<delim><sub_key>]` of a store.

    Holds no data and performs no I/O of its own.
    """

    def __init__(self, store: DocumentStore, base_key: str, instance_key: str):
        self._store = store
        self._prefix = f"{base_key}{store.options.delimiter}{instance_key}"

    @property
    def key(self) -> str:
        return self._prefix

    def _key(self, sub_key: str | None) -> str:
        if not sub_key:
            return self._prefix
        return f"{self._prefix}{self._store.options.delimiter}{sub_key}"

    def get(self, sub_key: str | None = None, default: Any = None) -> Any:
        return self._store.get(self._key(sub_key), default)

    def set(self, sub_key: str | None, value: Any, callback: SaveCallback | None = None) -> None:
        self._store.set(self._key(sub_key), value, callback)

    def remove(self, sub_key: str | None = None, callback: SaveCallback | None = None) -> None:
        self._store.remove(self._key(sub_key), callback)

    def __repr__(self) -> str:
        return f"ScopedView({self._prefix!r})"


class ScopedViewFactory:
    """Returned by DocumentStore.bind(base_key); call it with an instance key."""

    def __init__(self, store: DocumentStore, base_key: str):
        self._store = store
        self._base_key = base_key

    @property
    def base_key(self) -> str:
        return self._base_key

    def __call__(self, instance_key: str) -> ScopedView:
        return ScopedView(self._store, self._base_key, instance_key)
