from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any, Callable, Mapping

from .disk_store import DocumentStore
from .errors import StoreError
from .interfaces import ChangeListener, SaveCallback
from .scoped import ScopedViewFactory
from .settings import StoreOptions


class AsyncDocumentStore:
    """
    Async wrapper around DocumentStore.

    Reads stay synchronous (memory only). set/remove/save apply the change
    immediately and return once the write covering it has committed, raising
    the StoreError if it did not. Use `await AsyncDocumentStore.open(...)`
    so the initial load/save does not block the event loop.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @classmethod
    async def open(
        cls,
        path: str | Path,
        options: StoreOptions | Mapping[str, Any] | str | int | None = None,
    ) -> "AsyncDocumentStore":
        store = await asyncio.to_thread(DocumentStore, path, options)
        return cls(store)

    @property
    def store(self) -> DocumentStore:
        return self._store

    def _completion(self) -> tuple[asyncio.Future[None], SaveCallback]:
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[None] = loop.create_future()

        def _resolve(error: StoreError | None) -> None:
            if fut.done():
                return
            if error is None:
                fut.set_result(None)
            else:
                fut.set_exception(error)

        def _callback(error: StoreError | None) -> None:
            # called from the save worker thread
            loop.call_soon_threadsafe(_resolve, error)

        return fut, _callback

    async def save(self) -> None:
        fut, cb = self._completion()
        self._store.save(cb)
        await fut

    async def set(self, key: str, value: Any) -> None:
        fut, cb = self._completion()
        self._store.set(key, value, cb)
        await fut

    async def remove(self, key: str) -> None:
        fut, cb = self._completion()
        self._store.remove(key, cb)
        await fut

    async def reload(self) -> bool:
        return await asyncio.to_thread(self._store.reload)

    async def close(self) -> None:
        await asyncio.to_thread(self._store.close)

    def get(self, key: str | None = None, default: Any = None) -> Any:
        return self._store.get(key, default)

    def access(self, key: str | None = None, default: Any = None) -> Any:
        return self._store.access(key, default)

    def find(self, matcher: str | re.Pattern[str], keys_only: bool = False) -> list[Any]:
        return self._store.find(matcher, keys_only)

    def bind(self, base_key: str) -> ScopedViewFactory:
        return self._store.bind(base_key)

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        return self._store.on_change(listener)
