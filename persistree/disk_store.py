from __future__ import annotations

import logging
import re
import threading
from pathlib import Path
from typing import Any, Callable, Mapping

from .errors import ParseError, StoreError
from .json_store import AtomicWriter, read_document, serialize_tree
from .keypath import (
    assign_child,
    delete_child,
    resolve_for_read,
    resolve_for_remove,
    resolve_for_write,
)
from .interfaces import ChangeListener, SaveCallback, TreeWriter
from .locks import GLOBAL_PATH_LOCKS
from .notifier import ChangeNotifier
from .save_coordinator import SaveCoordinator
from .scoped import ScopedViewFactory
from .settings import StoreOptions, coerce_options
from .values import MISSING, clone_value

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    A JSON document held in memory and mirrored to a single file.

    - Reads never touch the disk; a get() after set() always sees the new value.
    - Every set()/remove() publishes a change event, then requests a save.
      Saves that arrive while a write is in flight are coalesced into one
      follow-up write; each callback fires once the covering write commits.
    - The file is only ever replaced atomically.

    Construction loads the file if it holds a JSON object; otherwise it writes an
    empty document right away and raises if that first write fails.
    """

    def __init__(
        self,
        path: str | Path,
        options: StoreOptions | Mapping[str, Any] | str | int | None = None,
        *,
        synchronous: bool = False,
    ):
        self._path = Path(path)
        self._options = coerce_options(options)
        self._data: dict[str, Any] = {}
        self._tree_lock = threading.RLock()
        self._notifier = ChangeNotifier()
        self._writer: TreeWriter = AtomicWriter(self._path, self._options.indent_width)
        self._saves = SaveCoordinator(self._persist, synchronous=synchronous)

        if GLOBAL_PATH_LOCKS.claim(self._path):
            logger.warning("%s is already owned by another open store", self._path)
        self._owns_path = True

        if not self.reload():
            try:
                self.save()
                self.flush()
            except StoreError:
                self.close()
                raise

    @property
    def path(self) -> Path:
        return self._path

    @property
    def options(self) -> StoreOptions:
        return self._options

    @property
    def coordinator(self) -> SaveCoordinator:
        return self._saves

    # --- persistence ---

    def reload(self) -> bool:
        """
        Replace the in-memory tree with the file's contents.

        Returns False, leaving memory untouched, when the file is missing or does
        not hold a JSON object. Not synchronized against in-flight saves.
        """
        try:
            doc = read_document(self._path)
        except ParseError as e:
            logger.warning("Could not reload %s: %s", self._path, e)
            return False
        if doc is MISSING:
            return False
        if not isinstance(doc, dict):
            logger.warning("Could not reload %s: root is %s, not an object", self._path, type(doc).__name__)
            return False
        with self._tree_lock:
            self._data = doc
        return True

    def save(self, callback: SaveCallback | None = None) -> None:
        self._saves.request(callback)

    def flush(self, timeout: float | None = None) -> bool:
        return self._saves.flush(timeout)

    def close(self) -> None:
        try:
            self._saves.close()
        finally:
            if self._owns_path:
                self._owns_path = False
                GLOBAL_PATH_LOCKS.release(self._path)

    def __enter__(self) -> "DocumentStore":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _persist(self) -> None:
        with self._tree_lock:
            text = serialize_tree(self._data, self._options.indent_width)
        self._writer.write_text(text)

    # --- reads ---

    def access(self, key: str | None = None, default: Any = None) -> Any:
        """
        Live reference to the node at `key`.

        Mutating the returned object changes the stored tree; call save() afterwards
        to persist such changes.
        """
        with self._tree_lock:
            node = resolve_for_read(self._data, key, self._options.delimiter)
        return default if node is MISSING else node

    def get(self, key: str | None = None, default: Any = None) -> Any:
        """Independent copy of the node at `key`, or `default` when absent."""
        with self._tree_lock:
            node = resolve_for_read(self._data, key, self._options.delimiter)
            if node is MISSING:
                return default
            return clone_value(node)

    def find(self, matcher: str | re.Pattern[str], keys_only: bool = False) -> list[Any]:
        """
        Match the root's direct keys, in stored order.

        A str selects keys starting with it (so "" selects every key); a compiled
        pattern selects keys it matches anywhere. Returns the keys, or copies of
        their values.
        """
        if isinstance(matcher, str):
            def hit(k: str) -> bool:
                return k.startswith(matcher)
        elif isinstance(matcher, re.Pattern):
            def hit(k: str) -> bool:
                return matcher.search(k) is not None
        else:
            return []

        with self._tree_lock:
            keys = [k for k in self._data if hit(k)]
            if keys_only:
                return keys
            return [clone_value(self._data[k]) for k in keys]

    def keys(self) -> list[str]:
        with self._tree_lock:
            return list(self._data)

    def __contains__(self, key: str) -> bool:
        with self._tree_lock:
            return resolve_for_read(self._data, key, self._options.delimiter) is not MISSING

    def __len__(self) -> int:
        with self._tree_lock:
            return len(self._data)

    # --- writes ---

    def _check_open(self) -> None:
        if self._saves.closed:
            raise StoreError(f"{self._path} is closed", self._path)

    def set(self, key: str, value: Any, callback: SaveCallback | None = None) -> None:
        self._check_open()
        stored = clone_value(value)
        with self._tree_lock:
            container, last = resolve_for_write(self._data, key, self._options.delimiter)
            if container is MISSING:
                logger.warning("Cannot set %r: it addresses a list with a non-index segment", key)
            else:
                assign_child(container, last, stored)
        self._notifier.publish(key, value)
        self.save(callback)

    def remove(self, key: str, callback: SaveCallback | None = None) -> None:
        self._check_open()
        with self._tree_lock:
            container, last = resolve_for_remove(self._data, key, self._options.delimiter)
            if container is not MISSING:
                delete_child(container, last)
        # published even when nothing was there to remove
        self._notifier.publish(key, None)
        self.save(callback)

    # --- views & events ---

    def bind(self, base_key: str) -> ScopedViewFactory:
        return ScopedViewFactory(self, base_key)

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        return self._notifier.subscribe(listener)

    def off_change(self, listener: ChangeListener) -> None:
        self._notifier.unsubscribe(listener)

    def __repr__(self) -> str:
        return f"DocumentStore({str(self._path)!r})"


def open_store(
    path: str | Path,
    options: StoreOptions | Mapping[str, Any] | str | int | None = None,
    **kwargs: Any,
) -> DocumentStore:
    return DocumentStore(path, options, **kwargs)
