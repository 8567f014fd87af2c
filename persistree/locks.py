from __future__ import annotations

import threading
from pathlib import Path


def _normalize(path: Path) -> str:
    return str(path.resolve())


class PathLockRegistry:
    """
    Per-file commit locks and an owner count for backing files in this process.

    Commits to the same file from different stores are serialized through
    lock_for(); claim()/release() let a store notice it is not the only owner.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._owners: dict[str, int] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = _normalize(path)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def claim(self, path: Path) -> int:
        """Register one more owner of `path`; returns how many owners existed before."""
        key = _normalize(path)
        with self._guard:
            before = self._owners.get(key, 0)
            self._owners[key] = before + 1
            return before

    def release(self, path: Path) -> None:
        key = _normalize(path)
        with self._guard:
            left = self._owners.get(key, 0) - 1
            if left > 0:
                self._owners[key] = left
            else:
                self._owners.pop(key, None)

    def owners(self, path: Path) -> int:
        with self._guard:
            return self._owners.get(_normalize(path), 0)


GLOBAL_PATH_LOCKS = PathLockRegistry()
