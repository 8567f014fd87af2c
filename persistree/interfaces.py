from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from .errors import StoreError

# Receives None once the covering write committed, or the StoreError it failed with.
SaveCallback = Callable[[Optional[StoreError]], None]


class ChangeListener(Protocol):
    def __call__(self, key: str, value: Any) -> None:
        ...


class TreeWriter(Protocol):
    """
    Minimal durable-write interface: persist a full document atomically.
    """

    def write_once(self, tree: Any) -> None:
        """Serialize and commit `tree`; raise StoreError on failure."""
        ...

    def write_text(self, text: str) -> None:
        """Commit already-serialized document text; raise StoreError on failure."""
        ...
