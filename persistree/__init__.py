"""persistree - an in-memory JSON tree mirrored atomically to a single file."""

from __future__ import annotations

__version__ = "0.1.0"

from .disk_store import DocumentStore, open_store
from .errors import ParseError, RenameError, SerializeError, StoreError, WriteError
from .repositories import AsyncDocumentStore
from .save_coordinator import SaveCoordinator, SaveState
from .scoped import ScopedView, ScopedViewFactory
from .settings import StoreOptions, coerce_options, options_from_env

__all__ = [
    "DocumentStore",
    "open_store",
    "AsyncDocumentStore",
    "StoreOptions",
    "coerce_options",
    "options_from_env",
    "SaveCoordinator",
    "SaveState",
    "ScopedView",
    "ScopedViewFactory",
    "StoreError",
    "ParseError",
    "WriteError",
    "SerializeError",
    "RenameError",
]
