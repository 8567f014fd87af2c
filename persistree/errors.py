from __future__ import annotations

from pathlib import Path


class StoreError(Exception):
    """Base exception for persistree failures."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class ParseError(StoreError):
    """The backing file exists but does not hold a JSON document."""


class WriteError(StoreError):
    """Writing the temporary file failed; the target was left untouched."""


class SerializeError(WriteError):
    """The tree holds a value that cannot be encoded as JSON."""


class RenameError(StoreError):
    """Replacing the target with the freshly written temporary file failed."""
