from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from .errors import ParseError, RenameError, SerializeError, WriteError
from .locks import GLOBAL_PATH_LOCKS, PathLockRegistry
from .paths import ensure_parent_dir, temp_path_for
from .values import MISSING

logger = logging.getLogger(__name__)


def read_document(path: Path) -> Any:
    """
    Read the JSON document stored at `path`.

    Returns MISSING when the file does not exist. Raises ParseError when it
    exists but cannot be read or decoded.
    """
    if not path.exists():
        return MISSING
    try:
        raw = path.read_text(encoding="utf-8")
        return json.loads(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"could not load {path}: {e}", path) from e


def serialize_tree(tree: Any, indent_width: int | None) -> str:
    """Encode `tree` as JSON text; an indent_width of None or 0 gives compact output."""
    try:
        if not indent_width:
            text = json.dumps(tree, ensure_ascii=False, separators=(",", ":"))
        else:
            text = json.dumps(tree, ensure_ascii=False, indent=indent_width)
    except (TypeError, ValueError) as e:
        raise SerializeError(f"tree is not JSON-serializable: {e}", None) from e
    return text + "\n"


class AtomicWriter:
    """
    Performs one durable write of a document to a fixed target path.

    The text goes to a temporary sibling first; os.replace() onto the target is
    the only commit point, so readers see either the old or the new document.
    """

    def __init__(
        self,
        path: Path,
        indent_width: int | None = 2,
        locks: PathLockRegistry = GLOBAL_PATH_LOCKS,
    ):
        self._path = path
        self._indent_width = indent_width
        self._locks = locks

    @property
    def path(self) -> Path:
        return self._path

    def write_once(self, tree: Any) -> None:
        self.write_text(serialize_tree(tree, self._indent_width))

    def write_text(self, text: str) -> None:
        tmp_path = temp_path_for(self._path)
        with self._locks.lock_for(self._path):
            try:
                ensure_parent_dir(self._path)
                with tmp_path.open("w", encoding="utf-8") as f:
                    f.write(text)
                    f.flush()
                    os.fsync(f.fileno())
            except OSError as e:
                self._discard(tmp_path)
                raise WriteError(f"could not write {tmp_path}: {e}", self._path) from e
            try:
                os.replace(tmp_path, self._path)
            except OSError as e:
                self._discard(tmp_path)
                raise RenameError(f"could not replace {self._path}: {e}", self._path) from e
        logger.debug("Committed %s (%d bytes)", self._path, len(text))

    def _discard(self, tmp_path: Path) -> None:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove orphaned temp file %s: %s", tmp_path, e)

