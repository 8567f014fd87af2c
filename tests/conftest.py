from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Any

import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from persistree.disk_store import DocumentStore  # noqa: E402
from persistree.errors import StoreError  # noqa: E402


class GatedPersist:
    """
    Stand-in for a physical write that blocks until the test opens the gate.
    """

    def __init__(self, inner: Any = None):
        self.inner = inner
        self.started = threading.Event()
        self.gate = threading.Event()
        self.calls = 0
        self.fail: StoreError | None = None

    def __call__(self, *args: Any) -> None:
        self.calls += 1
        self.started.set()
        if not self.gate.wait(5):
            raise StoreError("gate never opened")
        if self.fail is not None:
            raise self.fail
        if self.inner is not None:
            self.inner(*args)


class Recorder:
    """Collects save callback results; usable as many distinct callbacks."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self.results: list[tuple[str, Any]] = []

    def cb(self, tag: str):
        def _callback(error):
            with self._guard:
                self.results.append((tag, error))

        return _callback

    def tags(self) -> list[str]:
        return [t for t, _ in self.results]


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "store.json"


@pytest.fixture
def store(store_path: Path):
    s = DocumentStore(store_path)
    yield s
    s.close()


@pytest.fixture
def gated() -> GatedPersist:
    return GatedPersist()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
