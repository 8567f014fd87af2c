from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from .interfaces import ChangeListener

logger = logging.getLogger(__name__)


class ChangeNotifier:
    """Synchronous change fan-out; listeners run in registration order."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._listeners: list[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        with self._guard:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: ChangeListener) -> None:
        with self._guard:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def publish(self, key: str, value: Any) -> None:
        with self._guard:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(key, value)
            except Exception:
                # a listener cannot cancel the mutation that already happened
                logger.exception("Change listener %r raised for key %r", listener, key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._listeners)
