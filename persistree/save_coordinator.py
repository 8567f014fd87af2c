from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Callable

from .errors import StoreError, WriteError
from .interfaces import SaveCallback

logger = logging.getLogger(__name__)


class SaveState(str, Enum):
    IDLE = "idle"
    WRITING = "writing"


class SaveCoordinator:
    """
    Serializes save requests against a single in-flight write.

    IDLE + request     -> start a write, remember the requester's callback, go WRITING.
    WRITING + request  -> queue the callback; no new write is started.
    write finished     -> deliver its result to the callbacks it covered; if the queue
                          is non-empty, take all of it and start exactly one more write
                          whose result goes to every taken callback; otherwise go IDLE.

    A burst of requests during a write therefore costs one follow-up write, and
    every request gets exactly one callback invocation with the result of the
    write that covered it.

    `persist` does the physical write and raises StoreError on failure. By default
    writes run on a single background worker thread; with synchronous=True they run
    inline on the thread that moved the coordinator out of IDLE.
    """

    def __init__(self, persist: Callable[[], None], *, synchronous: bool = False):
        self._persist = persist
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._state = SaveState.IDLE
        self._pending: deque[SaveCallback | None] = deque()
        self._unreported: StoreError | None = None
        self._closed = False
        self._executor: ThreadPoolExecutor | None = None
        if not synchronous:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="persistree-save")
        self.write_count = 0

    @property
    def state(self) -> SaveState:
        with self._lock:
            return self._state

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def request(self, callback: SaveCallback | None = None) -> None:
        with self._lock:
            if self._closed:
                raise StoreError("save requested on a closed store")
            if self._state is SaveState.WRITING:
                self._pending.append(callback)
                return
            self._state = SaveState.WRITING

        if self._executor is None:
            self._run([callback])
        else:
            self._executor.submit(self._run, [callback])

    def flush(self, timeout: float | None = None) -> bool:
        """
        Block until no write is in flight or queued.

        Returns False if `timeout` expired first. Re-raises the most recent write
        failure that no callback was registered to receive. Must not be called
        from a save callback in background mode.
        """
        with self._idle:
            done = self._idle.wait_for(lambda: self._state is SaveState.IDLE, timeout)
            error, self._unreported = self._unreported, None
        if error is not None:
            raise error
        return done

    def close(self) -> None:
        with self._lock:
            self._closed = True
        try:
            self.flush()
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=True)

    def _run(self, callbacks: list[SaveCallback | None]) -> None:
        while True:
            error = self._write()
            self._deliver(callbacks, error)
            with self._lock:
                if not self._pending:
                    self._state = SaveState.IDLE
                    self._idle.notify_all()
                    return
                callbacks = list(self._pending)
                self._pending.clear()

    def _write(self) -> StoreError | None:
        self.write_count += 1
        try:
            self._persist()
        except StoreError as e:
            return e
        except Exception as e:
            # The state machine must reach IDLE again whatever persist() does.
            err = WriteError(f"unexpected failure while saving: {e}")
            err.__cause__ = e
            return err
        return None

    def _deliver(self, callbacks: list[SaveCallback | None], error: StoreError | None) -> None:
        logger.debug("Save finished for %d request(s): %s", len(callbacks), error or "ok")
        unreported = False
        for cb in callbacks:
            if cb is None:
                unreported = True
                continue
            try:
                cb(error)
            except Exception:
                logger.exception("Save callback raised")
        if error is not None and unreported:
            logger.error("Save failed with no callback to receive it: %s", error)
            with self._lock:
                self._unreported = error
