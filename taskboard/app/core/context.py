"""Cooperative cancellation token passed down every task operation."""

from __future__ import annotations

import threading
import time
from typing import Optional

from taskboard.app.core.errors import CancelledError


class RequestContext:
    """
    Carries an optional deadline and a cancel flag.

    Nothing is interrupted: layers call ``check()`` around storage access and
    abort with ``CancelledError`` once the context is done.
    """

    def __init__(self, timeout: Optional[float] = None, *, parent: Optional["RequestContext"] = None):
        self._cancelled = threading.Event()
        self._parent = parent
        self._deadline: Optional[float] = None
        if timeout is not None:
            self._deadline = time.monotonic() + max(0.0, float(timeout))
        if parent is not None and parent._deadline is not None:
            if self._deadline is None or parent._deadline < self._deadline:
                self._deadline = parent._deadline

    @classmethod
    def background(cls) -> "RequestContext":
        return cls()

    def with_timeout(self, timeout: float) -> "RequestContext":
        return RequestContext(timeout, parent=self)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.cancelled()

    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def done(self) -> bool:
        return self.cancelled() or self.expired()

    def check(self) -> None:
        if self.cancelled():
            raise CancelledError("context cancelled")
        if self.expired():
            raise CancelledError("context deadline exceeded")
