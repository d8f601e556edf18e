"""Cancellable delayed callbacks.

Used by the catalog to apply the search text only after the user stops
typing.  Every ``schedule`` cancels the pending timer and starts a new one;
``cancel`` and ``flush`` are explicit operations.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from loguru import logger


class Debouncer:
    """Run *callback* once, *delay* seconds after the last ``schedule`` call."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self._delay = delay
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        """(Re)start the quiet period.

        With a zero delay, or outside an event loop, the callback runs
        immediately.
        """
        self.cancel()
        if self._delay <= 0:
            self._callback()
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Debouncer: no running loop, firing immediately")
            self._callback()
            return
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> bool:
        """Drop the pending call.  Returns whether one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def flush(self) -> bool:
        """Run the pending call now.  Returns whether one was pending."""
        if not self.cancel():
            return False
        self._callback()
        return True

    def _fire(self) -> None:
        self._handle = None
        self._callback()
