"""Loading indicator shared by every store call."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

_logger = logging.getLogger(__name__)


@dataclass
class BusyTracker:
    """Reference-counted busy signal.

    Overlapping operations keep the signal raised until the last one finishes.
    The listener is only called when the signal flips.
    """

    listener: Callable[[bool], None] | None = None
    _pending: int = field(default=0, init=False)

    @property
    def busy(self) -> bool:
        """Return whether any tracked operation is in flight."""
        return self._pending > 0

    @property
    def pending(self) -> int:
        """Return the number of tracked operations in flight."""
        return self._pending

    @asynccontextmanager
    async def track(self) -> AsyncIterator[None]:
        """Mark the wrapped block as in flight."""
        self._pending += 1
        if self._pending == 1:
            self._notify(True)
        try:
            yield
        finally:
            self._pending -= 1
            if self._pending == 0:
                self._notify(False)

    def _notify(self, busy: bool) -> None:
        if self.listener is None:
            return
        try:
            self.listener(busy)
        except Exception:
            _logger.exception("Busy listener failed")
