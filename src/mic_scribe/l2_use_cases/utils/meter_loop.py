"""Self-rescheduling frame loop with an explicit cancellation handle."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

log = logging.getLogger('msc.meter')


class MeterLoop:
    """Runs *on_frame* every *interval* seconds on the running event loop.

    Each frame schedules its successor before doing any work, so the loop
    never ends on its own: it stops only when cancel() is called. Not
    restartable; create a new loop per recording.
    """

    def __init__(self, on_frame: Callable[[], None], interval: float) -> None:
        if interval <= 0:
            raise ValueError(f'interval must be positive, got {interval}')
        self._on_frame = on_frame
        self._interval = interval
        self._loop: asyncio.AbstractEventLoop | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._cancelled = False
        self.frames = 0

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        """Schedule the first frame. Must be called from inside the event loop."""
        if self._cancelled or self._handle is not None:
            raise RuntimeError('MeterLoop cannot be restarted')
        self._loop = asyncio.get_running_loop()
        self._schedule()

    def cancel(self) -> None:
        """Stop the loop. No frame runs after this returns. Idempotent."""
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        if self._loop is None:
            raise RuntimeError('MeterLoop was never started')
        self._handle = self._loop.call_later(self._interval, self._run_frame)

    def _run_frame(self) -> None:
        if self._cancelled:
            return
        self._schedule()
        self.frames += 1
        try:
            self._on_frame()
        except Exception:
            log.error('Meter frame failed; stopping meter loop', exc_info=True)
            self.cancel()
