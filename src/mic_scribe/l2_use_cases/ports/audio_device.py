"""Port: microphone device and the live stream it hands out."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

import numpy as np

ChunkListener = Callable[[np.ndarray], None]


class MediaStream(Protocol):
    """A live capture stream. Exclusively owned by whoever acquired it."""

    sample_rate: int
    channels: int

    @property
    def active(self) -> bool:
        """True until stop() has been called."""
        ...

    def latest(self, frames: int) -> np.ndarray:
        """Return the newest *frames* mono samples, zero-padded at the front if fewer exist."""
        ...

    def add_listener(self, listener: ChunkListener) -> None:
        """Receive every captured chunk (shape: frames x channels, float32)."""
        ...

    def remove_listener(self, listener: ChunkListener) -> None:
        ...

    def stop(self) -> None:
        """Stop capturing and release the device. Idempotent."""
        ...


class AudioDevice(Protocol):
    """Grants exclusive access to an audio input device."""

    async def acquire(self, sample_rate: int, channels: int) -> MediaStream:
        """Open the input device.

        Raises:
            DeviceUnavailableError: access denied or no input device.
        """
        ...
