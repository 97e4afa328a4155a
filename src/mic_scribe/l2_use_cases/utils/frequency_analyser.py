"""Real-time frequency analyser over a live MediaStream.

Produces 8-bit frequency magnitudes the way a Web Audio ``AnalyserNode`` does:
Blackman window, |FFT| / N, exponential smoothing over time, decibel
conversion, then a linear map of [min_decibels, max_decibels] onto [0, 255].
"""

from __future__ import annotations

import numpy as np

from mic_scribe.l1_entities.audio_constants import BYTE_MAX, FFT_SIZE, MAX_DECIBELS, MIN_DECIBELS
from mic_scribe.l2_use_cases.ports.audio_device import MediaStream


class FrequencyAnalyser:
    """Analyser handle bound to one stream; close() it together with the stream."""

    def __init__(
        self,
        stream: MediaStream,
        fft_size: int = FFT_SIZE,
        smoothing: float = 0.8,
        min_decibels: float = MIN_DECIBELS,
        max_decibels: float = MAX_DECIBELS,
    ) -> None:
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f'fft_size must be a power of two >= 32, got {fft_size}')
        if min_decibels >= max_decibels:
            raise ValueError('min_decibels must be below max_decibels')
        self._stream: MediaStream | None = stream
        self._fft_size = fft_size
        self._smoothing = smoothing
        self._min_db = min_decibels
        self._db_range = max_decibels - min_decibels
        self._window = np.blackman(fft_size)
        self._smoothed = np.zeros(self.bin_count, dtype=np.float64)

    @property
    def bin_count(self) -> int:
        return self._fft_size // 2

    @property
    def closed(self) -> bool:
        return self._stream is None

    def byte_frequency_data(self) -> np.ndarray:
        """Sample the newest window of the stream; returns ``bin_count`` uint8 magnitudes."""
        if self._stream is None:
            return np.zeros(self.bin_count, dtype=np.uint8)

        samples = np.asarray(self._stream.latest(self._fft_size), dtype=np.float64)
        spectrum = np.abs(np.fft.rfft(samples * self._window))[: self.bin_count] / self._fft_size
        self._smoothed = self._smoothing * self._smoothed + (1.0 - self._smoothing) * spectrum

        with np.errstate(divide='ignore'):
            db = 20.0 * np.log10(self._smoothed)
        scaled = np.floor((db - self._min_db) * (BYTE_MAX / self._db_range))
        scaled = np.nan_to_num(scaled, nan=0.0, neginf=0.0, posinf=float(BYTE_MAX))
        return np.clip(scaled, 0, BYTE_MAX).astype(np.uint8)

    def close(self) -> None:
        self._stream = None
        self._smoothed[:] = 0.0
