"""Gateway: sounddevice microphone — implements AudioDevice and MediaStream ports."""

from __future__ import annotations

import asyncio
import logging
import threading

import numpy as np
import sounddevice as sd

from mic_scribe.l1_entities.audio_constants import FFT_SIZE
from mic_scribe.l1_entities.errors import DeviceUnavailableError
from mic_scribe.l2_use_cases.ports.audio_device import ChunkListener

log = logging.getLogger('msc.audio')

_HISTORY_FRAMES = FFT_SIZE * 4


class SounddeviceMediaStream:
    """Wraps sounddevice.InputStream; fans chunks out to listeners and keeps a mono history."""

    def __init__(self, sample_rate: int, channels: int, history_frames: int = _HISTORY_FRAMES) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self._history_frames = history_frames
        self._history = np.zeros(0, dtype=np.float32)
        self._listeners: list[ChunkListener] = []
        self._lock = threading.Lock()
        self._stream: sd.InputStream | None = None

    @property
    def active(self) -> bool:
        return self._stream is not None

    def open(self, device: int | str | None = None) -> None:
        self._stream = sd.InputStream(
            device=device,
            samplerate=self.sample_rate,
            channels=self.channels,
            dtype='float32',
            callback=self._callback,
        )
        self._stream.start()

    def _callback(self, indata, frames, time_info, status):
        if status:
            log.warning('PortAudio status: %s', status)
        chunk = indata.copy()
        mono = chunk.mean(axis=1) if chunk.ndim > 1 else chunk
        with self._lock:
            self._history = np.concatenate((self._history, mono.astype(np.float32)))[-self._history_frames :]
            listeners = list(self._listeners)
        for listener in listeners:
            listener(chunk)

    def latest(self, frames: int) -> np.ndarray:
        with self._lock:
            tail = self._history[-frames:].copy()
        if len(tail) < frames:
            tail = np.concatenate((np.zeros(frames - len(tail), dtype=np.float32), tail))
        return tail

    def add_listener(self, listener: ChunkListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ChunkListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def stop(self) -> None:
        if self._stream is not None:
            stream, self._stream = self._stream, None
            stream.stop()
            stream.close()
        with self._lock:
            self._listeners.clear()
            self._history = np.zeros(0, dtype=np.float32)


class SounddeviceAudioDevice:
    """Opens the configured (or default) input device on a worker thread."""

    def __init__(self, device: int | str | None = None) -> None:
        self._device = device

    async def acquire(self, sample_rate: int, channels: int) -> SounddeviceMediaStream:
        """Open the device on a worker thread.

        The thread cannot be interrupted; if the caller is cancelled first, the
        stream it eventually opens is stopped as soon as it arrives.
        """
        opening = asyncio.ensure_future(asyncio.to_thread(self._open, sample_rate, channels))
        try:
            return await asyncio.shield(opening)
        except asyncio.CancelledError:
            opening.add_done_callback(_release_orphan)
            raise

    def _open(self, sample_rate: int, channels: int) -> SounddeviceMediaStream:
        try:
            info = sd.query_devices(self._device, kind='input')
        except (ValueError, sd.PortAudioError) as e:
            raise DeviceUnavailableError(f'No input device available: {e}') from e
        if int(info.get('max_input_channels', 0)) < channels:
            raise DeviceUnavailableError(
                f"Input device '{info.get('name', '?')}' has {info.get('max_input_channels', 0)} channels, "
                f'{channels} required'
            )

        stream = SounddeviceMediaStream(sample_rate, channels)
        try:
            stream.open(self._device)
        except (ValueError, sd.PortAudioError) as e:
            try:
                stream.stop()
            except (ValueError, sd.PortAudioError):
                log.warning('Cleanup after failed open also failed', exc_info=True)
            raise DeviceUnavailableError(f"Cannot open input device '{info.get('name', '?')}': {e}") from e
        log.info("Opened input device '%s' at %d Hz", info.get('name', '?'), sample_rate)
        return stream


def _release_orphan(opening: asyncio.Future) -> None:
    if opening.cancelled() or opening.exception() is not None:
        return
    log.info('Releasing input stream opened after the request was cancelled')
    opening.result().stop()
