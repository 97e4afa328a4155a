"""Shared recorder plumbing: buffer stream chunks through a queue, encode on finalize."""

from __future__ import annotations

import logging
import queue

import numpy as np

from mic_scribe.l1_entities.errors import EncodingFailureError
from mic_scribe.l2_use_cases.ports.audio_device import MediaStream

log = logging.getLogger('msc.audio')


class QueuedMediaRecorder:
    """Base class for MediaRecorder gateways. Subclasses implement ``_encode``."""

    mime_type = 'application/octet-stream'

    def __init__(self) -> None:
        self._queue: queue.Queue[np.ndarray] = queue.Queue()
        self._stream: MediaStream | None = None
        self._sample_rate = 0
        self._channels = 0

    def start(self, stream: MediaStream) -> None:
        if self._stream is not None:
            raise EncodingFailureError('Recorder already started')
        self._stream = stream
        self._sample_rate = stream.sample_rate
        self._channels = stream.channels
        stream.add_listener(self._on_chunk)

    def _on_chunk(self, chunk: np.ndarray) -> None:
        self._queue.put(chunk)

    def _detach(self) -> list[np.ndarray]:
        if self._stream is not None:
            self._stream.remove_listener(self._on_chunk)
            self._stream = None
        chunks = []
        while True:
            try:
                chunks.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return chunks

    def finalize(self) -> bytes:
        if self._stream is None:
            raise EncodingFailureError('Recorder was never started')
        chunks = self._detach()
        if chunks:
            audio = np.concatenate([c.reshape(-1, self._channels) for c in chunks])
        else:
            audio = np.zeros((0, self._channels), dtype=np.float32)
        data = self._encode(audio, self._sample_rate, self._channels)
        log.debug('Encoded %d frames into %d bytes (%s)', len(audio), len(data), self.mime_type)
        return data

    def discard(self) -> None:
        dropped = self._detach()
        if dropped:
            log.debug('Discarded %d buffered chunks', len(dropped))

    def _encode(self, audio: np.ndarray, sample_rate: int, channels: int) -> bytes:
        raise NotImplementedError
