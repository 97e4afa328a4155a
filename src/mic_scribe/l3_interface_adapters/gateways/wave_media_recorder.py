"""Gateway: 16-bit PCM WAV recorder via the stdlib wave module."""

from __future__ import annotations

import io
import wave

import numpy as np

from mic_scribe.l1_entities.errors import EncodingFailureError
from mic_scribe.l3_interface_adapters.gateways.queued_media_recorder import QueuedMediaRecorder


class WaveMediaRecorder(QueuedMediaRecorder):
    mime_type = 'audio/wav'

    def _encode(self, audio: np.ndarray, sample_rate: int, channels: int) -> bytes:
        buf = io.BytesIO()
        pcm = np.clip(audio, -1.0, 1.0)
        try:
            wf = wave.open(buf, 'wb')
            try:
                wf.setnchannels(channels)
                wf.setsampwidth(2)  # int16
                wf.setframerate(sample_rate)
                wf.writeframes((pcm * 32767).astype(np.int16).tobytes())
            finally:
                wf.close()
        except (wave.Error, ValueError) as e:
            raise EncodingFailureError(f'WAV encoding failed: {e}') from e
        return buf.getvalue()
