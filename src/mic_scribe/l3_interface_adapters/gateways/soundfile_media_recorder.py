"""Gateway: compressed-container recorder via libsndfile (soundfile).

Formats map to (container, codec, MIME type). ``ogg_opus`` is the closest
counterpart of a browser's Opus-in-WebM recording.
"""

from __future__ import annotations

import io

import numpy as np
import soundfile as sf

from mic_scribe.l1_entities.errors import EncodingFailureError
from mic_scribe.l3_interface_adapters.gateways.queued_media_recorder import QueuedMediaRecorder

FORMATS: dict[str, tuple[str, str, str]] = {
    'flac': ('FLAC', 'PCM_16', 'audio/flac'),
    'ogg_opus': ('OGG', 'OPUS', 'audio/ogg'),
    'ogg_vorbis': ('OGG', 'VORBIS', 'audio/ogg'),
}


class SoundfileMediaRecorder(QueuedMediaRecorder):
    def __init__(self, fmt: str = 'ogg_opus') -> None:
        super().__init__()
        if fmt not in FORMATS:
            raise ValueError(f'Unsupported format {fmt!r}; expected one of {sorted(FORMATS)}')
        self._container, self._subtype, self.mime_type = FORMATS[fmt]

    def _encode(self, audio: np.ndarray, sample_rate: int, channels: int) -> bytes:
        buf = io.BytesIO()
        try:
            with sf.SoundFile(
                buf,
                mode='w',
                samplerate=sample_rate,
                channels=channels,
                format=self._container,
                subtype=self._subtype,
            ) as f:
                if len(audio):
                    f.write(np.clip(audio, -1.0, 1.0))
        except (sf.LibsndfileError, RuntimeError, ValueError, TypeError) as e:
            raise EncodingFailureError(f'{self._container}/{self._subtype} encoding failed: {e}') from e
        return buf.getvalue()
