"""Port: encoder that turns a live stream into one contiguous clip."""

from __future__ import annotations

from typing import Protocol

from mic_scribe.l2_use_cases.ports.audio_device import MediaStream


class MediaRecorder(Protocol):
    """Encodes everything a stream captures between start() and finalize()."""

    mime_type: str

    def start(self, stream: MediaStream) -> None:
        """Begin recording *stream*."""
        ...

    def finalize(self) -> bytes:
        """Stop taking audio and return the encoded clip.

        Raises:
            EncodingFailureError: the clip could not be encoded.
        """
        ...

    def discard(self) -> None:
        """Stop taking audio and drop anything buffered."""
        ...
