"""Port: remote speech-to-text service."""

from __future__ import annotations

from typing import Protocol

from mic_scribe.l1_entities.artifact import AudioArtifact
from mic_scribe.l1_entities.transcript import Transcription


class Transcriber(Protocol):
    """Abstract transcription service. Zero framework types leak through."""

    async def transcribe(self, artifact: AudioArtifact) -> Transcription:
        """Transcribe one encoded clip.

        Raises:
            TranscriptionError: the remote call failed.
        """
        ...

    def check_connectivity(self) -> tuple[bool, str]:
        """Pre-flight connectivity check. Returns (ok, error_message)."""
        ...
