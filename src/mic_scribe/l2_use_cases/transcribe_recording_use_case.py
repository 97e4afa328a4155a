"""Use case: hand one finished clip to the transcription service."""

from __future__ import annotations

import logging

from mic_scribe.l1_entities.artifact import AudioArtifact
from mic_scribe.l1_entities.errors import EmptyArtifactError, TranscriptionError
from mic_scribe.l1_entities.transcript import Transcription
from mic_scribe.l2_use_cases.ports.transcriber import Transcriber

log = logging.getLogger('msc.transcribe')


class TranscribeRecordingUseCase:
    """Guards the upload (no empty clips, no empty results). Never retries."""

    def __init__(self, transcriber: Transcriber) -> None:
        self._transcriber = transcriber

    async def execute(self, artifact: AudioArtifact | None) -> Transcription:
        if artifact is None or artifact.is_empty:
            raise EmptyArtifactError('No audio recorded')

        log.info('Submitting %s (%d bytes, %s)', artifact.filename, artifact.size, artifact.mime_type)
        result = await self._transcriber.transcribe(artifact)

        if not result.text.strip():
            raise TranscriptionError('Empty transcription received')
        log.info('Transcription received: %d segments, language=%s', len(result.segments), result.language)
        return result
