"""RecorderController — bridges the recording session and transcription use case to the UI."""

from __future__ import annotations

import logging
from pathlib import Path

from mic_scribe.l1_entities.artifact import AudioArtifact
from mic_scribe.l1_entities.errors import MicScribeError
from mic_scribe.l1_entities.recording_state import RecordingState
from mic_scribe.l1_entities.transcript import Transcription
from mic_scribe.l2_use_cases.ports.transcriber import Transcriber
from mic_scribe.l2_use_cases.recording_session import RecordingSession
from mic_scribe.l2_use_cases.transcribe_recording_use_case import TranscribeRecordingUseCase
from mic_scribe.l3_interface_adapters.gateways.audio_file_loader import load_audio_artifact

log = logging.getLogger('msc.controller')


class RecorderController:
    """Central orchestrator for the TUI.

    Every session/use-case error is caught and logged here; callers get a bool
    or an optional result, with the message kept in ``last_error``.
    """

    def __init__(self, session: RecordingSession, transcriber: Transcriber) -> None:
        self.session = session
        self._transcribe_uc = TranscribeRecordingUseCase(transcriber)
        self.latest_transcription: Transcription | None = None
        self.last_error: str = ''
        self._transcribing = False

    @property
    def state(self) -> RecordingState:
        return self.session.state

    @property
    def transcribing(self) -> bool:
        return self._transcribing

    @property
    def has_recording(self) -> bool:
        artifact = self.session.artifact
        return artifact is not None and not artifact.is_empty

    async def start(self) -> bool:
        self.last_error = ''
        try:
            await self.session.start()
        except MicScribeError as e:
            log.warning('Start failed: %s', e)
            self.last_error = str(e)
            return False
        return True

    def stop(self) -> bool:
        self.last_error = ''
        try:
            self.session.stop()
        except MicScribeError as e:
            log.warning('Stop failed: %s', e)
            self.last_error = str(e)
            return False
        return True

    def reset(self) -> None:
        self.last_error = ''
        self.session.reset()

    def close(self) -> None:
        self.session.close()

    async def transcribe_recording(self) -> Transcription | None:
        """Submit the finished recording. The clip is handed off once; a second call finds nothing.

        Refused without touching the clip while another transcription is running.
        """
        if self._transcribing:
            self.last_error = 'Transcription already in progress'
            return None
        artifact = self.session.take_artifact()
        return await self._transcribe(artifact)

    async def transcribe_file(self, path: Path) -> Transcription | None:
        self.last_error = ''
        try:
            artifact = load_audio_artifact(path)
        except (OSError, MicScribeError) as e:
            log.warning('Cannot load %s: %s', path, e)
            self.last_error = str(e)
            return None
        return await self._transcribe(artifact)

    async def _transcribe(self, artifact: AudioArtifact | None) -> Transcription | None:
        self.last_error = ''
        if self._transcribing:
            self.last_error = 'Transcription already in progress'
            return None
        self._transcribing = True
        try:
            result = await self._transcribe_uc.execute(artifact)
        except MicScribeError as e:
            log.error('Transcription failed: %s', e)
            self.last_error = str(e)
            return None
        finally:
            self._transcribing = False
        self.latest_transcription = result
        return result
