"""Textual Message subclasses — contracts between workers and the App."""

from __future__ import annotations

from textual.message import Message

from mic_scribe.l1_entities.transcript import Transcription


class RecordingStateChanged(Message):
    """Posted when an asynchronous start attempt resolves, granted or not."""

    def __init__(self, state: str, error: str = '') -> None:
        super().__init__()
        self.state = state
        self.error = error


class TranscriptionReady(Message):
    """Posted by the transcription worker when the service returns text."""

    def __init__(self, transcription: Transcription, source: str) -> None:
        super().__init__()
        self.transcription = transcription
        self.source = source


class TranscriptionFailed(Message):
    """Posted by the transcription worker when the upload or service fails."""

    def __init__(self, error: str) -> None:
        super().__init__()
        self.error = error
