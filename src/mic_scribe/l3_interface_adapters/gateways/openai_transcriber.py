"""Gateway: OpenAI-compatible speech-to-text — implements Transcriber port.

Works with any API exposing ``/audio/transcriptions`` (OpenAI, Groq, local
whisper servers, etc.).
"""

from __future__ import annotations

import logging
from typing import Any

import openai

from mic_scribe.l1_entities.artifact import AudioArtifact
from mic_scribe.l1_entities.errors import TranscriptionError
from mic_scribe.l1_entities.transcript import TranscriptSegment, Transcription

log = logging.getLogger('msc.transcribe')


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class OpenAITranscriber:
    """Wraps openai.AsyncOpenAI audio transcriptions to implement the Transcriber protocol."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = 'https://api.openai.com/v1',
        model: str = 'whisper-1',
        language: str | None = 'en',
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._model = model
        self._language = language

    async def transcribe(self, artifact: AudioArtifact) -> Transcription:
        client = openai.AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
        kwargs: dict[str, Any] = {
            'file': (artifact.filename, artifact.data, artifact.mime_type),
            'model': self._model,
            'response_format': 'verbose_json',
            'timestamp_granularities': ['segment'],
        }
        if self._language:
            kwargs['language'] = self._language
        try:
            resp = await client.audio.transcriptions.create(**kwargs)
        except openai.OpenAIError as e:
            log.error('Transcription request failed: %s', e, exc_info=True)
            raise TranscriptionError(f'Transcription request failed: {e}') from e

        segments = [
            TranscriptSegment(
                id=int(_field(seg, 'id', i)),
                start=float(_field(seg, 'start', 0.0)),
                end=float(_field(seg, 'end', 0.0)),
                text=str(_field(seg, 'text', '')),
            )
            for i, seg in enumerate(_field(resp, 'segments') or [])
        ]
        return Transcription(
            text=_field(resp, 'text') or '',
            segments=segments,
            language=_field(resp, 'language'),
        )

    def check_connectivity(self) -> tuple[bool, str]:
        try:
            client = openai.OpenAI(api_key=self._api_key, base_url=self._base_url)
            client.models.list()
            return True, ''
        except openai.AuthenticationError as e:
            return False, f'Authentication failed: {e}'
        except Exception as e:
            return False, f'Cannot connect to transcription API: {e}'
