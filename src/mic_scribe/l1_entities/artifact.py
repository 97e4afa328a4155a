"""Encoded audio clip entity."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

_EXTENSIONS = {
    'audio/wav': 'wav',
    'audio/x-wav': 'wav',
    'audio/wave': 'wav',
    'audio/flac': 'flac',
    'audio/ogg': 'ogg',
    'audio/webm': 'webm',
    'audio/mpeg': 'mp3',
    'audio/mp4': 'm4a',
    'audio/x-m4a': 'm4a',
}


class AudioArtifact(BaseModel):
    """A finalized, encoded audio clip ready to hand to the transcriber."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str
    duration: float = Field(default=0.0, description='Recorded length in seconds (0 when unknown)')
    name: str = ''

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        return not self.data

    @property
    def file_extension(self) -> str:
        base = self.mime_type.split(';')[0].strip().lower()
        return _EXTENSIONS.get(base, 'bin')

    @property
    def filename(self) -> str:
        """Upload filename; the remote API infers the container from its extension."""
        return self.name or f'recording.{self.file_extension}'
