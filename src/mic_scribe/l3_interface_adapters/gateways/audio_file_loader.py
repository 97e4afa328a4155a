"""Gateway: audio file loader — reads an existing file into an AudioArtifact for upload."""

from __future__ import annotations

import mimetypes
from pathlib import Path

from mic_scribe.l1_entities.artifact import AudioArtifact
from mic_scribe.l1_entities.errors import EmptyArtifactError

_FALLBACK_MIME = 'application/octet-stream'

# mimetypes knows these inconsistently across platforms
_KNOWN_MIME = {
    '.wav': 'audio/wav',
    '.flac': 'audio/flac',
    '.ogg': 'audio/ogg',
    '.oga': 'audio/ogg',
    '.opus': 'audio/ogg',
    '.webm': 'audio/webm',
    '.mp3': 'audio/mpeg',
    '.m4a': 'audio/mp4',
    '.mp4': 'audio/mp4',
}


def guess_mime_type(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in _KNOWN_MIME:
        return _KNOWN_MIME[suffix]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or _FALLBACK_MIME


def load_audio_artifact(path: Path) -> AudioArtifact:
    """Read *path* as-is; the remote service decodes the container itself.

    Raises:
        FileNotFoundError: the file does not exist.
        EmptyArtifactError: the file is empty.
    """
    path = path.expanduser()
    if not path.is_file():
        raise FileNotFoundError(f'Audio file not found: {path}')
    data = path.read_bytes()
    if not data:
        raise EmptyArtifactError(f'Audio file is empty: {path}')
    return AudioArtifact(data=data, mime_type=guess_mime_type(path), name=path.name)
