"""Transcription result entities and their text renderings."""

from __future__ import annotations

from pydantic import BaseModel, Field


def format_clock(seconds: float) -> str:
    """Format seconds as MM:SS, truncating fractions (1.9 -> 00:01)."""
    total = max(int(seconds), 0)
    minutes, secs = divmod(total, 60)
    return f'{minutes:02d}:{secs:02d}'


class TranscriptSegment(BaseModel):
    """A timestamped span of transcribed text."""

    id: int
    start: float = Field(description='Offset in seconds from the start of the clip')
    end: float = Field(description='Offset in seconds from the start of the clip')
    text: str

    def timestamped(self) -> str:
        return f'[{format_clock(self.start)} - {format_clock(self.end)}] {self.text.strip()}'


class Transcription(BaseModel):
    """Text returned by the speech-to-text service for one clip."""

    text: str
    segments: list[TranscriptSegment] = Field(default_factory=list)
    language: str | None = None

    def plain_text(self) -> str:
        if not self.segments:
            return self.text.strip()
        return ' '.join(seg.text.strip() for seg in self.segments if seg.text.strip())

    def timestamped_text(self) -> str:
        if not self.segments:
            return self.text.strip()
        return '\n'.join(seg.timestamped() for seg in self.segments)
