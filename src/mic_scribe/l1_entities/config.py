"""Configuration Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class RecordingConfig(BaseModel):
    sample_rate: int = Field(gt=0)
    channels: int = Field(ge=1)
    format: str  # 'wav' | 'flac' | 'ogg_opus' | 'ogg_vorbis'
    device: int | str | None = None  # None = system default input


class MeterConfig(BaseModel):
    fft_size: int
    smoothing: float = Field(ge=0.0, lt=1.0)
    frame_rate: float = Field(gt=0.0)
    gain: float = Field(gt=0.0)
    bars: int = Field(ge=1)
    hot_fraction: float = Field(ge=0.0, le=1.0)
    caution_fraction: float = Field(ge=0.0, le=1.0)

    @field_validator('fft_size')
    @classmethod
    def _power_of_two(cls, value: int) -> int:
        if value < 32 or value & (value - 1):
            raise ValueError('fft_size must be a power of two >= 32')
        return value

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.frame_rate


class TranscriptionConfig(BaseModel):
    model: str
    language: str | None = None  # None = let the service detect it


class AppConfig(BaseModel):
    recording: RecordingConfig
    meter: MeterConfig
    transcription: TranscriptionConfig
