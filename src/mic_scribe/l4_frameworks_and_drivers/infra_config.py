"""Infrastructure provider configs — lives in L4, not domain."""

from __future__ import annotations

import copy

from pydantic import BaseModel, Field

from mic_scribe.l1_entities.config import AppConfig
from mic_scribe.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'recording': {
        'sample_rate': 16000,
        'channels': 1,
        'format': 'wav',
        'device': None,
    },
    'meter': {
        'fft_size': 512,
        'smoothing': 0.8,
        'frame_rate': 60.0,
        'gain': 1.67,
        'bars': 20,
        'hot_fraction': 0.2,
        'caution_fraction': 0.2,
    },
    'transcription': {
        'model': 'whisper-1',
        'language': 'en',
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)


class OpenAIProviderConfig(BaseModel):
    api_key: str | None = None  # None → SDK reads OPENAI_API_KEY env
    base_url: str = 'https://api.openai.com/v1'


class InfraConfig(BaseModel):
    """Groups all provider-specific settings outside the domain layer."""

    openai: OpenAIProviderConfig = Field(default_factory=OpenAIProviderConfig)
