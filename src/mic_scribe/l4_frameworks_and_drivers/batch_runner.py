"""Batch runner — headless transcribe-from-file, result on stdout."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from mic_scribe.l1_entities.config import AppConfig
from mic_scribe.l1_entities.errors import MicScribeError
from mic_scribe.l2_use_cases.ports.transcriber import Transcriber
from mic_scribe.l2_use_cases.transcribe_recording_use_case import TranscribeRecordingUseCase
from mic_scribe.l3_interface_adapters.gateways.audio_file_loader import load_audio_artifact
from mic_scribe.l3_interface_adapters.gateways.openai_transcriber import OpenAITranscriber
from mic_scribe.l4_frameworks_and_drivers.infra_config import InfraConfig
from mic_scribe.l4_frameworks_and_drivers.widgets.status_bar import format_size


def _err(msg: str) -> None:
    print(msg, file=sys.stderr, flush=True)


def run_batch(
    audio_path: Path,
    config: AppConfig,
    infra: InfraConfig,
    timestamps: bool = False,
    transcriber: Transcriber | None = None,
) -> None:
    """Transcribe *audio_path* once and print the text. Blocks until done."""
    _err(f'Loading audio: {audio_path}')
    try:
        artifact = load_audio_artifact(audio_path)
    except (OSError, MicScribeError) as exc:
        _err(f'Error: {exc}')
        raise SystemExit(1) from exc
    _err(f'Uploading {format_size(artifact.size)} ({artifact.mime_type}) to {config.transcription.model}...')

    if transcriber is None:
        transcriber = OpenAITranscriber(
            api_key=infra.openai.api_key,
            base_url=infra.openai.base_url,
            model=config.transcription.model,
            language=config.transcription.language,
        )

    try:
        result = asyncio.run(TranscribeRecordingUseCase(transcriber).execute(artifact))
    except MicScribeError as exc:
        _err(f'Transcription failed: {exc}')
        raise SystemExit(1) from exc

    _err(f'Transcription complete — {len(result.segments)} segments.')
    print(result.timestamped_text() if timestamps else result.plain_text())
