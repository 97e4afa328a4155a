"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from collections.abc import Callable

from mic_scribe.l1_entities.config import AppConfig
from mic_scribe.l2_use_cases.ports.audio_device import AudioDevice
from mic_scribe.l2_use_cases.ports.media_recorder import MediaRecorder
from mic_scribe.l2_use_cases.ports.transcriber import Transcriber
from mic_scribe.l2_use_cases.recording_session import RecordingSession
from mic_scribe.l3_interface_adapters.controllers.recorder_controller import RecorderController
from mic_scribe.l3_interface_adapters.gateways.openai_transcriber import OpenAITranscriber
from mic_scribe.l3_interface_adapters.gateways.wave_media_recorder import WaveMediaRecorder
from mic_scribe.l4_frameworks_and_drivers.infra_config import InfraConfig


def recorder_factory(fmt: str) -> Callable[[], MediaRecorder]:
    """Return a zero-arg factory producing a fresh recorder for *fmt*."""
    if fmt == 'wav':
        return WaveMediaRecorder

    from mic_scribe.l3_interface_adapters.gateways.soundfile_media_recorder import (  # noqa: PLC0415 -- deferred: libsndfile loaded only for compressed formats
        FORMATS,
        SoundfileMediaRecorder,
    )

    if fmt not in FORMATS:
        raise ValueError(f"Unknown recording format {fmt!r}; expected 'wav' or one of {sorted(FORMATS)}")
    return lambda: SoundfileMediaRecorder(fmt)


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        infra: InfraConfig | None = None,
        audio_device: AudioDevice | None = None,
    ) -> None:
        self.config = config
        _infra = infra or InfraConfig()

        self.transcriber: Transcriber = OpenAITranscriber(
            api_key=_infra.openai.api_key,
            base_url=_infra.openai.base_url,
            model=config.transcription.model,
            language=config.transcription.language,
        )
        self.audio_device: AudioDevice = audio_device or self._build_audio_device(config)

        rc = config.recording
        mc = config.meter
        self.session = RecordingSession(
            self.audio_device,
            recorder_factory(rc.format),
            sample_rate=rc.sample_rate,
            channels=rc.channels,
            fft_size=mc.fft_size,
            smoothing=mc.smoothing,
            frame_interval=mc.frame_interval,
        )
        self.controller = RecorderController(self.session, self.transcriber)

    @staticmethod
    def _build_audio_device(config: AppConfig) -> AudioDevice:
        from mic_scribe.l3_interface_adapters.gateways.sounddevice_audio_device import (  # noqa: PLC0415 -- deferred: PortAudio loaded only when a device is needed
            SounddeviceAudioDevice,
        )

        return SounddeviceAudioDevice(device=config.recording.device)
