"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import asyncio
from pathlib import Path

import numpy as np
import pytest

from mic_scribe.l1_entities.config import AppConfig
from mic_scribe.l1_entities.errors import DeviceUnavailableError, EncodingFailureError, TranscriptionError
from mic_scribe.l1_entities.transcript import TranscriptSegment, Transcription
from mic_scribe.l2_use_cases.ports.audio_device import ChunkListener
from mic_scribe.l2_use_cases.recording_session import RecordingSession
from mic_scribe.l4_frameworks_and_drivers.infra_config import build_app_config

# --- Protocol-conforming Fakes ---


class FakeMediaStream:
    """Fake live stream — returns a fixed signal from latest(), pushes chunks on demand."""

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        signal: np.ndarray | None = None,
        events: list[str] | None = None,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self._signal = signal if signal is not None else np.zeros(0, dtype=np.float32)
        self._listeners: list[ChunkListener] = []
        self.events = events if events is not None else []
        self.stop_calls = 0

    @property
    def active(self) -> bool:
        return self.stop_calls == 0

    def latest(self, frames: int) -> np.ndarray:
        tail = self._signal[-frames:]
        if len(tail) < frames:
            tail = np.concatenate((np.zeros(frames - len(tail), dtype=np.float32), tail))
        return tail

    def set_signal(self, signal: np.ndarray) -> None:
        self._signal = signal

    def add_listener(self, listener: ChunkListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ChunkListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def push(self, chunk: np.ndarray) -> None:
        for listener in list(self._listeners):
            listener(chunk)

    def stop(self) -> None:
        self.stop_calls += 1
        self.events.append('stream.stop')
        self._listeners.clear()


class FakeAudioDevice:
    """Fake input device. Grants immediately, denies, or waits on ``gate``."""

    def __init__(self, deny: bool = False, gated: bool = False, signal: np.ndarray | None = None) -> None:
        self.deny = deny
        self.gate: asyncio.Event | None = asyncio.Event() if gated else None
        self.signal = signal
        self.events: list[str] = []
        self.streams: list[FakeMediaStream] = []
        self.acquire_calls: list[tuple[int, int]] = []

    async def acquire(self, sample_rate: int, channels: int) -> FakeMediaStream:
        self.acquire_calls.append((sample_rate, channels))
        if self.gate is not None:
            await self.gate.wait()
        if self.deny:
            raise DeviceUnavailableError('Permission denied')
        stream = FakeMediaStream(sample_rate, channels, signal=self.signal, events=self.events)
        self.streams.append(stream)
        return stream


class FakeRecorder:
    """Fake MediaRecorder — collects pushed chunks and returns canned bytes."""

    mime_type = 'audio/wav'

    def __init__(
        self,
        data: bytes = b'RIFF-fake-clip',
        fail_start: bool = False,
        fail_finalize: bool = False,
        events: list[str] | None = None,
    ) -> None:
        self._data = data
        self._fail_start = fail_start
        self._fail_finalize = fail_finalize
        self.events = events if events is not None else []
        self.stream: FakeMediaStream | None = None
        self.chunks: list[np.ndarray] = []
        self.discarded = False

    def start(self, stream) -> None:
        if self._fail_start:
            raise EncodingFailureError('Recorder refused to attach')
        self.stream = stream
        self.events = stream.events
        stream.add_listener(self.chunks.append)

    def finalize(self) -> bytes:
        self.events.append('recorder.finalize')
        if self.stream is not None:
            self.stream.remove_listener(self.chunks.append)
        if self._fail_finalize:
            raise EncodingFailureError('Encoder crashed')
        return self._data

    def discard(self) -> None:
        self.events.append('recorder.discard')
        self.discarded = True


class FakeTranscriber:
    """Fake transcriber for use case and controller tests."""

    def __init__(self, result: Transcription | None = None, fail: bool = False) -> None:
        self._result = result or Transcription(
            text='hello world',
            segments=[TranscriptSegment(id=0, start=0.0, end=1.2, text=' hello world')],
            language='en',
        )
        self._fail = fail
        self._connectivity = (True, '')
        self.transcribe_calls: list = []

    async def transcribe(self, artifact) -> Transcription:
        self.transcribe_calls.append(artifact)
        if self._fail:
            raise TranscriptionError('Transcription request failed: 503')
        return self._result

    def check_connectivity(self) -> tuple[bool, str]:
        return self._connectivity

    def set_result(self, result: Transcription) -> None:
        self._result = result

    def set_connectivity(self, ok: bool, msg: str = '') -> None:
        self._connectivity = (ok, msg)


def sine(freq: float, amplitude: float = 0.5, frames: int = 2048, sample_rate: int = 16000) -> np.ndarray:
    t = np.arange(frames) / sample_rate
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


def make_session(
    device: FakeAudioDevice | None = None,
    recorders: list[FakeRecorder] | None = None,
    **recorder_kwargs,
) -> RecordingSession:
    """Session with fast meter frames; every recorder built is appended to *recorders*."""
    built = recorders if recorders is not None else []

    def factory() -> FakeRecorder:
        rec = FakeRecorder(**recorder_kwargs)
        built.append(rec)
        return rec

    return RecordingSession(device or FakeAudioDevice(), factory, frame_interval=0.005)


# --- Standard Fixtures ---


@pytest.fixture
def default_config() -> AppConfig:
    return build_app_config({})


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    content = """\
recording:
  sample_rate: 44100
  channels: 2
  format: "flac"
meter:
  gain: 2.0
  bars: 10
transcription:
  model: "whisper-large-v3"
  language: "de"
openai:
  base_url: "http://localhost:8000/v1"
  api_key: "sk-test"
"""
    p = tmp_path / 'config.yaml'
    p.write_text(content, encoding='utf-8')
    return p


@pytest.fixture
def fake_transcriber() -> FakeTranscriber:
    return FakeTranscriber()
