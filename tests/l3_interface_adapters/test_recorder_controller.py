"""Tests for RecorderController — errors become bool/None plus last_error."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from mic_scribe.l1_entities.recording_state import RecordingState
from mic_scribe.l3_interface_adapters.controllers.recorder_controller import RecorderController
from tests.conftest import FakeAudioDevice, FakeTranscriber, make_session


def _controller(device=None, transcriber=None, **recorder_kwargs) -> RecorderController:
    return RecorderController(make_session(device, **recorder_kwargs), transcriber or FakeTranscriber())


class TestRecording:
    @pytest.mark.asyncio
    async def test_start_stop(self):
        ctrl = _controller()
        assert await ctrl.start() is True
        assert ctrl.state is RecordingState.RECORDING
        assert ctrl.stop() is True
        assert ctrl.state is RecordingState.STOPPED
        assert ctrl.has_recording

    @pytest.mark.asyncio
    async def test_denied_start_reports_error(self):
        ctrl = _controller(FakeAudioDevice(deny=True))
        assert await ctrl.start() is False
        assert 'Permission denied' in ctrl.last_error
        assert ctrl.state is RecordingState.ERROR

    @pytest.mark.asyncio
    async def test_second_start_reports_error(self):
        ctrl = _controller()
        await ctrl.start()
        assert await ctrl.start() is False
        assert 'recording' in ctrl.last_error
        ctrl.close()

    @pytest.mark.asyncio
    async def test_encoding_failure_reports_error(self):
        ctrl = _controller(fail_finalize=True)
        await ctrl.start()
        assert ctrl.stop() is False
        assert 'Encoder crashed' in ctrl.last_error
        assert not ctrl.has_recording

    @pytest.mark.asyncio
    async def test_reset_clears_error(self):
        ctrl = _controller(FakeAudioDevice(deny=True))
        await ctrl.start()
        ctrl.reset()
        assert ctrl.last_error == ''
        assert ctrl.state is RecordingState.IDLE


class TestTranscription:
    @pytest.mark.asyncio
    async def test_transcribe_recording_submits_once(self):
        transcriber = FakeTranscriber()
        ctrl = _controller(transcriber=transcriber)
        await ctrl.start()
        ctrl.stop()
        result = await ctrl.transcribe_recording()
        assert result is not None
        assert ctrl.latest_transcription is result
        assert len(transcriber.transcribe_calls) == 1

        assert await ctrl.transcribe_recording() is None
        assert ctrl.last_error == 'No audio recorded'
        assert len(transcriber.transcribe_calls) == 1

    @pytest.mark.asyncio
    async def test_failed_transcription_consumes_clip(self):
        ctrl = _controller(transcriber=FakeTranscriber(fail=True))
        await ctrl.start()
        ctrl.stop()
        assert await ctrl.transcribe_recording() is None
        assert '503' in ctrl.last_error
        assert not ctrl.has_recording
        assert not ctrl.transcribing

    @pytest.mark.asyncio
    async def test_nothing_recorded(self):
        ctrl = _controller()
        assert await ctrl.transcribe_recording() is None
        assert ctrl.last_error == 'No audio recorded'

    @pytest.mark.asyncio
    async def test_concurrent_transcription_rejected(self, tmp_path: Path):
        gate = asyncio.Event()

        class SlowTranscriber(FakeTranscriber):
            async def transcribe(self, artifact):
                await gate.wait()
                return await super().transcribe(artifact)

        ctrl = _controller(transcriber=SlowTranscriber())
        await ctrl.start()
        ctrl.stop()
        first = asyncio.create_task(ctrl.transcribe_recording())
        await asyncio.sleep(0)
        assert ctrl.transcribing
        other = tmp_path / 'other.wav'
        other.write_bytes(b'RIFF')
        assert await ctrl.transcribe_file(other) is None
        assert ctrl.last_error == 'Transcription already in progress'
        gate.set()
        assert await first is not None

    @pytest.mark.asyncio
    async def test_transcribe_file(self, tmp_path: Path):
        p = tmp_path / 'clip.flac'
        p.write_bytes(b'fLaC-data')
        transcriber = FakeTranscriber()
        ctrl = _controller(transcriber=transcriber)
        assert await ctrl.transcribe_file(p) is not None
        assert transcriber.transcribe_calls[0].mime_type == 'audio/flac'

    @pytest.mark.asyncio
    async def test_transcribe_missing_file(self, tmp_path: Path):
        ctrl = _controller()
        assert await ctrl.transcribe_file(tmp_path / 'gone.wav') is None
        assert 'not found' in ctrl.last_error


class TestClipPreservation:
    @pytest.mark.asyncio
    async def test_submit_during_upload_keeps_clip(self, tmp_path: Path):
        gate = asyncio.Event()

        class SlowTranscriber(FakeTranscriber):
            async def transcribe(self, artifact):
                await gate.wait()
                return await super().transcribe(artifact)

        transcriber = SlowTranscriber()
        ctrl = _controller(transcriber=transcriber)
        await ctrl.start()
        ctrl.stop()
        clip = ctrl.session.artifact

        upload = tmp_path / 'upload.flac'
        upload.write_bytes(b'fLaC-data')
        pending = asyncio.create_task(ctrl.transcribe_file(upload))
        await asyncio.sleep(0)
        assert ctrl.transcribing

        assert await ctrl.transcribe_recording() is None
        assert ctrl.last_error == 'Transcription already in progress'
        assert ctrl.session.artifact is clip
        assert ctrl.has_recording

        gate.set()
        assert await pending is not None
        assert await ctrl.transcribe_recording() is not None
        assert transcriber.transcribe_calls[-1] is clip

    @pytest.mark.asyncio
    async def test_reset_during_request_reports_failed_start(self):
        device = FakeAudioDevice(gated=True)
        ctrl = _controller(device)
        task = asyncio.create_task(ctrl.start())
        await asyncio.sleep(0)
        ctrl.reset()
        device.gate.set()
        assert await task is False
        assert 'cancelled' in ctrl.last_error
        assert ctrl.state is RecordingState.IDLE
        assert device.streams[0].stop_calls == 1
