"""Tests for the sounddevice gateway — PortAudio is patched out."""

from __future__ import annotations

import asyncio
import threading
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from mic_scribe.l1_entities.errors import DeviceUnavailableError
from mic_scribe.l3_interface_adapters.gateways.sounddevice_audio_device import (
    SounddeviceAudioDevice,
    SounddeviceMediaStream,
)

_SD = 'mic_scribe.l3_interface_adapters.gateways.sounddevice_audio_device.sd'


class _PortAudioError(Exception):
    pass


def _mock_sd(max_input_channels: int = 2) -> MagicMock:
    sd = MagicMock()
    sd.PortAudioError = _PortAudioError
    sd.query_devices.return_value = {'name': 'Built-in Mic', 'max_input_channels': max_input_channels}
    return sd


class TestSounddeviceAudioDevice:
    @pytest.mark.asyncio
    async def test_acquire_opens_float32_input_stream(self):
        sd = _mock_sd()
        with patch(_SD, sd):
            stream = await SounddeviceAudioDevice().acquire(16000, 1)
            assert stream.active
            kwargs = sd.InputStream.call_args.kwargs
            assert kwargs['samplerate'] == 16000
            assert kwargs['channels'] == 1
            assert kwargs['dtype'] == 'float32'
            sd.InputStream.return_value.start.assert_called_once()
            stream.stop()

    @pytest.mark.asyncio
    async def test_configured_device_is_queried(self):
        sd = _mock_sd()
        with patch(_SD, sd):
            stream = await SounddeviceAudioDevice(device='USB Mic').acquire(16000, 1)
            sd.query_devices.assert_called_once_with('USB Mic', kind='input')
            assert sd.InputStream.call_args.kwargs['device'] == 'USB Mic'
            stream.stop()

    @pytest.mark.asyncio
    async def test_no_input_device_raises(self):
        sd = _mock_sd()
        sd.query_devices.side_effect = _PortAudioError('no default input device')
        with patch(_SD, sd), pytest.raises(DeviceUnavailableError, match='No input device'):
            await SounddeviceAudioDevice().acquire(16000, 1)
        sd.InputStream.assert_not_called()

    @pytest.mark.asyncio
    async def test_too_few_channels_raises(self):
        sd = _mock_sd(max_input_channels=1)
        with patch(_SD, sd), pytest.raises(DeviceUnavailableError, match='2 required'):
            await SounddeviceAudioDevice().acquire(16000, 2)

    @pytest.mark.asyncio
    async def test_open_failure_raises(self):
        sd = _mock_sd()
        sd.InputStream.side_effect = _PortAudioError('device busy')
        with patch(_SD, sd), pytest.raises(DeviceUnavailableError, match='device busy'):
            await SounddeviceAudioDevice().acquire(16000, 1)

    @pytest.mark.asyncio
    async def test_failed_start_and_failed_cleanup_raises_device_error(self):
        sd = _mock_sd()
        handle = sd.InputStream.return_value
        handle.start.side_effect = _PortAudioError('device busy')
        handle.stop.side_effect = _PortAudioError('stream not started')
        with patch(_SD, sd), pytest.raises(DeviceUnavailableError, match='device busy'):
            await SounddeviceAudioDevice().acquire(16000, 1)
        handle.stop.assert_called_once()

    @pytest.mark.asyncio
    async def test_cancelled_acquire_releases_late_stream(self):
        sd = _mock_sd()
        info = sd.query_devices.return_value
        release = threading.Event()

        def slow_query(*args, **kwargs):
            release.wait(timeout=5)
            return info

        sd.query_devices.side_effect = slow_query
        handle = sd.InputStream.return_value
        with patch(_SD, sd):
            task = asyncio.create_task(SounddeviceAudioDevice().acquire(16000, 1))
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            release.set()
            for _ in range(200):
                if handle.stop.called:
                    break
                await asyncio.sleep(0.01)
        handle.start.assert_called_once()
        handle.stop.assert_called_once()
        handle.close.assert_called_once()


class TestSounddeviceMediaStream:
    def test_callback_feeds_listeners_and_history(self):
        stream = SounddeviceMediaStream(16000, 1, history_frames=8)
        received = []
        stream.add_listener(received.append)
        stream._callback(np.ones((4, 1), dtype=np.float32), 4, None, None)
        assert len(received) == 1
        assert received[0].shape == (4, 1)
        np.testing.assert_array_equal(stream.latest(6), [0, 0, 1, 1, 1, 1])

    def test_history_keeps_newest_frames(self):
        stream = SounddeviceMediaStream(16000, 1, history_frames=4)
        stream._callback(np.zeros((4, 1), dtype=np.float32), 4, None, None)
        stream._callback(np.ones((2, 1), dtype=np.float32), 2, None, None)
        np.testing.assert_array_equal(stream.latest(4), [0, 0, 1, 1])

    def test_stereo_mixed_to_mono_for_history(self):
        stream = SounddeviceMediaStream(16000, 2, history_frames=4)
        chunk = np.array([[1.0, 0.0], [0.5, 0.5]], dtype=np.float32)
        stream._callback(chunk, 2, None, None)
        np.testing.assert_allclose(stream.latest(2), [0.5, 0.5])

    def test_removed_listener_not_called(self):
        stream = SounddeviceMediaStream(16000, 1)
        received = []
        stream.add_listener(received.append)
        stream.remove_listener(received.append)
        stream._callback(np.ones((4, 1), dtype=np.float32), 4, None, None)
        assert received == []

    def test_stop_is_idempotent(self):
        sd = _mock_sd()
        with patch(_SD, sd):
            stream = SounddeviceMediaStream(16000, 1)
            stream.open()
            stream.stop()
            stream.stop()
        handle = sd.InputStream.return_value
        handle.stop.assert_called_once()
        handle.close.assert_called_once()
        assert not stream.active
        assert not stream.latest(4).any()
