"""RecordingSession — microphone capture, live level metering, and clip finalization."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from mic_scribe.l1_entities.artifact import AudioArtifact
from mic_scribe.l1_entities.audio_constants import CHANNELS, FFT_SIZE, SAMPLE_RATE
from mic_scribe.l1_entities.errors import AlreadyRecordingError, EncodingFailureError, RequestCancelledError
from mic_scribe.l1_entities.recording_state import RecordingState
from mic_scribe.l1_entities.volume import mean_level
from mic_scribe.l2_use_cases.ports.audio_device import AudioDevice, MediaStream
from mic_scribe.l2_use_cases.ports.media_recorder import MediaRecorder
from mic_scribe.l2_use_cases.utils.frequency_analyser import FrequencyAnalyser
from mic_scribe.l2_use_cases.utils.meter_loop import MeterLoop

log = logging.getLogger('msc.session')

_STARTABLE = (RecordingState.IDLE, RecordingState.STOPPED)


class RecordingSession:
    """Owns the device stream, the recorder, the analyser and the meter loop.

    State machine::

        Idle/Stopped --start()--> Requesting --grant--> Recording --stop()--> Stopped
                                  Requesting --deny---> Error
        any --reset()/close()--> Idle

    At most one stream and one meter loop are alive at any time. Errors are
    raised to the caller (the controller logs and converts them).
    """

    def __init__(
        self,
        device: AudioDevice,
        recorder_factory: Callable[[], MediaRecorder],
        *,
        sample_rate: int = SAMPLE_RATE,
        channels: int = CHANNELS,
        fft_size: int = FFT_SIZE,
        smoothing: float = 0.8,
        frame_interval: float = 1 / 60,
    ) -> None:
        self._device = device
        self._recorder_factory = recorder_factory
        self._sample_rate = sample_rate
        self._channels = channels
        self._fft_size = fft_size
        self._smoothing = smoothing
        self._frame_interval = frame_interval

        self._state = RecordingState.IDLE
        self._stream: MediaStream | None = None
        self._analyser: FrequencyAnalyser | None = None
        self._recorder: MediaRecorder | None = None
        self._meter: MeterLoop | None = None
        self._artifact: AudioArtifact | None = None
        self._volume_level = 0.0
        self._started_at = 0.0

        # Bumped by every start()/reset(); a grant resolving for a stale attempt is released.
        self._attempt = 0
        self._stop_requested = False

    # --- Introspection ---

    @property
    def state(self) -> RecordingState:
        return self._state

    @property
    def artifact(self) -> AudioArtifact | None:
        return self._artifact

    @property
    def volume_level(self) -> float:
        return self._volume_level

    @property
    def holds_stream(self) -> bool:
        return self._stream is not None

    @property
    def meter(self) -> MeterLoop | None:
        return self._meter

    def elapsed(self) -> float:
        """Seconds since recording began (0 unless recording)."""
        if self._state is not RecordingState.RECORDING:
            return 0.0
        return time.monotonic() - self._started_at

    def sample_volume(self) -> float:
        """Current normalized level while recording; 0 otherwise."""
        if self._state is not RecordingState.RECORDING:
            return 0.0
        return self._volume_level

    # --- Operations ---

    async def start(self) -> None:
        """Request the microphone and begin recording.

        Raises:
            AlreadyRecordingError: state is not Idle or Stopped.
            DeviceUnavailableError: device access denied or unavailable (state -> Error).
            EncodingFailureError: the recorder could not attach to the stream (state -> Error).
            RequestCancelledError: reset()/close() ran while the device request was pending;
                the late grant has been released.
        """
        if self._state not in _STARTABLE:
            raise AlreadyRecordingError(f'Cannot start recording while {self._state.value}')

        self._artifact = None
        self._stop_requested = False
        self._attempt += 1
        attempt = self._attempt
        self._state = RecordingState.REQUESTING
        log.info('Requesting input device (%d Hz, %d ch)', self._sample_rate, self._channels)

        try:
            stream = await self._device.acquire(self._sample_rate, self._channels)
        except asyncio.CancelledError:
            if attempt == self._attempt:
                self._stop_requested = False
                self._state = RecordingState.IDLE
            log.info('Device request cancelled')
            raise
        except Exception:
            if attempt == self._attempt:
                self._state = RecordingState.ERROR
            log.error('Input device unavailable', exc_info=True)
            raise

        if attempt != self._attempt:
            log.info('Device granted after the session was reset; releasing it')
            stream.stop()
            raise RequestCancelledError('Recording request was cancelled')

        self._stream = stream
        try:
            self._analyser = FrequencyAnalyser(stream, fft_size=self._fft_size, smoothing=self._smoothing)
            recorder = self._recorder_factory()
            recorder.start(stream)
        except Exception as e:
            log.error('Failed to start recorder: %s', e, exc_info=True)
            self._release_handles()
            self._state = RecordingState.ERROR
            if isinstance(e, EncodingFailureError):
                raise
            raise EncodingFailureError(f'Failed to start recorder: {e}') from e

        self._recorder = recorder
        self._started_at = time.monotonic()
        self._state = RecordingState.RECORDING
        self._meter = MeterLoop(self._on_meter_frame, self._frame_interval)
        self._meter.start()
        log.info('Recording started')

        if self._stop_requested:
            log.info('Applying stop queued during device request')
            self.stop()

    def stop(self) -> AudioArtifact | None:
        """Finalize the recording and release the device.

        No-op outside Recording (returns the current artifact, if any). While
        Requesting, the stop is queued and applied once the grant resolves.

        Raises:
            EncodingFailureError: finalization failed; the session is Stopped
                with an empty artifact.
        """
        if self._state is RecordingState.REQUESTING:
            self._stop_requested = True
            return None
        if self._state is not RecordingState.RECORDING:
            return self._artifact

        self._cancel_meter()
        self._volume_level = 0.0
        duration = time.monotonic() - self._started_at

        recorder, self._recorder = self._recorder, None
        if recorder is None:
            raise RuntimeError('Recording without an attached recorder')
        failure: Exception | None = None
        try:
            data = recorder.finalize()
        except Exception as e:
            failure = e
            data = b''

        self._release_handles()
        self._artifact = AudioArtifact(data=data, mime_type=recorder.mime_type, duration=duration)
        self._state = RecordingState.STOPPED

        if failure is not None:
            log.error('Encoding failed after %.2fs of audio: %s', duration, failure)
            if isinstance(failure, EncodingFailureError):
                raise failure
            raise EncodingFailureError(f'Recorder finalization failed: {failure}') from failure
        log.info('Recording stopped: %.2fs, %d bytes (%s)', duration, len(data), recorder.mime_type)
        return self._artifact

    def take_artifact(self) -> AudioArtifact | None:
        """Hand the finished clip to the caller; the session drops its reference."""
        artifact, self._artifact = self._artifact, None
        return artifact

    def reset(self) -> None:
        """Discard the clip, release everything, return to Idle. Always safe."""
        self._attempt += 1
        self._stop_requested = False
        self._cancel_meter()
        self._volume_level = 0.0
        if self._recorder is not None:
            try:
                self._recorder.discard()
            except Exception:
                log.warning('Recorder discard failed', exc_info=True)
            self._recorder = None
        self._release_handles()
        self._artifact = None
        if self._state is not RecordingState.IDLE:
            log.info('Session reset from %s', self._state.value)
        self._state = RecordingState.IDLE

    def close(self) -> None:
        """Teardown: same as reset()."""
        self.reset()

    # --- Internals ---

    def _on_meter_frame(self) -> None:
        if self._state is not RecordingState.RECORDING or self._analyser is None:
            return
        self._volume_level = mean_level(self._analyser.byte_frequency_data())

    def _cancel_meter(self) -> None:
        if self._meter is not None:
            self._meter.cancel()
            self._meter = None

    def _release_handles(self) -> None:
        if self._analyser is not None:
            self._analyser.close()
            self._analyser = None
        if self._stream is not None:
            stream, self._stream = self._stream, None
            try:
                stream.stop()
            except Exception:
                log.warning('Error while releasing input stream', exc_info=True)
