"""RecorderApp — record a clip, watch the level meter, transcribe, copy."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.app import App as TextualApp
from textual.app import ComposeResult
from textual.binding import Binding
from textual.timer import Timer
from textual.widgets import Static

from mic_scribe.l1_entities.config import AppConfig
from mic_scribe.l1_entities.recording_state import RecordingState
from mic_scribe.l3_interface_adapters.controllers.recorder_controller import RecorderController
from mic_scribe.l4_frameworks_and_drivers.logging_setup import setup_file_logging
from mic_scribe.l4_frameworks_and_drivers.messages import (
    RecordingStateChanged,
    TranscriptionFailed,
    TranscriptionReady,
)
from mic_scribe.l4_frameworks_and_drivers.widgets.file_modal import FileModal
from mic_scribe.l4_frameworks_and_drivers.widgets.help_modal import HelpModal
from mic_scribe.l4_frameworks_and_drivers.widgets.level_meter import LevelMeter
from mic_scribe.l4_frameworks_and_drivers.widgets.status_bar import StatusBar, format_size
from mic_scribe.l4_frameworks_and_drivers.widgets.transcript_panel import TranscriptPanel

log = logging.getLogger('msc.app')

_HELP_ROWS = [
    ('r', 'Start recording'),
    ('s', 'Stop recording'),
    ('Enter', 'Transcribe the recording'),
    ('x', 'Discard the recording'),
    ('u', 'Transcribe an audio file'),
    ('c', 'Copy text'),
    ('t', 'Copy text with timestamps'),
    ('h', 'Toggle this help'),
    ('q', 'Quit'),
]


class RecorderApp(TextualApp):
    """Single-screen recorder: header, transcript, level meter, status bar."""

    CSS = """
    #header {
        height: 1;
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
    }
    #transcript-panel {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding('r', 'start_recording', 'Record'),
        Binding('s', 'stop_recording', 'Stop'),
        Binding('enter', 'submit', 'Transcribe'),
        Binding('x', 'discard', 'Discard', show=False),
        Binding('u', 'open_file', 'File', show=False),
        Binding('c', 'copy_text', 'Copy', show=False),
        Binding('t', 'copy_timestamped', 'Copy with timestamps', show=False),
        Binding('h', 'show_help', 'Help'),
        Binding('q', 'quit_app', 'Quit'),
    ]

    def __init__(
        self,
        config: AppConfig,
        controller: RecorderController,
        log_dir: Path | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._config = config
        self._controller = controller
        self._meter_timer: Timer | None = None
        if log_dir is not None:
            self._log_path: Path | None = setup_file_logging(log_dir)
        else:
            self._log_path = None

    def compose(self) -> ComposeResult:
        mc = self._config.meter
        yield Static('  mic-scribe | record → transcribe → copy', id='header')
        yield TranscriptPanel(id='transcript-panel')
        yield LevelMeter(
            gain=mc.gain,
            bar_count=mc.bars,
            hot_fraction=mc.hot_fraction,
            caution_fraction=mc.caution_fraction,
            id='level-meter',
        )
        yield StatusBar(id='status-bar')

    def on_mount(self) -> None:
        self._meter_timer = self.set_interval(self._config.meter.frame_interval, self._poll_level, pause=True)
        self._sync_status()

    def on_unmount(self) -> None:
        self._controller.close()

    # --- Status ---

    def _hints_for_state(self, state: RecordingState) -> str:
        if state is RecordingState.RECORDING:
            return r'\[s] stop  \[h] help'
        if state is RecordingState.REQUESTING:
            return r'\[s] cancel  \[h] help'
        if state is RecordingState.STOPPED and self._controller.has_recording:
            return r'\[Enter] transcribe  \[x] discard  \[r] re-record  \[c] copy  \[h] help  \[q] quit'
        if state is RecordingState.ERROR:
            return r'\[x] reset  \[u] file  \[h] help  \[q] quit'
        return r'\[r] record  \[u] file  \[c] copy  \[t] copy+time  \[h] help  \[q] quit'

    def _sync_status(self) -> None:
        state = self._controller.state
        bar = self.query_one('#status-bar', StatusBar)
        bar.state = state.value
        bar.transcribing = self._controller.transcribing
        bar.keybinding_hints = self._hints_for_state(state)

        session = self._controller.session
        artifact = session.artifact
        if state is RecordingState.STOPPED and artifact is not None:
            bar.clip_info = f'{artifact.duration:.1f}s · {format_size(artifact.size)} · {artifact.mime_type}'
            bar.elapsed = artifact.duration
        else:
            bar.clip_info = ''
            bar.elapsed = session.elapsed()

        if self._meter_timer is not None:
            if state is RecordingState.RECORDING:
                self._meter_timer.resume()
            else:
                self._meter_timer.pause()
                self.query_one('#level-meter', LevelMeter).level = 0.0

    def _poll_level(self) -> None:
        session = self._controller.session
        self.query_one('#level-meter', LevelMeter).level = session.sample_volume()
        self.query_one('#status-bar', StatusBar).elapsed = session.elapsed()

    # --- Message Handlers ---

    def on_recording_state_changed(self, message: RecordingStateChanged) -> None:
        self._sync_status()
        if message.error:
            self.notify(f'Recording error: {message.error}', severity='error', timeout=8)

    def on_transcription_ready(self, message: TranscriptionReady) -> None:
        panel = self.query_one('#transcript-panel', TranscriptPanel)
        panel.show_transcription(message.transcription, source=message.source)
        self._sync_status()
        self.notify('Transcription ready', timeout=3)

    def on_transcription_failed(self, message: TranscriptionFailed) -> None:
        self._sync_status()
        self.notify(f'Transcription failed: {message.error}', severity='error', timeout=10)

    # --- Workers ---

    def _run_start_worker(self) -> None:
        async def _start_task() -> None:
            ok = await self._controller.start()
            self.post_message(
                RecordingStateChanged(
                    state=self._controller.state.value,
                    error='' if ok else self._controller.last_error,
                )
            )

        self.run_worker(_start_task, exclusive=True, group='recording')

    def _run_transcribe_worker(self, path: Path | None = None) -> None:
        source = path.name if path is not None else 'recording'

        async def _transcribe_task() -> None:
            try:
                if path is None:
                    result = await self._controller.transcribe_recording()
                else:
                    result = await self._controller.transcribe_file(path)
            except Exception as e:
                log.error('Transcription worker crashed: %s', e, exc_info=True)
                self.post_message(TranscriptionFailed(error=str(e)))
                return
            if result is None:
                self.post_message(TranscriptionFailed(error=self._controller.last_error or 'unknown error'))
            else:
                self.post_message(TranscriptionReady(transcription=result, source=source))

        self.run_worker(_transcribe_task, exclusive=True, group='transcribe')
        self.query_one('#status-bar', StatusBar).transcribing = True

    # --- Actions ---

    def action_start_recording(self) -> None:
        if self._controller.transcribing:
            self.notify('Transcription in progress — please wait', severity='warning', timeout=3)
            return
        state = self._controller.state
        if state in (RecordingState.REQUESTING, RecordingState.RECORDING):
            self.notify('Already recording — press s to stop first', severity='warning', timeout=3)
            return
        if state is RecordingState.ERROR:
            self._controller.reset()
        bar = self.query_one('#status-bar', StatusBar)
        bar.state = RecordingState.REQUESTING.value
        bar.keybinding_hints = self._hints_for_state(RecordingState.REQUESTING)
        self._run_start_worker()

    def action_stop_recording(self) -> None:
        state = self._controller.state
        if state not in (RecordingState.REQUESTING, RecordingState.RECORDING):
            return
        ok = self._controller.stop()
        self._sync_status()
        if not ok:
            self.notify(f'Recording failed: {self._controller.last_error}', severity='error', timeout=8)
            return
        artifact = self._controller.session.artifact
        if state is RecordingState.RECORDING and (artifact is None or artifact.is_empty):
            self.notify('Nothing was recorded', severity='warning', timeout=4)

    def action_submit(self) -> None:
        if self._controller.transcribing:
            self.notify('Transcription already in progress', severity='warning', timeout=3)
            return
        if self._controller.state is not RecordingState.STOPPED or not self._controller.has_recording:
            self.notify('No recording to transcribe — press r to record', severity='warning', timeout=3)
            return
        self._run_transcribe_worker()

    def action_discard(self) -> None:
        if self._controller.state in (RecordingState.REQUESTING, RecordingState.RECORDING):
            self.notify('Stop recording first', severity='warning', timeout=3)
            return
        self._controller.reset()
        self._sync_status()

    def action_open_file(self) -> None:
        if self._controller.state in (RecordingState.REQUESTING, RecordingState.RECORDING):
            self.notify('Stop recording first', severity='warning', timeout=3)
            return
        if self._controller.transcribing:
            self.notify('Transcription already in progress', severity='warning', timeout=3)
            return
        self.push_screen(FileModal(), callback=self._on_file_chosen)

    def _on_file_chosen(self, path: str | None) -> None:
        if not path:
            return
        self._run_transcribe_worker(Path(path).expanduser())

    def _copy(self, *, timestamps: bool) -> None:
        panel = self.query_one('#transcript-panel', TranscriptPanel)
        if not panel.copy_text(timestamps=timestamps):
            self.notify('No transcription to copy', severity='warning', timeout=2)
            return
        self.notify('Copied with timestamps' if timestamps else 'Text copied', timeout=2)

    def action_copy_text(self) -> None:
        self._copy(timestamps=False)

    def action_copy_timestamped(self) -> None:
        self._copy(timestamps=True)

    def action_show_help(self) -> None:
        if isinstance(self.screen, HelpModal):
            self.screen.dismiss()
            return
        self.push_screen(HelpModal(rows=_HELP_ROWS))

    def action_quit_app(self) -> None:
        self._controller.close()
        self.exit()
