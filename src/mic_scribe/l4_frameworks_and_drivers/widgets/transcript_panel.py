"""Transcript panel — scrolling RichLog of the latest transcription."""

from __future__ import annotations

import pyperclip
from rich.markup import escape
from textual.widgets import RichLog

from mic_scribe.l1_entities.transcript import Transcription, format_clock


class TranscriptPanel(RichLog):
    """Shows one transcription at a time, segment by segment."""

    DEFAULT_CSS = """
    TranscriptPanel {
        border: solid $primary;
        scrollbar-size: 1 1;
    }
    TranscriptPanel:focus {
        border: solid $accent;
    }
    """

    def __init__(self, title: str = 'Transcription', **kwargs) -> None:
        super().__init__(highlight=False, markup=True, wrap=True, auto_scroll=True, **kwargs)
        self.border_title = title
        self._transcription: Transcription | None = None

    @property
    def transcription(self) -> Transcription | None:
        return self._transcription

    def show_transcription(self, transcription: Transcription, source: str = '') -> None:
        """Replace the log with *transcription*."""
        self.clear()
        self._transcription = transcription
        if source:
            self.border_subtitle = source
        if not transcription.segments:
            self.write(escape(transcription.text.strip()))
            return
        for seg in transcription.segments:
            span = f'{format_clock(seg.start)} - {format_clock(seg.end)}'
            self.write(f'[dim]\\[{span}][/dim] {escape(seg.text.strip())}')

    def copy_text(self, *, timestamps: bool) -> bool:
        """Copy the transcription to the system clipboard. Returns False if empty."""
        if self._transcription is None:
            return False
        text = self._transcription.timestamped_text() if timestamps else self._transcription.plain_text()
        if not text:
            return False
        pyperclip.copy(text)
        return True
