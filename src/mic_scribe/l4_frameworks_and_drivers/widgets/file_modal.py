"""File modal — text input for the path of an audio file to transcribe."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Static


class FileModal(ModalScreen[str | None]):
    """Modal that prompts for an audio file path. Enter → return path, Escape → None."""

    DEFAULT_CSS = """
    FileModal {
        align: center middle;
    }

    FileModal > Vertical {
        width: 70;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    FileModal > Vertical > #file-title {
        text-style: bold;
        margin-bottom: 1;
    }

    FileModal > Vertical > #file-hint {
        color: $text-muted;
        margin-top: 1;
        text-align: center;
    }
    """

    BINDINGS = [('escape', 'cancel', 'Cancel')]

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static('Transcribe audio file', id='file-title')
            yield Input(placeholder='/path/to/audio.mp3', id='file-input')
            yield Static('Enter to transcribe · Escape to cancel', id='file-hint')

    def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        self.dismiss(text if text else None)

    def action_cancel(self) -> None:
        self.dismiss(None)
