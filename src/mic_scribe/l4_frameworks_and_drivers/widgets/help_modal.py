"""Help modal — dismissible keybinding reference built from (key, action) rows."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Markdown, Static


def keybinding_table(rows: list[tuple[str, str]]) -> str:
    lines = ['| Key | Action |', '|-----|--------|']
    lines.extend(f'| `{key}` | {action} |' for key, action in rows)
    return '\n'.join(lines)


class HelpModal(ModalScreen[None]):
    """Lists keybindings and what the level meter colours mean."""

    DEFAULT_CSS = """
    HelpModal {
        align: center middle;
    }

    HelpModal > VerticalScroll {
        width: 60%;
        max-width: 72;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    HelpModal #help-title {
        text-style: bold;
    }

    HelpModal #help-body {
        height: auto;
    }

    HelpModal #help-hint {
        text-align: center;
        color: $text-muted;
    }
    """

    BINDINGS = [
        ('escape', 'dismiss', 'Close'),
        ('h', 'dismiss', 'Close'),
    ]

    def __init__(self, rows: list[tuple[str, str]], **kwargs) -> None:
        super().__init__(**kwargs)
        self._rows = rows

    def compose(self) -> ComposeResult:
        body = '\n\n'.join(
            [
                '### Keys',
                keybinding_table(self._rows),
                '### Level meter',
                'Green is normal speech, yellow is loud, red means the input is close to clipping.',
            ]
        )
        with VerticalScroll():
            yield Static('mic-scribe help', id='help-title')
            yield Markdown(body, id='help-body')
            yield Static('Escape or h to close', id='help-hint')
