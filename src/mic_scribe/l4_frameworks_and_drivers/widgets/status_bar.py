"""Status bar — bottom bar showing recording state, elapsed time, clip info, and keybinding hints."""

from __future__ import annotations

from rich.cells import cell_len
from textual.reactive import reactive
from textual.widgets import Static

_STATE_ICONS = {
    'idle': '○ Idle',
    'requesting': '⟳ Waiting for microphone',
    'recording': '● Rec',
    'stopped': '■ Stopped',
    'error': '✗ Error',
}


def format_elapsed(seconds: float) -> str:
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f'{minutes:02d}:{secs:02d}'


def format_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f'{num_bytes} B'
    if num_bytes < 1024 * 1024:
        return f'{num_bytes / 1024:.1f} KB'
    return f'{num_bytes / (1024 * 1024):.1f} MB'


class StatusBar(Static):
    """Bottom status bar with recording state, clip info, and keybinding hints."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: auto;
        background: $surface;
        color: $text;
        padding: 0 1;
        overflow: hidden hidden;
    }
    """

    state: reactive[str] = reactive('idle')
    elapsed: reactive[float] = reactive(0.0)
    transcribing: reactive[bool] = reactive(False)
    clip_info: reactive[str] = reactive('')
    keybinding_hints: reactive[str] = reactive('')

    def render(self) -> str:
        left_parts = [
            _STATE_ICONS.get(self.state, self.state),
            format_elapsed(self.elapsed),
        ]
        if self.clip_info:
            left_parts.append(self.clip_info)
        if self.transcribing:
            left_parts.append('⟳ Transcribing…')
        left = ' │ '.join(left_parts)

        content_width = (self.size.width or 80) - 2
        hints = self.keybinding_hints
        if hints:
            hints_width = cell_len(hints.replace(r'\[', '['))
            gap = content_width - cell_len(left) - hints_width
            if gap >= 2:
                left = left + ' ' * gap + hints
        return left
