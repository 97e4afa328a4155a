"""Level meter — discrete bar display of the live microphone level."""

from __future__ import annotations

from textual.reactive import reactive
from textual.widgets import Static

from mic_scribe.l1_entities.volume import MeterTier, bar_tier, lit_bars

_LIT = '█'
_UNLIT = '░'

_TIER_STYLE = {
    MeterTier.NORMAL: 'green',
    MeterTier.CAUTION: 'yellow',
    MeterTier.HOT: 'red',
}


def render_bars(
    level: float,
    gain: float = 1.67,
    bar_count: int = 20,
    hot_fraction: float = 0.2,
    caution_fraction: float = 0.2,
) -> str:
    """Rich-markup bar string for *level* in [0, 1]."""
    lit = lit_bars(level, gain, bar_count)
    parts = []
    for i in range(bar_count):
        if i < lit:
            style = _TIER_STYLE[bar_tier(i, bar_count, hot_fraction, caution_fraction)]
            parts.append(f'[{style}]{_LIT}[/{style}]')
        else:
            parts.append(f'[dim]{_UNLIT}[/dim]')
    return ''.join(parts)


class LevelMeter(Static):
    """Shows the level the app polls from the recording session each frame."""

    DEFAULT_CSS = """
    LevelMeter {
        height: 1;
        padding: 0 1;
    }
    """

    level: reactive[float] = reactive(0.0)

    def __init__(
        self,
        gain: float = 1.67,
        bar_count: int = 20,
        hot_fraction: float = 0.2,
        caution_fraction: float = 0.2,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._gain = gain
        self._bar_count = bar_count
        self._hot_fraction = hot_fraction
        self._caution_fraction = caution_fraction

    def render(self) -> str:
        bars = render_bars(self.level, self._gain, self._bar_count, self._hot_fraction, self._caution_fraction)
        return f'Mic {bars}'
