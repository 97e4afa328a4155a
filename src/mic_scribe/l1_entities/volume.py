"""Volume level math — analyser magnitudes to a [0, 1] level, and level to meter bars."""

from __future__ import annotations

import enum

import numpy as np

from mic_scribe.l1_entities.audio_constants import BYTE_MAX


class MeterTier(enum.Enum):
    NORMAL = 'normal'
    CAUTION = 'caution'
    HOT = 'hot'


def mean_level(magnitudes: np.ndarray) -> float:
    """Arithmetic mean of 8-bit bin magnitudes, normalized to [0, 1]."""
    if magnitudes.size == 0:
        return 0.0
    level = float(np.mean(magnitudes, dtype=np.float64)) / BYTE_MAX
    return min(max(level, 0.0), 1.0)


def apply_gain(level: float, gain: float) -> float:
    return min(max(level * gain, 0.0), 1.0)


def lit_bars(level: float, gain: float, bar_count: int) -> int:
    """Number of lit bars for *level* after gain, rounded to the nearest bar."""
    return int(round(apply_gain(level, gain) * bar_count))


def bar_tier(index: int, bar_count: int, hot_fraction: float, caution_fraction: float) -> MeterTier:
    """Tier of the bar at *index* (0 = quietest)."""
    hot_start = bar_count - int(round(bar_count * hot_fraction))
    caution_start = hot_start - int(round(bar_count * caution_fraction))
    if index >= hot_start:
        return MeterTier.HOT
    if index >= caution_start:
        return MeterTier.CAUTION
    return MeterTier.NORMAL
