"""L1 entity: recording session lifecycle state."""

from __future__ import annotations

import enum


class RecordingState(enum.Enum):
    IDLE = 'idle'
    REQUESTING = 'requesting'
    RECORDING = 'recording'
    STOPPED = 'stopped'
    ERROR = 'error'
