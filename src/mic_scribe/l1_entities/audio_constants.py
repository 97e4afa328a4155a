"""Audio capture and analysis constants shared across layers."""

SAMPLE_RATE = 16000
CHANNELS = 1

FFT_SIZE = 512  # 256 frequency bins
BYTE_MAX = 255  # largest 8-bit magnitude an analyser frame can hold

MIN_DECIBELS = -100.0
MAX_DECIBELS = -30.0
