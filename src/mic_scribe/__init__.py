"""mic-scribe: record a clip, transcribe it, copy the text."""

__version__ = '0.1.0'
