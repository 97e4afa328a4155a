"""Domain error types."""


class MicScribeError(Exception):
    """Base class for every error raised by mic-scribe."""


class DeviceUnavailableError(MicScribeError):
    """Raised when microphone access is denied or no input device exists."""


class AlreadyRecordingError(MicScribeError):
    """Raised when start() is called on a session that is not idle or stopped."""


class EncodingFailureError(MicScribeError):
    """Raised when the recorder cannot produce an encoded clip."""


class EmptyArtifactError(MicScribeError):
    """Raised when a zero-byte clip would be submitted for transcription."""


class TranscriptionError(MicScribeError):
    """Raised when the speech-to-text service fails or returns nothing."""


class RequestCancelledError(MicScribeError):
    """Raised when a pending device request is abandoned by reset() or close()."""
