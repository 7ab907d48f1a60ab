"""Audio transcription."""

from .transcribe import (
    FasterWhisperTranscriber,
    MockTranscriber,
    OpenAIWhisperTranscriber,
    Transcriber,
    get_transcriber,
)

__all__ = [
    "FasterWhisperTranscriber",
    "MockTranscriber",
    "OpenAIWhisperTranscriber",
    "Transcriber",
    "get_transcriber",
]
