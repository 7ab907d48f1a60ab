"""Speech-to-text with word-level timestamps."""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..captions.timing import TimestampedWord
from ..config import Config, TranscriptionConfig
from ..errors import TranscriptionError

logger = logging.getLogger(__name__)


class Transcriber(ABC):
    """Turns an audio file into words sorted by start time.

    An empty list is a valid result (silent or wordless audio).
    """

    @abstractmethod
    def transcribe(self, audio_path: Path | str) -> list[TimestampedWord]:
        pass


def _word_field(item: Any, name: str) -> Any:
    return item[name] if isinstance(item, dict) else getattr(item, name)


class OpenAIWhisperTranscriber(Transcriber):
    """Transcribe with the hosted OpenAI Whisper API."""

    def __init__(self, config: TranscriptionConfig, api_key: str | None = None):
        self.config = config
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._client = None

    def _get_client(self):
        """Lazy-init OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise TranscriptionError("OPENAI_API_KEY not configured")
            from openai import OpenAI

            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def transcribe(self, audio_path: Path | str) -> list[TimestampedWord]:
        audio_path = Path(audio_path)
        if not audio_path.exists():
            raise FileNotFoundError(f"Audio file not found: {audio_path}")

        params: dict[str, Any] = {
            "model": self.config.model,
            "response_format": "verbose_json",
            "timestamp_granularities": ["word"],
        }
        if self.config.prompt:
            params["prompt"] = self.config.prompt
        if self.config.language:
            params["language"] = self.config.language

        client = self._get_client()
        try:
            with open(audio_path, "rb") as f:
                transcription = client.audio.transcriptions.create(file=f, **params)
        except Exception as e:
            raise TranscriptionError(f"Transcription failed: {e}") from e

        words = [
            TimestampedWord(
                word=str(_word_field(w, "word")).strip(),
                start=float(_word_field(w, "start")),
                end=float(_word_field(w, "end")),
            )
            for w in (getattr(transcription, "words", None) or [])
        ]
        return sorted(words, key=lambda w: w.start)


class FasterWhisperTranscriber(Transcriber):
    """Transcribe locally using faster-whisper."""

    def __init__(self, model: str = "base", device: str = "auto", language: str | None = None):
        """Initialize faster-whisper transcriber.

        Args:
            model: Model size. Options: tiny, base, small, medium, large-v2
            device: Device to run on. "auto", "cpu", or "cuda"
            language: Optional language code; detected when None
        """
        self.model_name = model
        self.device = device
        self.language = language
        self._model = None

    def _load_model(self):
        """Lazy load the faster-whisper model."""
        if self._model is not None:
            return self._model

        try:
            from faster_whisper import WhisperModel
        except ImportError:
            raise ImportError(
                "faster-whisper is required for local transcription. "
                "Install it with: pip install 'motion-studio[local]'"
            )

        compute_type = "int8" if self.device == "cpu" else "default"
        self._model = WhisperModel(self.model_name, device=self.device, compute_type=compute_type)
        return self._model

    def transcribe(self, audio_path: Path | str) -> list[TimestampedWord]:
        audio_path = Path(audio_path)
        if not audio_path.exists():
            raise FileNotFoundError(f"Audio file not found: {audio_path}")

        model = self._load_model()
        try:
            segments, _info = model.transcribe(
                str(audio_path),
                word_timestamps=True,
                language=self.language,
            )
            words = [
                TimestampedWord(word=w.word.strip(), start=w.start, end=w.end)
                for segment in segments
                for w in (segment.words or [])
            ]
        except Exception as e:
            raise TranscriptionError(f"Local transcription failed: {e}") from e
        return words


class MockTranscriber(Transcriber):
    """Returns a fixed transcript."""

    def __init__(self, words: list[TimestampedWord] | None = None):
        self.words = list(words) if words is not None else [
            TimestampedWord("the", 0.0, 0.2),
            TimestampedWord("quick", 0.2, 0.5),
            TimestampedWord("brown", 0.5, 0.8),
            TimestampedWord("fox", 0.8, 1.1),
            TimestampedWord("jumps", 1.1, 1.4),
        ]

    def transcribe(self, audio_path: Path | str) -> list[TimestampedWord]:
        return list(self.words)


def get_transcriber(config: Config) -> Transcriber:
    """Get a transcriber instance.

    Raises:
        ValueError: If the provider name is not recognized.
    """
    provider = config.transcription.provider.lower()
    if provider == "openai":
        return OpenAIWhisperTranscriber(config.transcription)
    elif provider == "faster-whisper":
        # "whisper-1" names the hosted model; faster-whisper wants a model size
        model = config.transcription.model
        if model == "whisper-1":
            model = "base"
        return FasterWhisperTranscriber(
            model=model,
            language=config.transcription.language,
        )
    elif provider == "mock":
        return MockTranscriber()
    else:
        raise ValueError(f"Unknown transcription provider: {provider}")
