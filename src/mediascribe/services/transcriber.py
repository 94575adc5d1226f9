"""Hosted speech-to-text for mediascribe.

Sends a local audio file to the OpenAI transcription API (Whisper) and
returns plain text, optionally with time-aligned segments.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import openai
from openai import AsyncOpenAI, AuthenticationError, RateLimitError

from mediascribe.core.errors import TranscriptionError
from mediascribe.core.models import TranscriptionResult, TranscriptSegment

# Default hosted Whisper model
DEFAULT_MODEL = "whisper-1"

# Upload ceiling of the transcription API, in MB
MAX_FILE_SIZE_MB = 25

_BYTES_PER_MB = 1024 * 1024

MISSING_KEY_MESSAGE = (
    "OpenAI API key is not configured. "
    "Set the OPENAI_API_KEY environment variable or api.openai_key in .mediascribe/config"
)
INVALID_KEY_MESSAGE = "Invalid OpenAI API key. Please check your OPENAI_API_KEY setting."
RATE_LIMIT_MESSAGE = "OpenAI API rate limit exceeded. Please try again later."


def create_client(api_key: str) -> AsyncOpenAI | None:
    """Create an OpenAI client, or None if no API key is configured."""
    if not api_key:
        return None
    return AsyncOpenAI(api_key=api_key)


def _segment_field(segment: Any, name: str) -> Any:
    if isinstance(segment, dict):
        return segment.get(name)
    return getattr(segment, name, None)


class Transcriber:
    """Transcribes audio files with the hosted Whisper API."""

    def __init__(
        self,
        client: AsyncOpenAI | None,
        *,
        model: str = DEFAULT_MODEL,
        max_file_size_mb: float = MAX_FILE_SIZE_MB,
    ) -> None:
        """
        Initialize the transcriber.

        Args:
            client: OpenAI client; None when no API key is configured
            model: Transcription model name
            max_file_size_mb: Largest file accepted, in MB
        """
        self.client = client
        self.model = model
        self.max_file_size_mb = max_file_size_mb

    def _check_file(self, audio_path: Path) -> None:
        """Validate the audio file before uploading it.

        Raises:
            TranscriptionError: If the file is missing or too large.
        """
        try:
            size_bytes = audio_path.stat().st_size
        except FileNotFoundError as e:
            raise TranscriptionError(f"Audio file not found: {audio_path}") from e

        size_mb = size_bytes / _BYTES_PER_MB
        if size_mb > self.max_file_size_mb:
            raise TranscriptionError(
                f"Audio file is too large ({size_mb:.1f}MB). "
                f"Maximum size is {self.max_file_size_mb:g}MB. "
                "Consider splitting the audio into smaller chunks."
            )

    async def _request(self, audio_path: Path, **options: Any) -> Any:
        if self.client is None:
            raise TranscriptionError(MISSING_KEY_MESSAGE)

        self._check_file(audio_path)

        try:
            with open(audio_path, "rb") as audio_file:
                return await self.client.audio.transcriptions.create(
                    model=self.model,
                    file=audio_file,
                    **options,
                )
        except AuthenticationError as e:
            raise TranscriptionError(INVALID_KEY_MESSAGE) from e
        except RateLimitError as e:
            raise TranscriptionError(RATE_LIMIT_MESSAGE) from e
        except (openai.APIError, OSError) as e:
            raise TranscriptionError(f"Transcription failed: {e}") from e

    async def transcribe(self, audio_path: Path | str) -> TranscriptionResult:
        """Transcribe an audio file to plain text.

        Args:
            audio_path: Path to a local audio file.

        Returns:
            TranscriptionResult. Oversized files fail without any network
            call; authentication and rate-limit errors carry their own
            messages.
        """
        try:
            response = await self._request(Path(audio_path), response_format="text")
        except TranscriptionError as e:
            return TranscriptionResult(success=False, error=str(e))
        except Exception as e:
            return TranscriptionResult(success=False, error=f"Transcription failed: {e}")

        text = (response if isinstance(response, str) else getattr(response, "text", "")) or ""
        text = text.strip()
        if not text:
            return TranscriptionResult(success=False, error="Transcription returned no text")

        return TranscriptionResult(success=True, transcript=text)

    async def transcribe_with_timestamps(self, audio_path: Path | str) -> TranscriptionResult:
        """Transcribe an audio file, keeping segment timestamps.

        Args:
            audio_path: Path to a local audio file.

        Returns:
            TranscriptionResult with segments populated on success.
        """
        try:
            response = await self._request(
                Path(audio_path),
                response_format="verbose_json",
                timestamp_granularities=["segment"],
            )
        except TranscriptionError as e:
            return TranscriptionResult(success=False, error=str(e))
        except Exception as e:
            return TranscriptionResult(success=False, error=f"Transcription failed: {e}")

        segments = [
            TranscriptSegment(
                start=float(_segment_field(segment, "start") or 0.0),
                end=float(_segment_field(segment, "end") or 0.0),
                text=str(_segment_field(segment, "text") or "").strip(),
            )
            for segment in (getattr(response, "segments", None) or [])
        ]

        text = (getattr(response, "text", "") or "").strip()
        if not text:
            return TranscriptionResult(success=False, error="Transcription returned no text")

        return TranscriptionResult(success=True, transcript=text, segments=segments)
