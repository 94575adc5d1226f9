"""YouTube transcript lookup for mediascribe.

Uses YouTube's structured transcript endpoint (through
youtube-transcript-api) rather than scraping subtitle files.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import Any

from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    YouTubeTranscriptApi,
)

from mediascribe.core.models import CaptionSegment, YouTubeTranscriptResult
from mediascribe.services.url_parser import classify

DEFAULT_LANGUAGES = ("en", "en-US", "en-GB")

NO_CAPTIONS_MESSAGE = "No captions available - will use Whisper transcription"


def _snippet_field(snippet: Any, name: str) -> Any:
    if isinstance(snippet, dict):
        return snippet.get(name)
    return getattr(snippet, name, None)


def _resolve_video_id(video_id_or_url: str) -> str:
    """Accept a bare video ID or any YouTube URL."""
    parsed = classify(video_id_or_url)
    if parsed.platform == "youtube" and parsed.video_id:
        return parsed.video_id
    return video_id_or_url.strip()


def format_transcript_with_timestamps(segments: Iterable[CaptionSegment]) -> str:
    """Render segments as "[MM:SS] text" lines."""
    lines = []
    for segment in segments:
        minutes, seconds = divmod(int(segment.offset), 60)
        lines.append(f"[{minutes:02d}:{seconds:02d}] {segment.text}")
    return "\n".join(lines)


class YouTubeTranscriptSource:
    """Fetches YouTube transcripts by video ID."""

    def __init__(
        self,
        api: YouTubeTranscriptApi | None = None,
        languages: Sequence[str] = DEFAULT_LANGUAGES,
    ) -> None:
        """
        Initialize the transcript source.

        Args:
            api: youtube-transcript-api client (one is created if None)
            languages: Preferred transcript languages, in priority order
        """
        self.api = api or YouTubeTranscriptApi()
        self.languages = list(languages)

    def _fetch_snippets(self, video_id: str) -> Iterable[Any]:
        """Fetch in a preferred language, else the first listed transcript."""
        try:
            return self.api.fetch(video_id, languages=self.languages)
        except NoTranscriptFound:
            transcript = next(iter(self.api.list(video_id)), None)
            if transcript is None:
                raise
            return transcript.fetch()

    async def fetch_transcript(self, video_id_or_url: str) -> YouTubeTranscriptResult:
        """Fetch the transcript of a YouTube video.

        Args:
            video_id_or_url: Video ID or YouTube URL.

        Returns:
            YouTubeTranscriptResult with the joined text and its segments.
            Never raises.
        """
        video_id = _resolve_video_id(video_id_or_url)

        try:
            snippets = await asyncio.to_thread(self._fetch_snippets, video_id)
            segments = [
                CaptionSegment(
                    text=str(_snippet_field(snippet, "text") or "").strip(),
                    offset=float(_snippet_field(snippet, "start") or 0.0),
                    duration=float(_snippet_field(snippet, "duration") or 0.0),
                )
                for snippet in snippets
            ]
        except CouldNotRetrieveTranscript:
            return YouTubeTranscriptResult(success=False, error=NO_CAPTIONS_MESSAGE)
        except Exception as e:
            return YouTubeTranscriptResult(
                success=False,
                error=f"Failed to fetch YouTube transcript: {e}",
            )

        transcript = " ".join(segment.text for segment in segments if segment.text)
        if not transcript:
            return YouTubeTranscriptResult(
                success=False,
                error="No captions available for this video",
            )

        return YouTubeTranscriptResult(success=True, transcript=transcript, segments=segments)
