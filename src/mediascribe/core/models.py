"""Data models for mediascribe."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

Platform = Literal[
    "youtube",
    "podcast",
    "instagram",
    "tiktok",
    "facebook",
    "twitter",
    "threads",
    "bluesky",
    "vimeo",
    "twitch",
    "reddit",
    "linkedin",
    "snapchat",
    "rumble",
    "dailymotion",
    "unknown",
]

PLATFORMS: tuple[Platform, ...] = (
    "youtube",
    "podcast",
    "instagram",
    "tiktok",
    "facebook",
    "twitter",
    "threads",
    "bluesky",
    "vimeo",
    "twitch",
    "reddit",
    "linkedin",
    "snapchat",
    "rumble",
    "dailymotion",
    "unknown",
)

CaptionSourceKind = Literal["auto", "manual"]
Method = Literal["captions", "whisper"]
Status = Literal["pending", "downloading", "transcribing", "completed", "failed"]


@dataclass(frozen=True)
class ParsedURL:
    """A URL classified into its originating platform."""

    platform: Platform
    url: str
    video_id: str | None = None


@dataclass
class CaptionResult:
    """Result of fetching pre-existing captions for a URL."""

    success: bool
    transcript: str | None = None
    language: str | None = None
    source: CaptionSourceKind | None = None
    error: str | None = None


@dataclass
class CaptionSegment:
    """A timed line from a YouTube transcript."""

    text: str
    offset: float  # seconds
    duration: float  # seconds


@dataclass
class YouTubeTranscriptResult:
    """Result of a YouTube structured transcript lookup."""

    success: bool
    transcript: str | None = None
    segments: list[CaptionSegment] | None = None
    error: str | None = None


@dataclass
class PodcastEpisode:
    """Represents a podcast episode with a downloadable audio enclosure."""

    title: str
    audio_url: str
    description: str | None = None
    pub_date: str | None = None
    duration: str | None = None


@dataclass
class PodcastFeed:
    """A parsed podcast feed."""

    title: str
    episodes: list[PodcastEpisode]
    description: str | None = None


@dataclass
class MediaInfo:
    """Metadata probed from a media URL without downloading it."""

    title: str
    duration: float  # seconds
    description: str | None = None


@dataclass
class DownloadResult:
    """Result of downloading the audio track of a media URL."""

    success: bool
    audio_path: Path | None = None
    title: str | None = None
    duration: float | None = None  # seconds
    error: str | None = None


@dataclass
class TranscriptSegment:
    """A segment of transcribed text."""

    start: float  # seconds
    end: float  # seconds
    text: str


@dataclass
class TranscriptionResult:
    """Result of speech-to-text transcription."""

    success: bool
    transcript: str | None = None
    error: str | None = None
    segments: list[TranscriptSegment] | None = None


@dataclass
class ProcessingStatus:
    """Progress update emitted while a URL is being processed."""

    status: Status
    message: str | None = None
    progress: float | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Terminal outcome of processing a single URL."""

    success: bool
    platform: Platform
    transcript: str | None = None
    title: str | None = None
    duration: float | None = None
    method: Method | None = None
    error: str | None = None
