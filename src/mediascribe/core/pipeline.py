"""Transcript processing pipeline for mediascribe.

Orchestrates the full flow for one URL: classify → captions (when the
platform has them) → download → transcribe. Each platform's strategy comes
from core.platforms; every failure ends in a ProcessingResult, never an
exception.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from mediascribe.core.config import Config, load_config
from mediascribe.core.errors import FeedError, MediascribeError
from mediascribe.core.models import (
    MediaInfo,
    Platform,
    ProcessingResult,
    ProcessingStatus,
    Status,
)
from mediascribe.core.platforms import display_name, get_strategy
from mediascribe.services.captions import CaptionFetcher
from mediascribe.services.downloader import MediaDownloader
from mediascribe.services.podcast import PodcastFeedResolver
from mediascribe.services.tools import YtDlp
from mediascribe.services.transcriber import Transcriber, create_client
from mediascribe.services.url_parser import classify
from mediascribe.services.youtube import YouTubeTranscriptSource

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProcessingStatus], None]

UNSUPPORTED_URL_MESSAGE = (
    "Unsupported URL. Please provide a supported platform URL "
    "(YouTube, TikTok, Instagram, X/Twitter, Threads, Bluesky, etc.)"
)


@dataclass
class _Request:
    """State of a single process_url() call."""

    url: str
    platform: Platform
    on_progress: ProgressCallback | None = None

    def report(self, status: Status, message: str) -> None:
        if self.on_progress is not None:
            self.on_progress(ProcessingStatus(status=status, message=message))


class TranscriptProcessor:
    """Turns media URLs into transcripts.

    All collaborators are injected, so tests can substitute fakes and a
    host application controls the lifetime of its API clients.

    Example:
        >>> processor = build_processor(load_config())
        >>> result = await processor.process_url("https://youtu.be/abc123")
        >>> print(result.method, result.transcript)
    """

    def __init__(
        self,
        *,
        captions: CaptionFetcher,
        youtube: YouTubeTranscriptSource,
        podcasts: PodcastFeedResolver,
        downloader: MediaDownloader,
        transcriber: Transcriber,
    ) -> None:
        self.captions = captions
        self.youtube = youtube
        self.podcasts = podcasts
        self.downloader = downloader
        self.transcriber = transcriber

    async def process_url(
        self,
        url: str,
        on_progress: ProgressCallback | None = None,
    ) -> ProcessingResult:
        """Produce a transcript for a media URL.

        Args:
            url: URL submitted by the user.
            on_progress: Optional callback receiving a ProcessingStatus at
                each step (pending, downloading, transcribing).

        Returns:
            ProcessingResult. Never raises.
        """
        parsed = classify(url)
        platform = parsed.platform

        if platform == "unknown":
            return ProcessingResult(success=False, platform="unknown", error=UNSUPPORTED_URL_MESSAGE)

        strategy = get_strategy(platform)
        if not strategy.downloadable and not strategy.requires_feed_resolution:
            return ProcessingResult(
                success=False,
                platform=platform,
                error=(
                    f"{display_name(platform)} is recognized but not yet fully "
                    "supported for transcription"
                ),
            )

        request = _Request(url=url, platform=platform, on_progress=on_progress)

        try:
            request.report("pending", f"Processing {display_name(platform)} URL...")

            if strategy.requires_feed_resolution:
                return await self._process_podcast(request)

            if strategy.caption_source == "youtube-api":
                result = await self._try_youtube_captions(request)
            elif strategy.caption_source == "generic":
                result = await self._try_generic_captions(request)
            else:
                result = None

            if result is not None:
                return result

            request.report(
                "downloading",
                f"No captions found on {display_name(platform)}. "
                "Downloading audio for transcription...",
            )
            return await self._download_and_transcribe(request, url)

        except Exception as e:
            logger.exception("Processing failed for %s", url)
            return ProcessingResult(
                success=False,
                platform=platform,
                error=str(e) or "Unknown error",
            )

    async def _try_youtube_captions(self, request: _Request) -> ProcessingResult | None:
        """Return a captions result from YouTube's transcript API, or None."""
        request.report("pending", "Checking for existing captions...")

        captions = await self.youtube.fetch_transcript(request.url)
        if not captions.success or not captions.transcript:
            logger.info("YouTube captions unavailable: %s", captions.error)
            return None

        return ProcessingResult(
            success=True,
            platform=request.platform,
            transcript=captions.transcript,
            method="captions",
        )

    async def _try_generic_captions(self, request: _Request) -> ProcessingResult | None:
        """Return a captions result from yt-dlp subtitles, or None."""
        request.report(
            "pending",
            f"Checking for captions on {display_name(request.platform)}...",
        )

        captions = await self.captions.fetch_captions(request.url)
        if not captions.success or not captions.transcript:
            logger.info("Captions unavailable: %s", captions.error)
            return None

        info = await self._probe_media_info(request.url)
        return ProcessingResult(
            success=True,
            platform=request.platform,
            transcript=captions.transcript,
            title=info.title if info else None,
            duration=info.duration if info else None,
            method="captions",
        )

    async def _process_podcast(self, request: _Request) -> ProcessingResult:
        """Transcribe the most recent episode of a feed.

        A URL that is not a feed is treated as a direct audio link.
        """
        request.report("pending", "Parsing podcast feed...")

        try:
            feed = await self.podcasts.parse_feed(request.url)
        except FeedError as e:
            logger.info("Not a podcast feed, trying direct audio: %s", e)
            request.report("downloading", "Downloading audio...")
            return await self._download_and_transcribe(request, request.url)

        if not feed.episodes:
            return ProcessingResult(
                success=False,
                platform=request.platform,
                error="No episodes found in podcast feed",
            )

        # Publishers list episodes newest first; the feed order is trusted
        episode = feed.episodes[0]
        request.report("downloading", f"Downloading: {episode.title}...")
        return await self._download_and_transcribe(request, episode.audio_url, episode.title)

    async def _probe_media_info(self, url: str) -> MediaInfo | None:
        """Best-effort metadata lookup; tool failures leave it unknown."""
        try:
            return await self.downloader.get_media_info(url)
        except MediascribeError as e:
            logger.debug("Metadata probe failed for %s: %s", url, e)
            return None

    async def _download_and_transcribe(
        self,
        request: _Request,
        media_url: str,
        title: str | None = None,
    ) -> ProcessingResult:
        """Download audio and run speech-to-text, always releasing the file."""
        if not title:
            info = await self._probe_media_info(media_url)
            title = info.title if info else None

        download = await self.downloader.download_audio(media_url)
        if not download.success or download.audio_path is None:
            return ProcessingResult(
                success=False,
                platform=request.platform,
                title=title or download.title,
                duration=download.duration,
                error=download.error or "Failed to download audio",
            )

        try:
            request.report("transcribing", "Transcribing audio with Whisper...")
            transcription = await self.transcriber.transcribe(download.audio_path)
        finally:
            self.downloader.cleanup_audio_file(download.audio_path)

        if not transcription.success or not transcription.transcript:
            return ProcessingResult(
                success=False,
                platform=request.platform,
                title=title or download.title,
                duration=download.duration,
                error=transcription.error or "Transcription failed",
            )

        return ProcessingResult(
            success=True,
            platform=request.platform,
            transcript=transcription.transcript,
            title=title or download.title,
            duration=download.duration,
            method="whisper",
        )


def build_processor(config: Config | None = None) -> TranscriptProcessor:
    """Construct a TranscriptProcessor and its collaborators from configuration.

    Args:
        config: Application configuration. If None, loads from default paths.

    Returns:
        A ready TranscriptProcessor.
    """
    if config is None:
        config = load_config()

    ytdlp = YtDlp(config.get_ytdlp_command())
    temp_root = config.get_temp_dir()

    return TranscriptProcessor(
        captions=CaptionFetcher(
            ytdlp,
            list_timeout=config.timeouts.caption_list,
            download_timeout=config.timeouts.caption_download,
            temp_root=temp_root,
        ),
        youtube=YouTubeTranscriptSource(),
        podcasts=PodcastFeedResolver(),
        downloader=MediaDownloader(
            ytdlp,
            timeout=config.timeouts.audio_download,
            metadata_timeout=config.timeouts.metadata,
            temp_root=temp_root,
        ),
        transcriber=Transcriber(
            create_client(config.get_openai_key()),
            model=config.transcription.model,
            max_file_size_mb=config.transcription.max_file_size_mb,
        ),
    )


async def process_url(
    url: str,
    on_progress: ProgressCallback | None = None,
    *,
    config: Config | None = None,
) -> ProcessingResult:
    """Process a URL with a processor built from configuration.

    Convenience wrapper around build_processor() and
    TranscriptProcessor.process_url(). Never raises.
    """
    try:
        processor = build_processor(config)
    except Exception as e:
        return ProcessingResult(success=False, platform=classify(url).platform, error=str(e))
    return await processor.process_url(url, on_progress)
