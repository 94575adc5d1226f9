"""Per-platform acquisition strategies.

Every decision the pipeline makes about a platform is read from
PLATFORM_STRATEGIES, so supporting a new platform means adding a row here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from mediascribe.core.models import Platform

CaptionSource = Literal["youtube-api", "generic", "none"]


@dataclass(frozen=True)
class PlatformStrategy:
    """How transcripts are acquired for one platform.

    Attributes:
        acquire_captions: Whether to look for existing captions first.
        caption_source: Which caption backend to use.
        requires_feed_resolution: Whether the URL is a feed to resolve
            into an episode audio URL before downloading.
        downloadable: Whether audio can be downloaded for speech-to-text.
    """

    acquire_captions: bool
    caption_source: CaptionSource
    requires_feed_resolution: bool
    downloadable: bool


_YOUTUBE = PlatformStrategy(
    acquire_captions=True,
    caption_source="youtube-api",
    requires_feed_resolution=False,
    downloadable=True,
)

_CAPTION_FALLBACK = PlatformStrategy(
    acquire_captions=True,
    caption_source="generic",
    requires_feed_resolution=False,
    downloadable=True,
)

_PODCAST = PlatformStrategy(
    acquire_captions=False,
    caption_source="none",
    requires_feed_resolution=True,
    downloadable=True,
)

_UNSUPPORTED = PlatformStrategy(
    acquire_captions=False,
    caption_source="none",
    requires_feed_resolution=False,
    downloadable=False,
)

PLATFORM_STRATEGIES: dict[Platform, PlatformStrategy] = {
    "youtube": _YOUTUBE,
    "podcast": _PODCAST,
    "tiktok": _CAPTION_FALLBACK,
    "instagram": _CAPTION_FALLBACK,
    "facebook": _CAPTION_FALLBACK,
    "twitter": _CAPTION_FALLBACK,
    "threads": _CAPTION_FALLBACK,
    "bluesky": _CAPTION_FALLBACK,
    "vimeo": _CAPTION_FALLBACK,
    "twitch": _CAPTION_FALLBACK,
    "reddit": _CAPTION_FALLBACK,
    "snapchat": _CAPTION_FALLBACK,
    "rumble": _CAPTION_FALLBACK,
    "dailymotion": _CAPTION_FALLBACK,
    "linkedin": _CAPTION_FALLBACK,
    "unknown": _UNSUPPORTED,
}

_DISPLAY_NAMES: dict[Platform, str] = {
    "youtube": "YouTube",
    "podcast": "Podcast",
    "instagram": "Instagram",
    "tiktok": "TikTok",
    "facebook": "Facebook",
    "twitter": "X/Twitter",
    "threads": "Threads",
    "bluesky": "Bluesky",
    "vimeo": "Vimeo",
    "twitch": "Twitch",
    "reddit": "Reddit",
    "linkedin": "LinkedIn",
    "snapchat": "Snapchat",
    "rumble": "Rumble",
    "dailymotion": "Dailymotion",
    "unknown": "Unknown",
}


def get_strategy(platform: Platform) -> PlatformStrategy:
    """Return the acquisition strategy for a platform tag."""
    return PLATFORM_STRATEGIES.get(platform, _UNSUPPORTED)


def display_name(platform: Platform) -> str:
    """Return a human-readable label for a platform tag."""
    return _DISPLAY_NAMES.get(platform, "Unknown")


def supports_download(platform: Platform) -> bool:
    """Whether audio for the platform can be downloaded and transcribed."""
    return get_strategy(platform).downloadable
