"""URL classification for mediascribe.

Maps a raw URL string to the platform it belongs to, extracting the video ID
for YouTube links. Classification is pure: no network access, never raises.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from mediascribe.core.models import ParsedURL, Platform
from mediascribe.services.podcast import is_likely_podcast_feed_url

# Ordered host table; the first platform with a matching domain wins.
HOST_TABLE: tuple[tuple[Platform, tuple[str, ...]], ...] = (
    ("youtube", ("youtube.com", "youtu.be")),
    ("instagram", ("instagram.com",)),
    ("tiktok", ("tiktok.com",)),
    ("facebook", ("facebook.com", "fb.watch", "fb.com")),
    ("twitter", ("twitter.com", "x.com")),
    ("threads", ("threads.net",)),
    ("bluesky", ("bsky.app", "bsky.social")),
    ("vimeo", ("vimeo.com",)),
    ("twitch", ("twitch.tv",)),
    ("reddit", ("reddit.com", "v.redd.it")),
    ("linkedin", ("linkedin.com",)),
    ("snapchat", ("snapchat.com",)),
    ("rumble", ("rumble.com",)),
    ("dailymotion", ("dailymotion.com", "dai.ly")),
)

# Podcast directories and hosts that are not covered by the feed heuristics
PODCAST_HOSTS = (
    "podcasts.apple.com",
    "podbean.com",
    "buzzsprout.com",
    "transistor.fm",
    "simplecast.com",
    "libsyn.com",
    "spreaker.com",
)

# Path prefixes that carry the video ID as the next path segment
_YOUTUBE_PATH_PREFIXES = ("shorts", "embed", "live")


def _host_matches(hostname: str, domain: str) -> bool:
    return hostname == domain or hostname.endswith("." + domain)


def _extract_youtube_id(hostname: str, path: str, query: str) -> str | None:
    """Extract a YouTube video ID from the parts of a URL.

    Handles youtu.be/<id>, watch?v=<id> and /shorts/<id> (also /embed/ and
    /live/). A path-based ID takes precedence over the query parameter.
    """
    segments = [segment for segment in path.split("/") if segment]

    if _host_matches(hostname, "youtu.be"):
        return segments[0] if segments else None

    if len(segments) >= 2 and segments[0] in _YOUTUBE_PATH_PREFIXES:
        return segments[1]

    values = parse_qs(query).get("v")
    if values and values[0]:
        return values[0]
    return None


def classify(url: str) -> ParsedURL:
    """Classify a URL into its platform.

    Args:
        url: Raw URL string as submitted by the user.

    Returns:
        ParsedURL with the platform tag and, for YouTube, the video ID.
        Anything that is not an absolute URL with a hostname, or that no
        rule recognizes, is classified as "unknown".

    Example:
        >>> classify("https://youtu.be/abc123")
        ParsedURL(platform='youtube', url='https://youtu.be/abc123', video_id='abc123')
    """
    try:
        parsed = urlparse(url.strip())
        hostname = (parsed.hostname or "").lower().rstrip(".")
    except (ValueError, AttributeError):
        return ParsedURL(platform="unknown", url=url)

    if not parsed.scheme or not hostname:
        return ParsedURL(platform="unknown", url=url)

    for platform, domains in HOST_TABLE:
        if any(_host_matches(hostname, domain) for domain in domains):
            if platform == "youtube":
                video_id = _extract_youtube_id(hostname, parsed.path, parsed.query)
                return ParsedURL(platform="youtube", url=url, video_id=video_id)
            return ParsedURL(platform=platform, url=url)

    if is_likely_podcast_feed_url(url) or any(
        _host_matches(hostname, host) for host in PODCAST_HOSTS
    ):
        return ParsedURL(platform="podcast", url=url)

    return ParsedURL(platform="unknown", url=url)
