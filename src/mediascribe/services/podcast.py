"""Podcast feed resolution for mediascribe.

Fetches an RSS/Atom feed and turns it into a list of episodes with direct
audio URLs. Also provides the URL heuristic used to recognize feed links.
"""

from __future__ import annotations

import html
import re
from typing import Any
from urllib.parse import urlparse

import feedparser
import httpx

from mediascribe.core.errors import FeedError
from mediascribe.core.models import PodcastEpisode, PodcastFeed

# Default timeout for feed requests (in seconds)
DEFAULT_TIMEOUT = 30.0

# Largest feed document read before giving up (in bytes)
MAX_FEED_BYTES = 20 * 1024 * 1024

# Podcast hosting platforms whose feed URLs carry no other hint
PODCAST_FEED_HOSTS = (
    "anchor.fm",
    "feeds.buzzsprout.com",
    "feeds.simplecast.com",
    "feeds.megaphone.fm",
    "feeds.transistor.fm",
    "feeds.captivate.fm",
    "feeds.spreaker.com",
    "feeds.podbean.com",
    "omnycontent.com",
)

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def is_likely_podcast_feed_url(url: str) -> bool:
    """Guess whether a URL points at a podcast feed.

    Looks at the path (.xml/.rss suffix, /feed or /rss segments), at
    feed-style hostnames (feeds.*, rss.*) and at known podcast hosts.
    Never raises; unparsable input is not a feed.
    """
    try:
        parsed = urlparse(url)
        hostname = (parsed.hostname or "").lower()
    except (ValueError, AttributeError):
        return False

    if not hostname:
        return False

    path = parsed.path.lower()
    if (
        path.endswith((".xml", ".rss"))
        or "/feed" in path
        or "/rss" in path
        or "feeds." in hostname
        or "rss." in hostname
    ):
        return True

    return any(host in hostname for host in PODCAST_FEED_HOSTS)


def _plain_text(value: str | None) -> str | None:
    """Reduce an HTML fragment to a plain-text snippet."""
    if not value:
        return None
    text = html.unescape(_TAG_RE.sub(" ", value))
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text or None


def _extract_audio_url(entry: Any) -> str | None:
    """Extract the audio enclosure URL from a feed entry."""
    for enclosure in entry.get("enclosures", []):
        href = enclosure.get("href") or enclosure.get("url")
        if href:
            return str(href)

    for media in entry.get("media_content", []):
        url = media.get("url")
        if url:
            return str(url)

    return None


def _extract_description(entry: Any) -> str | None:
    description = _plain_text(entry.get("summary"))
    if description:
        return description
    for content in entry.get("content", []):
        description = _plain_text(content.get("value"))
        if description:
            return description
    return None


def _parse_entries(feed: Any) -> list[PodcastEpisode]:
    """Convert feed entries to episodes, in document order.

    Entries without an audio enclosure are skipped.
    """
    episodes: list[PodcastEpisode] = []

    for entry in feed.entries:
        audio_url = _extract_audio_url(entry)
        if not audio_url:
            continue

        episodes.append(
            PodcastEpisode(
                title=entry.get("title") or "Untitled Episode",
                audio_url=audio_url,
                description=_extract_description(entry),
                pub_date=entry.get("published"),
                duration=entry.get("itunes_duration"),
            )
        )

    return episodes


class PodcastFeedResolver:
    """Resolves podcast feed URLs into episodes."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_bytes: int = MAX_FEED_BYTES,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            client: Optional shared httpx client (one is created per call if None)
            timeout: Request timeout in seconds
            max_bytes: Maximum feed size read before the URL is rejected
        """
        self.client = client
        self.timeout = timeout
        self.max_bytes = max_bytes

    async def _fetch(self, feed_url: str) -> bytes:
        """Fetch the raw feed document.

        Raises:
            FeedError: On HTTP errors or when the URL serves media, not a feed.
        """
        client = self.client
        should_close_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)

        try:
            async with client.stream("GET", feed_url) as response:
                response.raise_for_status()

                content_type = response.headers.get("content-type", "").lower()
                if content_type.startswith(("audio/", "video/")):
                    raise FeedError(f"URL serves media ({content_type}), not a feed")

                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > self.max_bytes:
                        raise FeedError(
                            f"response exceeds {self.max_bytes} bytes, not a feed"
                        )
                return bytes(body)

        except httpx.TimeoutException as e:
            raise FeedError(f"request timed out after {self.timeout} seconds") from e
        except httpx.HTTPStatusError as e:
            raise FeedError(f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise FeedError(f"failed to connect: {e}") from e
        finally:
            if should_close_client:
                await client.aclose()

    async def parse_feed(self, feed_url: str) -> PodcastFeed:
        """Fetch and parse a podcast feed.

        Args:
            feed_url: URL of the RSS/Atom feed.

        Returns:
            PodcastFeed with the episodes in feed order (publishers list the
            most recent episode first).

        Raises:
            FeedError: If the feed cannot be fetched or is not RSS/Atom.
                The message includes the underlying cause.
        """
        try:
            content = await self._fetch(feed_url.strip())
            feed = feedparser.parse(content)

            if not feed.entries and (feed.get("bozo") or not feed.get("version")):
                cause = feed.get("bozo_exception") or "unrecognized document format"
                raise FeedError(f"not a valid RSS or Atom feed ({cause})")

        except Exception as e:
            raise FeedError(f"Failed to parse podcast feed: {e}") from e

        return PodcastFeed(
            title=feed.feed.get("title") or "Unknown Podcast",
            description=_plain_text(feed.feed.get("subtitle") or feed.feed.get("description")),
            episodes=_parse_entries(feed),
        )

    async def get_episode(self, feed_url: str, index: int = 0) -> PodcastEpisode | None:
        """Return one episode of a feed, or None if unavailable.

        Args:
            feed_url: URL of the RSS/Atom feed.
            index: Zero-based position in feed order.
        """
        try:
            feed = await self.parse_feed(feed_url)
        except FeedError:
            return None

        if index < 0 or index >= len(feed.episodes):
            return None
        return feed.episodes[index]
