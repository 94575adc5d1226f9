"""Tests for podcast feed resolution."""

import httpx
import pytest
import respx

from mediascribe.core.errors import FeedError
from mediascribe.services.podcast import PodcastFeedResolver

FEED_URL = "https://example.com/feed.xml"


class TestParseFeed:
    """Tests for PodcastFeedResolver.parse_feed."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_skips_entries_without_audio(self, sample_rss_feed: str) -> None:
        """Three items, one without an enclosure, yield two episodes in feed order."""
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=sample_rss_feed))

        feed = await PodcastFeedResolver().parse_feed(FEED_URL)

        assert feed.title == "Test Podcast"
        assert [e.title for e in feed.episodes] == ["Episode 3", "Episode 1"]
        assert feed.episodes[0].audio_url == "https://example.com/ep3.mp3"

    @respx.mock
    @pytest.mark.asyncio
    async def test_episode_fields(self, sample_rss_feed: str) -> None:
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=sample_rss_feed))

        episode = (await PodcastFeedResolver().parse_feed(FEED_URL)).episodes[0]

        assert episode.description == "The latest episode"
        assert episode.duration == "30:00"
        assert episode.pub_date is not None
        assert "2024" in episode.pub_date

    @respx.mock
    @pytest.mark.asyncio
    async def test_untitled_episode(self) -> None:
        feed_xml = """<?xml version="1.0"?>
<rss version="2.0"><channel><title>Show</title>
<item><enclosure url="https://example.com/a.mp3" type="audio/mpeg"/></item>
</channel></rss>"""
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=feed_xml))

        feed = await PodcastFeedResolver().parse_feed(FEED_URL)

        assert feed.episodes[0].title == "Untitled Episode"

    @respx.mock
    @pytest.mark.asyncio
    async def test_feed_without_episodes(self) -> None:
        feed_xml = """<?xml version="1.0"?>
<rss version="2.0"><channel><title>Empty Show</title></channel></rss>"""
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=feed_xml))

        feed = await PodcastFeedResolver().parse_feed(FEED_URL)

        assert feed.title == "Empty Show"
        assert feed.episodes == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        respx.get(FEED_URL).mock(return_value=httpx.Response(404))

        with pytest.raises(FeedError) as exc_info:
            await PodcastFeedResolver().parse_feed(FEED_URL)

        assert "Failed to parse podcast feed" in str(exc_info.value)
        assert "404" in str(exc_info.value)

    @respx.mock
    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        respx.get(FEED_URL).mock(side_effect=httpx.ConnectError("Connection refused"))

        with pytest.raises(FeedError):
            await PodcastFeedResolver().parse_feed(FEED_URL)

    @respx.mock
    @pytest.mark.asyncio
    async def test_html_page_is_not_a_feed(self) -> None:
        respx.get(FEED_URL).mock(
            return_value=httpx.Response(
                200,
                text="<html><body><p>Hello</p></body></html>",
                headers={"content-type": "text/html"},
            )
        )

        with pytest.raises(FeedError):
            await PodcastFeedResolver().parse_feed(FEED_URL)

    @respx.mock
    @pytest.mark.asyncio
    async def test_audio_url_is_not_a_feed(self) -> None:
        respx.get("https://example.com/episode.mp3").mock(
            return_value=httpx.Response(
                200, content=b"ID3\x00\x00", headers={"content-type": "audio/mpeg"}
            )
        )

        with pytest.raises(FeedError) as exc_info:
            await PodcastFeedResolver().parse_feed("https://example.com/episode.mp3")

        assert "audio/mpeg" in str(exc_info.value)

    @respx.mock
    @pytest.mark.asyncio
    async def test_oversized_body_is_not_a_feed(self) -> None:
        """Media served as a generic binary type is cut off at the size limit."""
        respx.get("https://example.com/episode").mock(
            return_value=httpx.Response(
                200,
                content=b"\x00" * 4096,
                headers={"content-type": "application/octet-stream"},
            )
        )

        with pytest.raises(FeedError) as exc_info:
            await PodcastFeedResolver(max_bytes=1024).parse_feed("https://example.com/episode")

        assert "exceeds 1024 bytes" in str(exc_info.value)

    @respx.mock
    @pytest.mark.asyncio
    async def test_uses_injected_client(self, sample_rss_feed: str) -> None:
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=sample_rss_feed))

        async with httpx.AsyncClient() as client:
            resolver = PodcastFeedResolver(client=client)
            await resolver.parse_feed(FEED_URL)
            assert not client.is_closed


class TestGetEpisode:
    """Tests for PodcastFeedResolver.get_episode."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_by_index(self, sample_rss_feed: str) -> None:
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=sample_rss_feed))

        episode = await PodcastFeedResolver().get_episode(FEED_URL, 1)

        assert episode is not None
        assert episode.title == "Episode 1"

    @respx.mock
    @pytest.mark.asyncio
    async def test_out_of_range(self, sample_rss_feed: str) -> None:
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=sample_rss_feed))

        resolver = PodcastFeedResolver()
        assert await resolver.get_episode(FEED_URL, 2) is None
        assert await resolver.get_episode(FEED_URL, -1) is None

    @respx.mock
    @pytest.mark.asyncio
    async def test_broken_feed(self) -> None:
        respx.get(FEED_URL).mock(return_value=httpx.Response(500))

        assert await PodcastFeedResolver().get_episode(FEED_URL) is None
