"""Tests for CLI interface."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from mediascribe.cli import main
from mediascribe.core.config import Config
from mediascribe.core.errors import ConfigError, FeedError
from mediascribe.core.models import (
    PodcastEpisode,
    PodcastFeed,
    ProcessingResult,
    ProcessingStatus,
)

YOUTUBE_URL = "https://youtu.be/dQw4w9WgXcQ"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def fake_processor(result: ProcessingResult) -> MagicMock:
    """A processor that reports progress once and returns a fixed result."""

    async def process_url(url: str, on_progress=None) -> ProcessingResult:
        if on_progress is not None:
            on_progress(ProcessingStatus(status="pending", message="Working..."))
        return result

    processor = MagicMock()
    processor.process_url = AsyncMock(side_effect=process_url)
    return processor


class TestClassifyCommand:
    """Tests for `mediascribe classify`."""

    def test_youtube(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["classify", YOUTUBE_URL])

        assert result.exit_code == 0
        assert "YouTube (youtube)" in result.output
        assert "Video ID: dQw4w9WgXcQ" in result.output

    def test_unknown(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["classify", "not a url"])

        assert result.exit_code == 0
        assert "Unknown (unknown)" in result.output
        assert "Video ID" not in result.output


class TestEpisodesCommand:
    """Tests for `mediascribe episodes`."""

    def test_lists_episodes(self, runner: CliRunner) -> None:
        feed = PodcastFeed(
            title="Test Podcast",
            episodes=[
                PodcastEpisode(
                    title=f"Episode {i}",
                    audio_url=f"https://example.com/{i}.mp3",
                    pub_date="Mon, 15 Jan 2024 12:00:00 +0000",
                )
                for i in range(5)
            ],
        )
        with patch("mediascribe.cli.PodcastFeedResolver") as mock_resolver:
            mock_resolver.return_value.parse_feed = AsyncMock(return_value=feed)
            result = runner.invoke(
                main, ["episodes", "https://example.com/feed.xml", "--limit", "2"]
            )

        assert result.exit_code == 0
        assert "Test Podcast" in result.output
        assert "[0] Episode 0 (Mon, 15 Jan 2024" in result.output
        assert "[1] Episode 1" in result.output
        assert "Episode 2" not in result.output

    def test_feed_error(self, runner: CliRunner) -> None:
        with patch("mediascribe.cli.PodcastFeedResolver") as mock_resolver:
            mock_resolver.return_value.parse_feed = AsyncMock(
                side_effect=FeedError("Failed to parse podcast feed: HTTP 404")
            )
            result = runner.invoke(main, ["episodes", "https://example.com/feed.xml"])

        assert result.exit_code == 1
        assert "Error: Failed to parse podcast feed: HTTP 404" in result.output


class TestProcessCommand:
    """Tests for `mediascribe process`."""

    def test_prints_transcript(self, runner: CliRunner) -> None:
        processor = fake_processor(
            ProcessingResult(
                success=True, platform="youtube", transcript="Hello world", method="captions"
            )
        )
        with (
            patch("mediascribe.cli.load_config", return_value=Config()),
            patch("mediascribe.cli.build_processor", return_value=processor),
        ):
            result = runner.invoke(main, ["process", YOUTUBE_URL])

        assert result.exit_code == 0
        assert "Hello world" in result.output
        processor.process_url.assert_awaited_once()
        assert processor.process_url.call_args.args[0] == YOUTUBE_URL

    def test_writes_markdown(self, runner: CliRunner, tmp_path: Path) -> None:
        output_path = tmp_path / "out.md"
        processor = fake_processor(
            ProcessingResult(
                success=True,
                platform="youtube",
                transcript="Hello world",
                title="Song",
                method="whisper",
            )
        )
        with (
            patch("mediascribe.cli.load_config", return_value=Config()),
            patch("mediascribe.cli.build_processor", return_value=processor),
        ):
            result = runner.invoke(main, ["process", YOUTUBE_URL, "-o", str(output_path)])

        assert result.exit_code == 0
        assert "written to" in result.output
        content = output_path.read_text(encoding="utf-8")
        assert "title: Song" in content
        assert "Hello world" in content

    def test_failure_exits_nonzero(self, runner: CliRunner) -> None:
        processor = fake_processor(
            ProcessingResult(success=False, platform="unknown", error="Unsupported URL.")
        )
        with (
            patch("mediascribe.cli.load_config", return_value=Config()),
            patch("mediascribe.cli.build_processor", return_value=processor),
        ):
            result = runner.invoke(main, ["process", "https://example.com"])

        assert result.exit_code == 1
        assert "Error: Unsupported URL." in result.output

    def test_config_error(self, runner: CliRunner) -> None:
        with patch(
            "mediascribe.cli.load_config",
            side_effect=ConfigError("Invalid TOML in config file"),
        ):
            result = runner.invoke(main, ["process", YOUTUBE_URL])

        assert result.exit_code == 1
        assert "Error: Invalid TOML in config file" in result.output
