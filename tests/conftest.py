"""Pytest fixtures for mediascribe tests."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from mediascribe.core.config import Config
from mediascribe.services.tools import CommandResult


@pytest.fixture
def sample_vtt() -> str:
    """Rolling auto-caption VTT where each line repeats across cues."""
    return """WEBVTT
Kind: captions
Language: en

NOTE
This comment is not part of the transcript.

1
00:00:00.000 --> 00:00:02.000
Hello and welcome to the show.

2
00:00:02.000 --> 00:00:04.000
Hello and welcome to the show.
Today we're discussing <c>testing</c>.

3
00:00:04.000 --> 00:00:06.000
today we're discussing testing.
Let's dive in.
"""


@pytest.fixture
def sample_srt() -> str:
    """SRT with a repeated line."""
    return """1
00:00:00,000 --> 00:00:02,000
Hello there.

2
00:00:02,000 --> 00:00:04,000
<i>Hello there.</i>

3
00:00:04,000 --> 00:00:06,000
General Kenobi!
"""


@pytest.fixture
def sample_rss_feed() -> str:
    """RSS feed with three items, the second without an enclosure."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>Test Podcast</title>
    <description>A test podcast</description>
    <item>
      <title>Episode 3</title>
      <pubDate>Mon, 22 Jan 2024 12:00:00 +0000</pubDate>
      <description>&lt;p&gt;The &lt;b&gt;latest&lt;/b&gt; episode&lt;/p&gt;</description>
      <enclosure url="https://example.com/ep3.mp3" type="audio/mpeg" length="1000000"/>
      <itunes:duration>30:00</itunes:duration>
    </item>
    <item>
      <title>Bonus post</title>
      <pubDate>Mon, 15 Jan 2024 12:00:00 +0000</pubDate>
    </item>
    <item>
      <title>Episode 1</title>
      <pubDate>Mon, 08 Jan 2024 12:00:00 +0000</pubDate>
      <enclosure url="https://example.com/ep1.mp3" type="audio/mpeg" length="1000000"/>
      <itunes:duration>25:00</itunes:duration>
    </item>
  </channel>
</rss>"""


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Default configuration with temp files kept under tmp_path."""
    config = Config()
    config.api.openai_key = "sk-test"
    config.storage.temp_dir = str(tmp_path)
    return config


@pytest.fixture
def mock_ytdlp() -> MagicMock:
    """A YtDlp stand-in that is available and succeeds with no output."""
    ytdlp = MagicMock()
    ytdlp.is_available = AsyncMock(return_value=True)
    ytdlp.run = AsyncMock(return_value=CommandResult(returncode=0, stdout="", stderr=""))
    return ytdlp
