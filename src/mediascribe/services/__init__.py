"""Service modules for mediascribe."""

from mediascribe.services.captions import CaptionFetcher
from mediascribe.services.downloader import MediaDownloader
from mediascribe.services.podcast import PodcastFeedResolver, is_likely_podcast_feed_url
from mediascribe.services.subtitles import normalize
from mediascribe.services.tools import YtDlp
from mediascribe.services.transcriber import Transcriber, create_client
from mediascribe.services.url_parser import classify
from mediascribe.services.youtube import YouTubeTranscriptSource

__all__ = [
    "CaptionFetcher",
    "MediaDownloader",
    "PodcastFeedResolver",
    "Transcriber",
    "YouTubeTranscriptSource",
    "YtDlp",
    "classify",
    "create_client",
    "is_likely_podcast_feed_url",
    "normalize",
]
