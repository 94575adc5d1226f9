"""Caption acquisition for mediascribe.

Fetches existing subtitles for a media URL through yt-dlp, which covers
TikTok, Instagram, Facebook, Vimeo and most other video platforms.
Captions are free; when none exist the caller falls back to speech-to-text.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from mediascribe.core.models import CaptionResult
from mediascribe.services.subtitles import SUBTITLE_FORMATS, format_from_filename, normalize
from mediascribe.services.tools import YtDlp

logger = logging.getLogger(__name__)

DEFAULT_LIST_TIMEOUT = 30.0
DEFAULT_DOWNLOAD_TIMEOUT = 60.0

TEMP_DIR_PREFIX = "captions-"

SUBTITLE_LANGUAGES = "en.*,en"


def _listing_flags(listing: str) -> tuple[bool, bool]:
    """Read (has_manual, has_auto) from yt-dlp --list-subs output."""
    has_manual = "Available subtitles" in listing
    has_auto = "Available automatic captions" in listing or "auto-generated" in listing
    return has_manual, has_auto


def _find_subtitle_file(directory: Path) -> Path | None:
    """Pick the downloaded subtitle file, preferring formats in download order."""
    candidates = sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and format_from_filename(path.name) is not None
    )
    for fmt in SUBTITLE_FORMATS:
        for path in candidates:
            if format_from_filename(path.name) == fmt:
                return path
    return None


def _is_auto_generated(filename: str, listing_has_auto: bool) -> bool:
    return ".en-orig" in filename or "auto" in filename.lower() or listing_has_auto


class CaptionFetcher:
    """Fetches and normalizes existing captions for media URLs."""

    def __init__(
        self,
        ytdlp: YtDlp | None = None,
        *,
        list_timeout: float = DEFAULT_LIST_TIMEOUT,
        download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
        temp_root: Path | None = None,
    ) -> None:
        """
        Initialize the caption fetcher.

        Args:
            ytdlp: yt-dlp wrapper (default: auto-detected command)
            list_timeout: Seconds allowed for listing subtitle tracks
            download_timeout: Seconds allowed for downloading subtitles
            temp_root: Parent for temporary directories (default: system temp)
        """
        self.ytdlp = ytdlp or YtDlp()
        self.list_timeout = list_timeout
        self.download_timeout = download_timeout
        self.temp_root = temp_root

    async def _list_tracks(self, url: str) -> tuple[bool, bool] | None:
        """List available subtitle tracks.

        Returns:
            (has_manual, has_auto), or None when the listing could not be
            obtained and availability is unknown.
        """
        try:
            result = await self.ytdlp.run(
                ["--list-subs", "--skip-download"], url, timeout=self.list_timeout
            )
        except Exception as e:
            logger.warning("Subtitle listing failed for %s: %s", url, e)
            return None

        if not result.ok:
            logger.warning(
                "Subtitle listing exited with %d for %s", result.returncode, url
            )
            return None
        return _listing_flags(result.stdout)

    async def fetch_captions(self, url: str) -> CaptionResult:
        """Fetch existing captions for a URL as plain text.

        Lists the available tracks first so that videos without captions
        are rejected before any download. A failed listing is not fatal:
        some platforms do not list their subtitles correctly.

        Args:
            url: Media page URL.

        Returns:
            CaptionResult. Never raises; every failure is reported through
            success=False and an error message.
        """
        temp_dir: Path | None = None

        try:
            temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=self.temp_root))
            listing = await self._list_tracks(url)
            has_auto = False
            if listing is not None:
                has_manual, has_auto = listing
                if not has_manual and not has_auto:
                    return CaptionResult(
                        success=False,
                        error="No captions available for this video",
                    )

            result = await self.ytdlp.run(
                [
                    "--write-subs",
                    "--write-auto-subs",
                    "--sub-langs",
                    SUBTITLE_LANGUAGES,
                    "--sub-format",
                    "/".join(SUBTITLE_FORMATS),
                    "--skip-download",
                    "-o",
                    str(temp_dir / "video"),
                ],
                url,
                timeout=self.download_timeout,
            )
            if not result.ok:
                # yt-dlp can exit non-zero after the subtitles were written
                logger.warning("Subtitle download warning: %s", result.stderr.strip())

            subtitle_path = _find_subtitle_file(temp_dir)
            if subtitle_path is None:
                return CaptionResult(success=False, error="No captions could be downloaded")

            fmt = format_from_filename(subtitle_path.name)
            content = subtitle_path.read_text(encoding="utf-8-sig", errors="replace")
            transcript = normalize(content, fmt or "vtt").strip()

            if not transcript:
                return CaptionResult(success=False, error="Downloaded captions were empty")

            is_auto = _is_auto_generated(subtitle_path.name, has_auto)
            return CaptionResult(
                success=True,
                transcript=transcript,
                language="en",
                source="auto" if is_auto else "manual",
            )

        except Exception as e:
            return CaptionResult(success=False, error=f"Failed to fetch captions: {e}")

        finally:
            if temp_dir is not None:
                shutil.rmtree(temp_dir, ignore_errors=True)
