"""Media downloader for mediascribe.

Downloads the best available audio track of a media URL with yt-dlp into a
private temporary directory. The returned file belongs to the caller until
it is released with MediaDownloader.cleanup_audio_file().
"""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
from pathlib import Path

from mediascribe.core.errors import DownloadError, ToolNotFoundError
from mediascribe.core.models import DownloadResult, MediaInfo
from mediascribe.services.tools import YTDLP_INSTALL_HINT, YtDlp, has_ffmpeg

logger = logging.getLogger(__name__)

# Default timeout for downloads (in seconds)
DEFAULT_TIMEOUT = 300.0  # 5 minutes for large media files

DEFAULT_METADATA_TIMEOUT = 60.0

TEMP_DIR_PREFIX = "transcript-"

# Formats accepted by the hosted transcription service
AUDIO_EXTENSIONS = (".mp3", ".m4a", ".webm", ".wav", ".mp4", ".mpeg", ".mpga", ".ogg")

OUTPUT_TEMPLATE = "%(id)s.%(ext)s"


def _find_audio_file(directory: Path) -> Path | None:
    for path in sorted(directory.iterdir()):
        if path.is_file() and path.suffix.lower() in AUDIO_EXTENSIONS:
            return path
    return None


def _audio_format_options(ffmpeg_available: bool) -> list[str]:
    """yt-dlp format options for the host's transcoding capabilities."""
    if ffmpeg_available:
        return ["-x", "--audio-format", "mp3", "--audio-quality", "0"]
    # Native container the transcription service accepts, m4a preferred
    return ["-f", "bestaudio[ext=m4a]/bestaudio"]


def _stderr_tail(stderr: str, lines: int = 5) -> str:
    return "\n".join(stderr.strip().splitlines()[-lines:])


class MediaDownloader:
    """Downloads audio tracks and probes media metadata through yt-dlp."""

    def __init__(
        self,
        ytdlp: YtDlp | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        metadata_timeout: float = DEFAULT_METADATA_TIMEOUT,
        temp_root: Path | None = None,
        ffmpeg_available: bool | None = None,
    ) -> None:
        """
        Initialize the downloader.

        Args:
            ytdlp: yt-dlp wrapper (default: auto-detected command)
            timeout: Seconds allowed for an audio download
            metadata_timeout: Seconds allowed for a metadata probe
            temp_root: Parent for temporary directories (default: system temp)
            ffmpeg_available: Override ffmpeg detection (default: look on PATH)
        """
        self.ytdlp = ytdlp or YtDlp()
        self.timeout = timeout
        self.metadata_timeout = metadata_timeout
        self.temp_root = temp_root
        self.ffmpeg_available = ffmpeg_available

    async def get_media_info(self, url: str) -> MediaInfo | None:
        """Probe title, duration and description without downloading.

        Args:
            url: Media page URL.

        Returns:
            MediaInfo, or None if the probe failed.

        Raises:
            ToolNotFoundError: If yt-dlp is not installed.
        """
        if not await self.ytdlp.is_available():
            raise ToolNotFoundError(YTDLP_INSTALL_HINT)

        try:
            result = await self.ytdlp.run(
                ["--dump-json", "--no-download", "--no-playlist"],
                url,
                timeout=self.metadata_timeout,
            )
            if not result.ok:
                raise DownloadError(_stderr_tail(result.stderr) or "metadata probe failed")

            first_line = result.stdout.strip().splitlines()[0]
            info = json.loads(first_line)
        except Exception as e:
            logger.warning("Failed to get media info for %s: %s", url, e)
            return None

        return MediaInfo(
            title=info.get("title") or "Unknown",
            duration=info.get("duration") or 0,
            description=info.get("description"),
        )

    async def download_audio(self, url: str) -> DownloadResult:
        """Download the audio track of a media URL.

        Transcodes to mp3 when ffmpeg is available, otherwise keeps the best
        native audio stream. Metadata is probed first; a failed probe does
        not stop the download.

        Args:
            url: Media page or direct audio URL.

        Returns:
            DownloadResult. On success the audio file lives in a private
            temporary directory that must be released through
            cleanup_audio_file(). On failure nothing is left on disk.
        """
        if not await self.ytdlp.is_available():
            return DownloadResult(success=False, error=YTDLP_INSTALL_HINT)

        ffmpeg_available = (
            self.ffmpeg_available if self.ffmpeg_available is not None else has_ffmpeg()
        )

        temp_dir: Path | None = None
        keep_temp_dir = False

        try:
            temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=self.temp_root))

            info = await self.get_media_info(url)

            result = await self.ytdlp.run(
                [
                    *_audio_format_options(ffmpeg_available),
                    "--no-playlist",
                    "-o",
                    str(temp_dir / OUTPUT_TEMPLATE),
                ],
                url,
                timeout=self.timeout,
            )
            if not result.ok:
                raise DownloadError(
                    _stderr_tail(result.stderr) or f"yt-dlp exited with {result.returncode}"
                )
            if result.stderr.strip():
                logger.warning("yt-dlp warnings: %s", result.stderr.strip())

            audio_path = _find_audio_file(temp_dir)
            if audio_path is None:
                return DownloadResult(
                    success=False,
                    error="Failed to download audio - no audio file created",
                )

            keep_temp_dir = True
            return DownloadResult(
                success=True,
                audio_path=audio_path,
                title=info.title if info else None,
                duration=info.duration if info else None,
            )

        except Exception as e:
            return DownloadResult(success=False, error=f"Failed to download audio: {e}")

        finally:
            if temp_dir is not None and not keep_temp_dir:
                shutil.rmtree(temp_dir, ignore_errors=True)

    def cleanup_audio_file(self, audio_path: Path | str) -> bool:
        """Release an audio file returned by download_audio().

        Deletes the file, then its parent directory if it is one of this
        downloader's temporary directories and is now empty. Never touches
        any other directory.

        Args:
            audio_path: Path previously returned in DownloadResult.audio_path.

        Returns:
            True if the file was deleted, False otherwise.
        """
        path = Path(audio_path)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Failed to delete %s: %s", path, e)
            return False

        parent = path.parent
        try:
            if parent.name.startswith(TEMP_DIR_PREFIX) and not any(parent.iterdir()):
                parent.rmdir()
        except OSError as e:
            logger.warning("Failed to remove temporary directory %s: %s", parent, e)

        return True
