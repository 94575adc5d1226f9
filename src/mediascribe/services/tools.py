"""External command-line tool runner for mediascribe.

Runs yt-dlp (and probes for ffmpeg) as child processes. Commands are always
argument vectors executed without a shell, and every call has a timeout.
"""

from __future__ import annotations

import asyncio
import logging
import re
import shutil
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from mediascribe.core.errors import ToolError, ToolNotFoundError, ToolTimeoutError

logger = logging.getLogger(__name__)

# Output buffer size for verbose tool output (50MB)
OUTPUT_LIMIT = 50 * 1024 * 1024

VERSION_TIMEOUT = 15.0

YTDLP_INSTALL_HINT = (
    "yt-dlp is not installed. Please install it: "
    "https://github.com/yt-dlp/yt-dlp#installation"
)

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


@dataclass
class CommandResult:
    """Exit status and decoded output of a finished command."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def clean_url(url: str) -> str:
    """Strip whitespace and control characters from a URL argument."""
    return _CONTROL_CHARS_RE.sub("", url).strip()


def default_ytdlp_command() -> list[str]:
    """Return the yt-dlp command: the executable on PATH, else the module."""
    executable = shutil.which("yt-dlp")
    if executable:
        return [executable]
    return [sys.executable, "-m", "yt_dlp"]


def has_ffmpeg() -> bool:
    """Whether ffmpeg is available for audio transcoding."""
    return shutil.which("ffmpeg") is not None


async def run_command(
    args: Sequence[str],
    timeout: float,
    output_limit: int = OUTPUT_LIMIT,
) -> CommandResult:
    """Run a command to completion and capture its output.

    Args:
        args: Program and arguments.
        timeout: Seconds to wait before killing the process.
        output_limit: Stream buffer size for stdout/stderr.

    Returns:
        CommandResult, whatever the exit status.

    Raises:
        ToolNotFoundError: If the program does not exist.
        ToolTimeoutError: If the process outlives the timeout.
    """
    logger.debug("Running %s", " ".join(args))
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=output_limit,
        )
    except FileNotFoundError as e:
        raise ToolNotFoundError(f"Command not found: {args[0]}") from e
    except OSError as e:
        raise ToolError(f"Failed to start {args[0]}: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        process.kill()
        await process.wait()
        raise ToolTimeoutError(f"{args[0]} timed out after {timeout:g} seconds") from e

    return CommandResult(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


class YtDlp:
    """Thin async wrapper around the yt-dlp command line."""

    def __init__(self, command: Sequence[str] | None = None) -> None:
        """
        Initialize the wrapper.

        Args:
            command: Command prefix used to invoke yt-dlp. Auto-detected if None.
        """
        self.command = list(command) if command else default_ytdlp_command()
        self._available: bool | None = None

    async def is_available(self) -> bool:
        """Check that yt-dlp can be executed.

        The version probe runs once per instance; later calls reuse its answer.
        """
        if self._available is None:
            try:
                result = await run_command(
                    [*self.command, "--version"], timeout=VERSION_TIMEOUT
                )
            except ToolError:
                self._available = False
            else:
                self._available = result.ok
        return self._available

    async def run(self, options: Sequence[str], url: str, timeout: float) -> CommandResult:
        """Run yt-dlp with options against a single URL.

        The URL follows a "--" separator so it is never parsed as an option.
        """
        return await run_command(
            [*self.command, *options, "--", clean_url(url)],
            timeout=timeout,
        )
