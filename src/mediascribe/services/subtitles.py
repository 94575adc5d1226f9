"""Subtitle normalization for mediascribe.

Converts VTT, SRT, JSON3 and TTML subtitle payloads into plain transcript
text. Pure text processing; malformed input degrades to an empty string.
"""

from __future__ import annotations

import html
import json
import re
from pathlib import PurePath
from typing import Literal

SubtitleFormat = Literal["vtt", "srt", "json3", "ttml"]

# Download preference order, also used to pick among several files
SUBTITLE_FORMATS: tuple[SubtitleFormat, ...] = ("vtt", "srt", "json3", "ttml")

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_VTT_TIMESTAMP_RE = re.compile(r"^\d{2}:\d{2}")
_VTT_BLOCK_KEYWORDS = ("NOTE", "STYLE", "REGION")
_SRT_INDEX_RE = re.compile(r"^\d+$")
_TTML_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>(.*?)</p>", re.DOTALL | re.IGNORECASE)
_TTML_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


def _clean_line(line: str) -> str:
    """Strip markup tags and entities, collapsing whitespace."""
    text = html.unescape(_TAG_RE.sub("", line))
    return _WHITESPACE_RE.sub(" ", text).strip()


def _is_timing_line(line: str) -> bool:
    return "-->" in line or bool(_VTT_TIMESTAMP_RE.match(line))


def _remove_duplicate_lines(lines: list[str]) -> list[str]:
    """Drop lines already seen, comparing case-insensitively.

    Rolling auto-captions repeat each line across several overlapping cues.
    """
    seen: set[str] = set()
    result: list[str] = []
    for line in lines:
        key = line.lower()
        if key not in seen:
            seen.add(key)
            result.append(line)
    return result


def parse_vtt(content: str) -> str:
    """Convert WebVTT content to deduplicated plain text."""
    lines = content.lstrip("\ufeff").splitlines()
    text_lines: list[str] = []
    skipping_block = False

    for position, raw_line in enumerate(lines):
        line = raw_line.strip()

        if not line:
            skipping_block = False
            continue
        if skipping_block:
            continue
        block_start = position == 0 or not lines[position - 1].strip()
        if line.startswith("WEBVTT") or (
            block_start and line.split(" ", 1)[0] in _VTT_BLOCK_KEYWORDS
        ):
            # Header, comment and style blocks run until the next blank line
            skipping_block = True
            continue
        if _is_timing_line(line):
            continue

        next_line = lines[position + 1].strip() if position + 1 < len(lines) else ""
        if "-->" in next_line:
            # Cue identifier
            continue

        cleaned = _clean_line(line)
        if cleaned:
            text_lines.append(cleaned)

    return " ".join(_remove_duplicate_lines(text_lines))


def parse_srt(content: str) -> str:
    """Convert SRT content to plain text."""
    text_lines: list[str] = []

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or _SRT_INDEX_RE.match(line) or "-->" in line:
            continue
        cleaned = _clean_line(line)
        if cleaned:
            text_lines.append(cleaned)

    return " ".join(text_lines)


def parse_json3(content: str) -> str:
    """Convert YouTube JSON3 timed text to plain text."""
    try:
        data = json.loads(content)
    except (ValueError, TypeError):
        return ""

    if not isinstance(data, dict):
        return ""

    events = data.get("events") or []
    if not isinstance(events, list):
        return ""

    text_lines: list[str] = []
    for event in events:
        if not isinstance(event, dict):
            continue
        segs = event.get("segs")
        if not isinstance(segs, list):
            continue
        text = "".join(
            str(seg.get("utf8") or "") for seg in segs if isinstance(seg, dict)
        )
        text = _WHITESPACE_RE.sub(" ", text).strip()
        if text:
            text_lines.append(text)

    return " ".join(text_lines)


def parse_ttml(content: str) -> str:
    """Convert TTML content to plain text from its <p> elements."""
    text_lines: list[str] = []

    for match in _TTML_PARAGRAPH_RE.finditer(content):
        cleaned = _clean_line(_TTML_BREAK_RE.sub(" ", match.group(1)))
        if cleaned:
            text_lines.append(cleaned)

    return " ".join(text_lines)


_PARSERS = {
    "vtt": parse_vtt,
    "srt": parse_srt,
    "json3": parse_json3,
    "ttml": parse_ttml,
}


def format_from_filename(filename: str) -> SubtitleFormat | None:
    """Return the subtitle format for a filename, or None if unrecognized."""
    suffix = PurePath(filename).suffix.lower().lstrip(".")
    if suffix in _PARSERS:
        return suffix  # type: ignore[return-value]
    return None


def normalize(content: str, fmt: str) -> str:
    """Normalize a subtitle payload into plain transcript text.

    Args:
        content: Raw subtitle file content.
        fmt: One of "vtt", "srt", "json3" or "ttml" (case-insensitive,
            a leading dot is accepted).

    Returns:
        The transcript text, or an empty string if nothing usable was found.

    Raises:
        ValueError: If the format is not one of the supported formats.
    """
    key = fmt.lower().lstrip(".")
    parser = _PARSERS.get(key)
    if parser is None:
        raise ValueError(
            f"Unsupported subtitle format '{fmt}'. "
            f"Valid options: {', '.join(SUBTITLE_FORMATS)}"
        )
    return parser((content or "").lstrip("\ufeff"))
