"""Markdown output generator for mediascribe.

Generates markdown files with YAML frontmatter containing the source
metadata, followed by the transcript with paragraph formatting.
"""

from __future__ import annotations

import re
from pathlib import Path

import yaml

from mediascribe.core.errors import OutputError
from mediascribe.core.models import ProcessingResult
from mediascribe.core.platforms import display_name

_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")

# Sentences grouped into one paragraph when the transcript has no line breaks
SENTENCES_PER_PARAGRAPH = 4


def _format_frontmatter(result: ProcessingResult, url: str) -> str:
    """Generate YAML frontmatter from a processing result.

    Creates a YAML block containing:
    - title: Media title (if known)
    - source_url: URL that was processed
    - platform: Human-readable platform name
    - method: How the transcript was obtained (captions or whisper)
    - duration: Length in seconds (if known)

    Args:
        result: Successful processing result.
        url: Source URL.

    Returns:
        YAML frontmatter string with delimiters.
    """
    frontmatter_data: dict[str, str | float | int] = {}

    if result.title:
        frontmatter_data["title"] = result.title

    frontmatter_data["source_url"] = url
    frontmatter_data["platform"] = display_name(result.platform)

    if result.method:
        frontmatter_data["method"] = result.method

    if result.duration:
        duration = result.duration
        frontmatter_data["duration"] = int(duration) if float(duration).is_integer() else duration

    yaml_content = yaml.dump(
        frontmatter_data,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=80,
    )

    return f"---\n{yaml_content}---\n"


def _add_paragraph_breaks(text: str) -> str:
    """Add paragraph breaks to text based on sentence patterns.

    Existing line breaks become paragraph breaks; otherwise sentences are
    grouped a few at a time.
    """
    if not text:
        return text

    if "\n" in text:
        lines = [line.strip() for line in text.split("\n") if line.strip()]
        return "\n\n".join(lines) if lines else text

    sentences = [s.strip() for s in _SENTENCE_END_RE.split(text) if s.strip()]
    if len(sentences) <= 1:
        return text

    paragraphs = [
        " ".join(sentences[i : i + SENTENCES_PER_PARAGRAPH])
        for i in range(0, len(sentences), SENTENCES_PER_PARAGRAPH)
    ]
    return "\n\n".join(paragraphs)


def generate_markdown_string(result: ProcessingResult, url: str) -> str:
    """Generate markdown content as a string without writing to file.

    Args:
        result: Successful processing result.
        url: Source URL, recorded in the frontmatter.

    Returns:
        Complete markdown string with frontmatter and content.

    Raises:
        OutputError: If the result is a failure or has no transcript.
    """
    if not result.success or not result.transcript:
        raise OutputError(
            f"Cannot write output for a failed result: {result.error or 'no transcript'}"
        )

    frontmatter = _format_frontmatter(result, url)
    content = _add_paragraph_breaks(result.transcript.strip())

    return f"{frontmatter}\n{content}\n"


def generate_markdown(result: ProcessingResult, url: str, output_path: Path) -> None:
    """Generate a markdown file with frontmatter and the transcript.

    The output format follows the structure:
    ```markdown
    ---
    title: Video Title
    source_url: https://youtu.be/abc123
    platform: YouTube
    method: captions
    duration: 212
    ---

    Transcript text in paragraphs...
    ```

    Args:
        result: Successful processing result.
        url: Source URL, recorded in the frontmatter.
        output_path: Path where the markdown file will be written.

    Raises:
        OutputError: If the result is a failure or the file cannot be written.
    """
    markdown_output = generate_markdown_string(result, url)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(markdown_output, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Failed to write {output_path}: {e}") from e
