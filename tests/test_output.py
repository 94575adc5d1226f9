"""Tests for markdown output generation."""

from pathlib import Path

import pytest
import yaml

from mediascribe.core.errors import OutputError
from mediascribe.core.models import ProcessingResult
from mediascribe.core.output import generate_markdown, generate_markdown_string

URL = "https://youtu.be/dQw4w9WgXcQ"


def parse_frontmatter(markdown: str) -> tuple[dict, str]:
    """Split markdown into its YAML frontmatter and body."""
    _, frontmatter, body = markdown.split("---\n", 2)
    return yaml.safe_load(frontmatter), body


@pytest.fixture
def result() -> ProcessingResult:
    return ProcessingResult(
        success=True,
        platform="youtube",
        transcript="First sentence. Second one! Third? Fourth. Fifth.",
        title='Video: "Quoted" & more',
        duration=212.0,
        method="captions",
    )


class TestFrontmatter:
    """Tests for the YAML frontmatter block."""

    def test_fields(self, result: ProcessingResult) -> None:
        frontmatter, _ = parse_frontmatter(generate_markdown_string(result, URL))

        assert frontmatter == {
            "title": 'Video: "Quoted" & more',
            "source_url": URL,
            "platform": "YouTube",
            "method": "captions",
            "duration": 212,
        }

    def test_unknown_title_and_duration_are_omitted(self) -> None:
        result = ProcessingResult(
            success=True, platform="tiktok", transcript="Hi.", method="whisper"
        )
        frontmatter, _ = parse_frontmatter(generate_markdown_string(result, URL))

        assert "title" not in frontmatter
        assert "duration" not in frontmatter
        assert frontmatter["platform"] == "TikTok"

    def test_fractional_duration(self) -> None:
        result = ProcessingResult(
            success=True, platform="podcast", transcript="Hi.", duration=61.5, method="whisper"
        )
        frontmatter, _ = parse_frontmatter(generate_markdown_string(result, URL))

        assert frontmatter["duration"] == 61.5


class TestBody:
    """Tests for transcript paragraph formatting."""

    def test_groups_sentences_into_paragraphs(self, result: ProcessingResult) -> None:
        _, body = parse_frontmatter(generate_markdown_string(result, URL))

        assert body.strip() == "First sentence. Second one! Third? Fourth.\n\nFifth."

    def test_line_breaks_become_paragraphs(self) -> None:
        result = ProcessingResult(
            success=True, platform="youtube", transcript="[00:01] Hi\n\n[00:05] There\n"
        )
        _, body = parse_frontmatter(generate_markdown_string(result, URL))

        assert body.strip() == "[00:01] Hi\n\n[00:05] There"


class TestGenerateMarkdown:
    """Tests for writing markdown files."""

    def test_writes_file(self, tmp_path: Path, result: ProcessingResult) -> None:
        output_path = tmp_path / "nested" / "out.md"

        generate_markdown(result, URL, output_path)

        content = output_path.read_text(encoding="utf-8")
        assert content == generate_markdown_string(result, URL)
        assert content.startswith("---\n")

    def test_failed_result_is_refused(self, tmp_path: Path) -> None:
        failed = ProcessingResult(success=False, platform="unknown", error="Unsupported URL")

        with pytest.raises(OutputError) as exc_info:
            generate_markdown(failed, URL, tmp_path / "out.md")

        assert "Unsupported URL" in str(exc_info.value)
        assert not (tmp_path / "out.md").exists()

    def test_unwritable_path(self, tmp_path: Path, result: ProcessingResult) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(OutputError):
            generate_markdown(result, URL, blocker / "out.md")
