"""Command-line interface for mediascribe."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from mediascribe.core.config import load_config
from mediascribe.core.errors import FeedError, MediascribeError
from mediascribe.core.models import ProcessingStatus
from mediascribe.core.output import generate_markdown
from mediascribe.core.pipeline import build_processor
from mediascribe.core.platforms import display_name
from mediascribe.services.podcast import PodcastFeedResolver
from mediascribe.services.url_parser import classify

console = Console()
error_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="mediascribe")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """mediascribe - Transcripts from YouTube, TikTok, podcasts and more.

    Uses existing captions when a platform has them and falls back to
    Whisper speech-to-text otherwise.
    """
    _configure_logging(verbose)


@main.command(name="classify")
@click.argument("url")
def classify_command(url: str) -> None:
    """Show which platform a URL belongs to.

    Example: mediascribe classify https://youtu.be/dQw4w9WgXcQ
    """
    parsed = classify(url)
    click.echo(f"Platform: {display_name(parsed.platform)} ({parsed.platform})")
    if parsed.video_id:
        click.echo(f"Video ID: {parsed.video_id}")


@main.command()
@click.argument("feed_url")
@click.option(
    "--limit", "-n",
    default=10,
    type=int,
    help="Maximum number of episodes to display (default: 10)",
)
def episodes(feed_url: str, limit: int) -> None:
    """List recent episodes from a podcast feed.

    Example: mediascribe episodes https://example.com/feed.xml
    """
    try:
        feed = asyncio.run(PodcastFeedResolver().parse_feed(feed_url))
    except FeedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(feed.title)
    if not feed.episodes:
        click.echo("No episodes found.")
        return

    for index, episode in enumerate(feed.episodes[:limit]):
        date = f" ({episode.pub_date})" if episode.pub_date else ""
        click.echo(f"  [{index}] {episode.title}{date}")


@main.command()
@click.argument("url")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the transcript as Markdown to this file instead of stdout",
)
def process(url: str, output: Path | None) -> None:
    """Get a transcript for a media URL.

    Example: mediascribe process https://www.tiktok.com/@user/video/123
    """
    try:
        processor = build_processor(load_config())
    except MediascribeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    with error_console.status("Starting...") as status:

        def on_progress(update: ProcessingStatus) -> None:
            status.update(update.message or update.status.capitalize())

        result = asyncio.run(processor.process_url(url, on_progress))

    if not result.success:
        click.echo(f"Error: {result.error}", err=True)
        sys.exit(1)

    if output is None:
        click.echo(result.transcript)
        return

    try:
        generate_markdown(result, url, output)
    except MediascribeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Transcript ({result.method}) written to {output}")


if __name__ == "__main__":
    main()
