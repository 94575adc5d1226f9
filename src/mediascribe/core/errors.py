"""Custom exceptions for mediascribe."""


class MediascribeError(Exception):
    """Base exception for all mediascribe errors."""

    pass


class ConfigError(MediascribeError):
    """Configuration-related errors."""

    pass


class FeedError(MediascribeError):
    """Podcast feed fetch or parse errors."""

    pass


class DownloadError(MediascribeError):
    """Media download errors."""

    pass


class ToolError(MediascribeError):
    """External command-line tool errors."""

    pass


class ToolNotFoundError(ToolError):
    """A required external tool is not installed."""

    pass


class ToolTimeoutError(ToolError):
    """An external tool did not finish within its timeout."""

    pass


class TranscriptionError(MediascribeError):
    """Speech-to-text errors."""

    pass


class OutputError(MediascribeError):
    """File output errors."""

    pass
