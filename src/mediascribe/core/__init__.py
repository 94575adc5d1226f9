"""Core modules for mediascribe."""

from mediascribe.core.config import (
    ApiConfig,
    Config,
    StorageConfig,
    TimeoutConfig,
    ToolsConfig,
    TranscriptionConfig,
    get_config,
    load_config,
)
from mediascribe.core.errors import (
    ConfigError,
    DownloadError,
    FeedError,
    MediascribeError,
    OutputError,
    ToolError,
    ToolNotFoundError,
    ToolTimeoutError,
    TranscriptionError,
)
from mediascribe.core.models import (
    ParsedURL,
    Platform,
    ProcessingResult,
    ProcessingStatus,
)
from mediascribe.core.platforms import (
    PLATFORM_STRATEGIES,
    PlatformStrategy,
    get_strategy,
)

__all__ = [
    "ApiConfig",
    "Config",
    "StorageConfig",
    "TimeoutConfig",
    "ToolsConfig",
    "TranscriptionConfig",
    "get_config",
    "load_config",
    "ConfigError",
    "DownloadError",
    "FeedError",
    "MediascribeError",
    "OutputError",
    "ToolError",
    "ToolNotFoundError",
    "ToolTimeoutError",
    "TranscriptionError",
    "ParsedURL",
    "Platform",
    "ProcessingResult",
    "ProcessingStatus",
    "PLATFORM_STRATEGIES",
    "PlatformStrategy",
    "get_strategy",
]
