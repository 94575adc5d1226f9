"""Configuration management for mediascribe.

Handles TOML configuration loading from local and global paths,
with environment variable precedence for the OpenAI API key.
"""

from __future__ import annotations

import os
import shlex
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mediascribe.core.errors import ConfigError

# Configuration file paths
LOCAL_CONFIG_PATH = Path(".mediascribe/config")
GLOBAL_CONFIG_PATH = Path.home() / ".mediascribe" / "config"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "api": {
        "openai_key": "",
    },
    "transcription": {
        "model": "whisper-1",
        "max_file_size_mb": 25,
    },
    "tools": {
        "ytdlp_command": "",
    },
    "timeouts": {
        "caption_list": 30,
        "caption_download": 60,
        "audio_download": 300,
        "metadata": 60,
    },
    "storage": {
        "temp_dir": "",
    },
}

TIMEOUT_KEYS = ("caption_list", "caption_download", "audio_download", "metadata")


@dataclass
class ApiConfig:
    """API configuration settings."""

    openai_key: str = ""


@dataclass
class TranscriptionConfig:
    """Hosted speech-to-text settings."""

    model: str = "whisper-1"
    max_file_size_mb: float = 25


@dataclass
class ToolsConfig:
    """External tool settings."""

    ytdlp_command: str = ""


@dataclass
class TimeoutConfig:
    """Timeouts for external process calls, in seconds."""

    caption_list: float = 30
    caption_download: float = 60
    audio_download: float = 300
    metadata: float = 60


@dataclass
class StorageConfig:
    """Storage configuration settings."""

    temp_dir: str = ""


@dataclass
class Config:
    """Main configuration container.

    Holds all configuration settings for mediascribe, loaded from
    local and global config files with environment variable overrides.
    """

    api: ApiConfig = field(default_factory=ApiConfig)
    transcription: TranscriptionConfig = field(default_factory=TranscriptionConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    def get_openai_key(self) -> str:
        """Get the OpenAI API key with environment variable precedence.

        Returns:
            The API key from OPENAI_API_KEY env var if set,
            otherwise the value from config file.
        """
        env_key = os.environ.get("OPENAI_API_KEY", "")
        if env_key:
            return env_key
        return self.api.openai_key

    def get_ytdlp_command(self) -> list[str] | None:
        """Get the configured yt-dlp command as an argument vector.

        Returns:
            The split command, or None to auto-detect.
        """
        if not self.tools.ytdlp_command.strip():
            return None
        return shlex.split(self.tools.ytdlp_command)

    def get_temp_dir(self) -> Path | None:
        """Get the temp directory root, or None for the system default."""
        if not self.storage.temp_dir:
            return None
        return Path(self.storage.temp_dir)


def _generate_default_config_toml() -> str:
    """Generate default configuration as TOML string.

    Returns:
        TOML-formatted string with default configuration values.
    """
    return """# mediascribe Configuration File

[api]
# OpenAI API key for hosted speech-to-text
# Environment variable OPENAI_API_KEY takes precedence
openai_key = ""

[transcription]
# Hosted transcription model
model = "whisper-1"
# Largest audio file accepted by the transcription service, in MB
max_file_size_mb = 25

[tools]
# Command used to run yt-dlp; empty means yt-dlp on PATH, else python -m yt_dlp
ytdlp_command = ""

[timeouts]
# Seconds before an external tool call is abandoned
caption_list = 30
caption_download = 60
audio_download = 300
metadata = 60

[storage]
# Root for temporary download directories; empty means the system default
temp_dir = ""
"""


def _ensure_local_config_exists(local_path: Path) -> None:
    """Create local config file with defaults if it doesn't exist.

    Args:
        local_path: Path to the local config file.
    """
    if not local_path.exists():
        local_path.parent.mkdir(parents=True, exist_ok=True)
        local_path.write_text(_generate_default_config_toml())


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load and parse a TOML configuration file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text()
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary.
        override: Dictionary with values that override base.

    Returns:
        Merged dictionary with override values taking precedence.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Args:
        config_dict: Configuration dictionary to validate.

    Raises:
        ConfigError: If configuration values are invalid.
    """
    for section, key in [
        ("api", "openai_key"),
        ("transcription", "model"),
        ("tools", "ytdlp_command"),
        ("storage", "temp_dir"),
    ]:
        value = config_dict.get(section, {}).get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{section}.{key} must be a string, got {type(value).__name__}")

    max_size = config_dict.get("transcription", {}).get("max_file_size_mb")
    if max_size is not None and (not _is_number(max_size) or max_size <= 0):
        raise ConfigError(
            f"transcription.max_file_size_mb must be a positive number, got {max_size!r}"
        )

    timeouts = config_dict.get("timeouts", {})
    for key in TIMEOUT_KEYS:
        value = timeouts.get(key)
        if value is not None and (not _is_number(value) or value <= 0):
            raise ConfigError(f"timeouts.{key} must be a positive number, got {value!r}")


def _dict_to_config(config_dict: dict[str, Any]) -> Config:
    """Convert configuration dictionary to Config dataclass.

    Args:
        config_dict: Configuration dictionary.

    Returns:
        Config object with values from dictionary.
    """
    api_dict = config_dict.get("api", {})
    transcription_dict = config_dict.get("transcription", {})
    tools_dict = config_dict.get("tools", {})
    timeouts_dict = config_dict.get("timeouts", {})
    storage_dict = config_dict.get("storage", {})

    return Config(
        api=ApiConfig(
            openai_key=api_dict.get("openai_key", ""),
        ),
        transcription=TranscriptionConfig(
            model=transcription_dict.get("model", "whisper-1"),
            max_file_size_mb=transcription_dict.get("max_file_size_mb", 25),
        ),
        tools=ToolsConfig(
            ytdlp_command=tools_dict.get("ytdlp_command", ""),
        ),
        timeouts=TimeoutConfig(
            caption_list=timeouts_dict.get("caption_list", 30),
            caption_download=timeouts_dict.get("caption_download", 60),
            audio_download=timeouts_dict.get("audio_download", 300),
            metadata=timeouts_dict.get("metadata", 60),
        ),
        storage=StorageConfig(
            temp_dir=storage_dict.get("temp_dir", ""),
        ),
    )


def load_config(
    local_path: Path | None = None,
    global_path: Path | None = None,
    auto_create_local: bool = True,
) -> Config:
    """Load configuration from local and global config files.

    Configuration priority (highest to lowest):
    1. Local config file (.mediascribe/config in current directory)
    2. Global config file ($HOME/.mediascribe/config)
    3. Default values

    If no configuration exists, creates local config with defaults.
    Global config is never auto-created.

    Environment variable OPENAI_API_KEY always takes precedence
    over config file values when accessed via Config.get_openai_key().

    Args:
        local_path: Override path for local config file.
        global_path: Override path for global config file.
        auto_create_local: If True, create local config with defaults if no config exists.

    Returns:
        Config object with merged configuration values.

    Raises:
        ConfigError: If configuration files are invalid.
    """
    local_path = local_path or LOCAL_CONFIG_PATH
    global_path = global_path or GLOBAL_CONFIG_PATH

    merged_config = {section: values.copy() for section, values in DEFAULT_CONFIG.items()}

    global_config = _load_toml_file(global_path)
    if global_config:
        merged_config = _deep_merge(merged_config, global_config)

    local_config = _load_toml_file(local_path)
    if local_config:
        merged_config = _deep_merge(merged_config, local_config)

    if auto_create_local and not local_config and not global_config:
        _ensure_local_config_exists(local_path)

    _validate_config(merged_config)

    return _dict_to_config(merged_config)


def get_config() -> Config:
    """Get the application configuration using default paths.

    Returns:
        Config object with merged configuration values.

    Raises:
        ConfigError: If configuration files are invalid.
    """
    return load_config()
