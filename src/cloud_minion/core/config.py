"""
Configuration management for Cloud Minion
"""

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

from dotenv import load_dotenv

T = TypeVar("T")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # default: <data dir>/cloud-minion.log
    max_file_size_mb: int = 10
    backup_count: int = 5
    console_output: bool = False  # Also log to stderr


@dataclass
class SoundCloudConfig:
    """Configuration for SoundCloud provider integration."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = "http://localhost:8080/callback"
    page_size: int = 50  # Items per collection page
    request_timeout: int = 30  # seconds

    def validate(self) -> None:
        """Validate SoundCloud configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not 1 <= self.page_size <= 200:
            raise ValueError(f"page_size must be between 1 and 200, got {self.page_size}")
        if self.request_timeout <= 0:
            raise ValueError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )


@dataclass
class Config:
    """Main configuration object."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    soundcloud: SoundCloudConfig = field(default_factory=SoundCloudConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "cloud-minion"


def get_data_dir() -> Path:
    """Get the data directory path (tokens, logs)."""
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "cloud-minion"


def _find_project_config() -> Optional[Path]:
    """config.toml next to pyproject.toml, when running from a checkout."""
    here = Path(__file__).resolve().parent
    for parent in [here, *here.parents]:
        if (parent / "pyproject.toml").exists():
            candidate = parent / "config.toml"
            return candidate if candidate.exists() else None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Lookup order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/cloud-minion (or ~/.config/cloud-minion)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Cloud Minion Configuration

[logging]
# DEBUG, INFO, WARNING, ERROR, CRITICAL
level = "INFO"

# Custom log file path (default: ~/.local/share/cloud-minion/cloud-minion.log)
# log_file = "/path/to/cloud-minion.log"

# Rotate the log file at this size, keeping this many old files
max_file_size_mb = 10
backup_count = 5

# Also write logs to stderr
console_output = false

[soundcloud]
# Register an app at https://soundcloud.com/you/apps/new, then set the
# credentials here or via SOUNDCLOUD_CLIENT_ID / SOUNDCLOUD_CLIENT_SECRET
# client_id = "your-client-id-here"
# client_secret = "your-client-secret-here"

# Must match the redirect URI registered for the app
redirect_uri = "http://localhost:8080/callback"

# Items requested per collection page (1-200)
page_size = 50

# HTTP request timeout in seconds
request_timeout = 30
""".strip()


def _section(cls: Type[T], data: Dict[str, Any]) -> T:
    """Build a config dataclass from a TOML table, ignoring unknown keys."""
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - SOUNDCLOUD_CLIENT_ID
    - SOUNDCLOUD_CLIENT_SECRET
    """
    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()
    config = Config()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(create_default_config(), encoding="utf-8")
        print(f"Created default configuration at: {config_path}")
        toml_data: Dict[str, Any] = {}
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            print(f"Warning: Could not parse {config_path}: {e}")
            print("Using default configuration.")
            toml_data = {}

    if "logging" in toml_data:
        config.logging = _section(LoggingConfig, toml_data["logging"])
        config.logging.level = config.logging.level.upper()
        if config.logging.log_file:
            config.logging.log_file = str(Path(config.logging.log_file).expanduser())

    if "soundcloud" in toml_data:
        config.soundcloud = _section(SoundCloudConfig, toml_data["soundcloud"])
        try:
            config.soundcloud.validate()
        except (TypeError, ValueError) as e:
            print(f"Warning: Invalid SoundCloud configuration: {e}")
            print("Using default paging and timeout values.")
            config.soundcloud.page_size = SoundCloudConfig.page_size
            config.soundcloud.request_timeout = SoundCloudConfig.request_timeout

    # Credentials from the environment win over the file
    client_id = os.environ.get("SOUNDCLOUD_CLIENT_ID")
    client_secret = os.environ.get("SOUNDCLOUD_CLIENT_SECRET")
    if client_id:
        config.soundcloud.client_id = client_id
    if client_secret:
        config.soundcloud.client_secret = client_secret

    return config


def get_log_file(config: Config) -> Path:
    """Resolve the log file path from config (default under the data dir)."""
    if config.logging.log_file:
        return Path(config.logging.log_file)
    return get_data_dir() / "cloud-minion.log"
