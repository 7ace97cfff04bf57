"""Configuration management for the rating sync application."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from config directory or project root
config_env = Path(__file__).parent.parent.parent / "config" / ".env"
if config_env.exists():
    load_dotenv(config_env)
else:
    load_dotenv()

DEFAULT_SECTION_KEY = "3"


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class SyncOptions:
    """Fully resolved settings for one sync run."""

    plex_base_url: str
    plex_auth_token: str
    section_key: str = DEFAULT_SECTION_KEY
    dry_run: bool = False
    override_existing: bool = False
    dry_run_delay: float = 2.0
    override_delay: float = 5.0


class Config:
    """Application configuration."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Plex API settings
        self.plex_base_url = os.getenv("PLEX_API_URL", "")
        self.plex_auth_token = os.getenv("PLEX_API_TOKEN", "")
        self.section_key = os.getenv("RATESYNC_SECTION_KEY", DEFAULT_SECTION_KEY)

        # Pauses that give the operator a chance to cancel
        self.dry_run_delay = self._get_float("RATESYNC_DRY_RUN_DELAY", 2.0)
        self.override_delay = self._get_float("RATESYNC_OVERRIDE_DELAY", 5.0)

    @staticmethod
    def _get_float(name: str, default: float) -> float:
        raw = os.getenv(name)
        if raw is None or raw == "":
            return default
        try:
            value = float(raw)
        except ValueError as e:
            raise ConfigError(f"{name} must be a number, got {raw!r}") from e
        if value < 0:
            raise ConfigError(f"{name} must not be negative, got {value}")
        return value

    def validate(self) -> None:
        """Ensure required settings are present.

        Raises:
            ConfigError: If a required environment variable is missing or empty
        """
        if not self.plex_auth_token:
            raise ConfigError("PLEX_API_TOKEN is not set")
        if not self.plex_base_url:
            raise ConfigError("PLEX_API_URL is not set")
        if not self.section_key:
            raise ConfigError("RATESYNC_SECTION_KEY is empty")

    def to_sync_options(
        self,
        dry_run: bool = False,
        override_existing: bool = False,
        section_key: str = "",
    ) -> SyncOptions:
        """Validate and combine with run flags into SyncOptions."""
        self.validate()
        return SyncOptions(
            plex_base_url=self.plex_base_url,
            plex_auth_token=self.plex_auth_token,
            section_key=section_key or self.section_key,
            dry_run=dry_run,
            override_existing=override_existing,
            dry_run_delay=self.dry_run_delay,
            override_delay=self.override_delay,
        )


def get_config() -> Config:
    """Get application configuration."""
    return Config()
