"""Runtime settings — env-driven.

Centralized settings using pydantic-settings.  Reads from a .env file and
AURSYNC_* environment variables.  Per-package options live in
``config.json`` (see ``aursync.models.config``); these settings cover the
process as a whole.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from aursync.bridge.github import RequestContext


class SyncSettings(BaseSettings):
    """Process-wide settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export AURSYNC_LOG_LEVEL=DEBUG
        export AURSYNC_TOKEN=ghp_xxx
        export AURSYNC_MAX_WORKERS=2

    Or via .env file::

        AURSYNC_CONFIG_PATH=/etc/aursync/config.json
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AURSYNC_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Multi-package configuration file
    config_path: Path = Path("config.json")

    # GitHub access; a token in config.json takes precedence
    token: str = ""
    api_base: str = "https://api.github.com"
    user_agent: str = "AUR updates"
    http_timeout: float = 30.0
    http_retries: int = 2

    # Parallelism
    max_workers: int = 4       # packages processed at once
    download_workers: int = 4  # checksum downloads per package

    def request_context(self, token: str | None = None) -> RequestContext:
        """Build the GitHub request context, preferring an explicit token."""
        return RequestContext(
            token=token or self.token or None,
            api_base=self.api_base,
            user_agent=self.user_agent,
            timeout=self.http_timeout,
            retries=self.http_retries,
        )


# Module-level singleton: `from aursync.config import settings`
settings = SyncSettings()
