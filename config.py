"""
Runtime settings for the YouTube transcript MCP server.

Values are read from environment variables prefixed with
``YT_TRANSCRIPT_`` (for example ``YT_TRANSCRIPT_LOG_LEVEL=DEBUG``) or
from a ``.env`` file in the working directory.  Everything has a
sensible default so the server starts with no configuration at all.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/85.0.4183.83 Safari/537.36,gzip(gfe)"
)


class Settings(BaseSettings):
    # Server identity advertised during the MCP handshake
    SERVER_NAME: str = "youtube-transcript-mcp"

    # System settings
    LOG_LEVEL: str = "INFO"

    # Outbound HTTP used to reach YouTube
    REQUEST_TIMEOUT: float = 10.0
    USER_AGENT: str = DEFAULT_USER_AGENT
    ACCEPT_LANGUAGE: str = "en-US,en;q=0.9"

    model_config = SettingsConfigDict(
        env_prefix="YT_TRANSCRIPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
