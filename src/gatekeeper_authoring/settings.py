"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the Gatekeeper authoring REST API and MCP server.

    Values are read from environment variables prefixed ``GATEKEEPER_`` and
    from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="GATEKEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # takes precedence over api_server_port when set

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (``port`` takes precedence)."""
        return self.port if self.port is not None else self.api_server_port

    # Request bodies carry Rego and resource YAML
    max_request_body_bytes: int = 1 * 1024 * 1024

    # MCP
    mcp_transport: Literal["stdio", "http", "sse"] = "stdio"
    mcp_server_host: str = "localhost"
    mcp_server_port: int = 9000
