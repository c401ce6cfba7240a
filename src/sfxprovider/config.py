"""
Provider configuration for sfxprovider.

Uses Pydantic BaseSettings for environment variable integration
and validation.

Configuration sources (in order of precedence):
1. Explicit constructor arguments
2. Environment variables (SFX_*)
3. .env file
4. Default values

There is no global configuration instance. Build one with ``load_config()``
and hand it to a ``ClientContext`` that is passed into every resource
operation.

Example:
    from sfxprovider.config import load_config

    config = load_config()
    print(config.api_url)  # From SFX_API_URL or default

    # Override at runtime
    config = load_config(api_url="https://api.eu0.signalfx.com")
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.signalfx.com"

# Default timeout for a single API round trip
HTTP_CLIENT_TIMEOUT_S = 30.0


class ProviderConfig(BaseSettings):
    """
    Configuration for the SignalFx provider.

    All settings can be overridden via environment variables
    prefixed with SFX_.

    Example:
        export SFX_AUTH_TOKEN=abc123
        export SFX_API_URL=https://api.us1.signalfx.com
        export SFX_LOG_LEVEL=debug
    """

    model_config = SettingsConfigDict(
        env_prefix="SFX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API access
    auth_token: Optional[str] = Field(
        default=None,
        description="Organization access token sent as X-SF-Token",
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="Base URL of the SignalFx REST API",
    )
    timeout_seconds: float = Field(
        default=HTTP_CLIENT_TIMEOUT_S,
        ge=1,
        description="Timeout for each API request",
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level for the provider",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format (json for log shippers, text for console)",
    )

    # Tracked state
    state_file: str = Field(
        default="./sfx-state.json",
        description="JSON file holding tracked resource state",
    )

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the API URL so paths can be appended directly."""
        return v.rstrip("/")

    @field_validator("state_file")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ and environment variables in paths."""
        return os.path.expanduser(os.path.expandvars(v))

    def get_state_path(self) -> Path:
        """Get the tracked state file path."""
        return Path(self.state_file)


def load_config(**overrides) -> ProviderConfig:
    """
    Build a provider configuration.

    Args:
        **overrides: Override any config values. ``None`` values are ignored
            so CLI options that were not given fall through to the environment.

    Returns:
        ProviderConfig instance
    """
    values = {k: v for k, v in overrides.items() if v is not None}
    return ProviderConfig(**values)
