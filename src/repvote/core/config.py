"""Core configuration - centralized config for the repvote package.

All environment-based configuration should flow through this module.
This provides a single source of truth and consistent defaults.

Usage:
    from repvote.core.config import get_config
    config = get_config()

    # Access settings
    backend = config.store_backend
    log_level = config.log_level
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORE_BACKENDS = ("memory", "file")


class RepvoteSettings(BaseSettings):
    """Configuration settings for repvote.

    Settings can be configured via environment variables with the
    REPVOTE_ prefix, or through a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="REPVOTE_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="REPVOTE_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="REPVOTE_LOG_FILE",
    )
    call_log_level: str = Field(
        default="WARNING",
        description="Level of the repvote.calls logger. Per-call lines are logged at DEBUG, so set DEBUG to see every contract call.",
        validation_alias="REPVOTE_CALL_LOG_LEVEL",
    )

    # ==========================================================================
    # STORE SETTINGS
    # ==========================================================================

    store_backend: str = Field(
        default="memory",
        description="Key-value store backend: 'memory' or 'file'",
        validation_alias="REPVOTE_STORE_BACKEND",
    )
    store_path: str | None = Field(
        default=None,
        description="Path of the JSON store file (required for the 'file' backend)",
        validation_alias="REPVOTE_STORE_PATH",
    )

    # ==========================================================================
    # REGISTRY POLICY SETTINGS
    # ==========================================================================

    prune_on_remove: bool = Field(
        default=True,
        description="Drop removed voters from the enumeration list. When false, removed voters leave stale entries and listing fails.",
        validation_alias="REPVOTE_PRUNE_ON_REMOVE",
    )
    allow_reregistration: bool = Field(
        default=True,
        description="Allow registering an identity that is already registered (overwrites its record).",
        validation_alias="REPVOTE_ALLOW_REREGISTRATION",
    )

    @field_validator("store_backend")
    @classmethod
    def _normalize_backend(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in STORE_BACKENDS:
            raise ValueError(f"store_backend must be one of {', '.join(STORE_BACKENDS)}")
        return value


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: RepvoteSettings | None = None


def get_config() -> RepvoteSettings:
    """Get the global configuration instance.

    Returns:
        The singleton RepvoteSettings instance.
    """
    global _config
    if _config is None:
        _config = RepvoteSettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
