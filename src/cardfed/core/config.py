# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Core configuration - centralized config for the cardfed package.

All environment-based configuration should flow through this module.
This provides a single source of truth and consistent defaults.

Usage:
    from cardfed.core.config import get_config
    config = get_config()

    log_level = config.log_level

Feature flags that must take effect without a restart (the directory
enumeration switches) are not read from the cached instance. They go
through an ``AppConfig``, which is consulted on every call.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# App-config keys for directory enumeration (app "core")
ALLOW_ENUMERATION_KEY = "shareapi_allow_share_dialog_user_enumeration"
RESTRICT_TO_GROUP_KEY = "shareapi_restrict_user_enumeration_to_group"
RESTRICT_TO_PHONE_KEY = "shareapi_restrict_user_enumeration_to_phone"


class CoreSettings(BaseSettings):
    """Core configuration settings for cardfed.

    Settings can be configured via environment variables using the
    CARDFED_ prefix, or through a ``.env`` file.
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
        validation_alias="CARDFED_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="CARDFED_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="CARDFED_LOG_FILE",
    )

    # ==========================================================================
    # FEDERATION SETTINGS
    # ==========================================================================

    trusted_peers_path: str | None = Field(
        default=None,
        description="Path to the JSON file holding trusted peers and their shared secrets",
        validation_alias="CARDFED_TRUSTED_PEERS",
    )

    # ==========================================================================
    # DIRECTORY ENUMERATION SETTINGS ("yes" / "no", as stored in app config)
    # ==========================================================================

    shareapi_allow_share_dialog_user_enumeration: str = Field(
        default="yes",
        description="Allow the full system address book to be listed",
        validation_alias="CARDFED_SHAREAPI_ALLOW_SHARE_DIALOG_USER_ENUMERATION",
    )
    shareapi_restrict_user_enumeration_to_group: str = Field(
        default="no",
        description="Restrict enumeration to users sharing a group",
        validation_alias="CARDFED_SHAREAPI_RESTRICT_USER_ENUMERATION_TO_GROUP",
    )
    shareapi_restrict_user_enumeration_to_phone: str = Field(
        default="no",
        description="Restrict enumeration to users with a known phone number",
        validation_alias="CARDFED_SHAREAPI_RESTRICT_USER_ENUMERATION_TO_PHONE",
    )


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Get the global configuration instance.

    Returns:
        The singleton CoreSettings instance.
    """
    global _config
    if _config is None:
        _config = CoreSettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None


# ==========================================================================
# APP CONFIG PROTOCOL (feature flags, read on every call)
# ==========================================================================


@runtime_checkable
class AppConfig(Protocol):
    """Read access to per-app configuration values.

    Values are strings; boolean flags use "yes" / "no".
    """

    def get_app_value(self, app: str, key: str, default: str = "") -> str:
        """Return the value stored for ``key`` of ``app``, or ``default``."""
        ...


@dataclass
class StaticAppConfig:
    """AppConfig backed by a plain mapping of ``(app, key) -> value``.

    Useful for embedding and tests; mutate ``values`` to flip a flag.
    """

    values: dict[tuple[str, str], str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, app: str, values: Mapping[str, str]) -> StaticAppConfig:
        return cls({(app, key): value for key, value in values.items()})

    def set_app_value(self, app: str, key: str, value: str) -> None:
        self.values[(app, key)] = value

    def get_app_value(self, app: str, key: str, default: str = "") -> str:
        return self.values.get((app, key), default)


class SettingsAppConfig:
    """AppConfig answering app "core" from the environment.

    A fresh settings object is built for every lookup, so changes to the
    environment (or ``.env``) are visible on the next call.
    """

    def __init__(self, settings_factory: Callable[[], CoreSettings] = CoreSettings):
        self._settings_factory = settings_factory

    def get_app_value(self, app: str, key: str, default: str = "") -> str:
        if app != "core":
            return default
        value = getattr(self._settings_factory(), key, None)
        if value is None:
            return default
        return str(value)
