"""cardfed core - configuration, logging and the exception hierarchy."""

from .config import (
    AppConfig,
    CoreSettings,
    SettingsAppConfig,
    StaticAppConfig,
    clear_config_cache,
    get_config,
)
from .exceptions import (
    CardFedException,
    ConfigException,
    ForbiddenError,
    NotFoundError,
    UnsupportedLimitOnInitialSyncError,
    ValidationException,
)
from .models import (
    AclEntry,
    AddressBookInfo,
    ChangeSet,
    ContactRecord,
)
from .logging import (
    AccessLogger,
    access_logger,
    configure_logging,
    correlation_context,
)

__all__ = [
    # Config
    "AppConfig",
    "CoreSettings",
    "SettingsAppConfig",
    "StaticAppConfig",
    "clear_config_cache",
    "get_config",
    # Exceptions
    "CardFedException",
    "ConfigException",
    "ForbiddenError",
    "NotFoundError",
    "UnsupportedLimitOnInitialSyncError",
    "ValidationException",
    # Models
    "AclEntry",
    "AddressBookInfo",
    "ChangeSet",
    "ContactRecord",
    # Logging
    "AccessLogger",
    "access_logger",
    "configure_logging",
    "correlation_context",
]
