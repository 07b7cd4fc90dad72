# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Exception hierarchy for cardfed.

Provides specific exception types for the signals the directory surfaces
to its callers, so transports can map them onto their own status codes.
"""

from __future__ import annotations

from typing import Any


class CardFedException(Exception):  # noqa: N818
    """Base exception for all cardfed errors.

    All cardfed-specific exceptions should inherit from this class.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CardFedException):
    """Exception for invalid caller input.

    Raised when:
    - A sync limit is negative
    - An address book descriptor is missing its id
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigException(CardFedException):
    """Exception for configuration errors.

    Raised when:
    - The trusted peer store file cannot be parsed
    - Required settings are missing
    """

    def __init__(self, message: str, missing_vars: list[str] | None = None):
        details = {}
        if missing_vars:
            details["missing_vars"] = missing_vars
        super().__init__(message, details)
        self.missing_vars = missing_vars or []


class NotFoundError(CardFedException):
    """The requested card does not exist in the address book."""

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} not found: {resource_id}"
        details = {
            "resource_type": resource_type,
            "resource_id": resource_id,
        }
        super().__init__(message, details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(CardFedException):
    """The card exists but its redacted form cannot be disclosed."""

    def __init__(self, message: str = "Forbidden", resource_id: str | None = None):
        details = {}
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message, details)
        self.resource_id = resource_id


class UnsupportedLimitOnInitialSyncError(CardFedException):
    """A result limit was requested together with an initial (tokenless) sync."""

    def __init__(self, limit: int | None = None):
        details = {}
        if limit is not None:
            details["limit"] = limit
        super().__init__("Support for a limit on the initial sync is not implemented", details)
        self.limit = limit
