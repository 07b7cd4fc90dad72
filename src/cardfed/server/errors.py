# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Standardized error responses for address book endpoints.

Error body format:
{
    "success": false,
    "error": {
        "code": "ERROR_CODE",
        "message": "Human readable message"
    }
}
"""

from __future__ import annotations

import logging

from starlette.responses import JSONResponse

from ..core.exceptions import (
    CardFedException,
    ForbiddenError,
    NotFoundError,
    UnsupportedLimitOnInitialSyncError,
    ValidationException,
)

logger = logging.getLogger(__name__)

# =============================================================================
# STANDARD ERROR CODES
# =============================================================================

VALIDATION_INVALID_VALUE = "VALIDATION_INVALID_VALUE"
FORBIDDEN_CARD = "FORBIDDEN_CARD"
NOT_FOUND_CARD = "NOT_FOUND_CARD"
SYNC_LIMIT_ON_INITIAL_SYNC = "SYNC_LIMIT_ON_INITIAL_SYNC"
INTERNAL_ERROR = "INTERNAL_ERROR"

# A limit on an initial sync maps to 507 Insufficient Storage
_STATUS_BY_EXCEPTION: list[tuple[type[CardFedException], int, str]] = [
    (NotFoundError, 404, NOT_FOUND_CARD),
    (ForbiddenError, 403, FORBIDDEN_CARD),
    (UnsupportedLimitOnInitialSyncError, 507, SYNC_LIMIT_ON_INITIAL_SYNC),
    (ValidationException, 400, VALIDATION_INVALID_VALUE),
]


def error_response(
    code: str,
    message: str,
    status_code: int = 400,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        {
            "success": False,
            "error": {
                "code": code,
                "message": message,
            },
        },
        status_code=status_code,
    )


def exception_response(exc: CardFedException) -> JSONResponse:
    """Map a cardfed exception onto its HTTP error response.

    Unknown exception types become a 500 without their message.
    """
    for exc_type, status_code, code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return error_response(code, exc.message, status_code=status_code)

    logger.error(f"Unhandled {type(exc).__name__}: {exc}")
    return error_response(INTERNAL_ERROR, "Internal server error", status_code=500)
