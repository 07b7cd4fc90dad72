"""Tests for error response helpers."""

from __future__ import annotations

import json

import pytest

from cardfed.core.exceptions import (
    CardFedException,
    ConfigException,
    ForbiddenError,
    NotFoundError,
    UnsupportedLimitOnInitialSyncError,
    ValidationException,
)
from cardfed.server.errors import (
    FORBIDDEN_CARD,
    INTERNAL_ERROR,
    NOT_FOUND_CARD,
    SYNC_LIMIT_ON_INITIAL_SYNC,
    VALIDATION_INVALID_VALUE,
    error_response,
    exception_response,
)


def _body(response) -> dict:
    return json.loads(response.body.decode())


class TestErrorResponse:
    def test_format(self):
        response = error_response("SOME_CODE", "Something went wrong", status_code=418)
        assert response.status_code == 418
        assert _body(response) == {
            "success": False,
            "error": {"code": "SOME_CODE", "message": "Something went wrong"},
        }

    def test_default_status(self):
        assert error_response("X", "y").status_code == 400


class TestExceptionResponse:
    @pytest.mark.parametrize(
        "exc,status,code",
        [
            (NotFoundError("Card", "a.vcf"), 404, NOT_FOUND_CARD),
            (ForbiddenError("Card a.vcf cannot be shared", resource_id="a.vcf"), 403, FORBIDDEN_CARD),
            (UnsupportedLimitOnInitialSyncError(10), 507, SYNC_LIMIT_ON_INITIAL_SYNC),
            (ValidationException("bad limit", field="limit"), 400, VALIDATION_INVALID_VALUE),
        ],
    )
    def test_mapping(self, exc, status, code):
        response = exception_response(exc)
        body = _body(response)
        assert response.status_code == status
        assert body["error"]["code"] == code
        assert body["error"]["message"] == exc.message

    @pytest.mark.parametrize("exc", [CardFedException("boom"), ConfigException("peers.json is broken")])
    def test_unknown_exception_hides_message(self, exc):
        response = exception_response(exc)
        body = _body(response)
        assert response.status_code == 500
        assert body["error"] == {"code": INTERNAL_ERROR, "message": "Internal server error"}
