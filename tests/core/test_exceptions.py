"""Tests for cardfed.core.exceptions module."""

from __future__ import annotations

import pytest

from cardfed.core.exceptions import (
    CardFedException,
    ConfigException,
    ForbiddenError,
    NotFoundError,
    UnsupportedLimitOnInitialSyncError,
    ValidationException,
)

# ============================================================================
# CardFedException Tests
# ============================================================================


class TestCardFedException:
    """Tests for base CardFedException."""

    def test_create_with_message(self):
        """Create exception with just message."""
        exc = CardFedException("Something went wrong")
        assert str(exc) == "Something went wrong"
        assert exc.message == "Something went wrong"
        assert exc.details == {}

    def test_to_dict(self):
        """to_dict should use the concrete class name."""
        exc = ForbiddenError("nope", resource_id="a.vcf")
        d = exc.to_dict()
        assert d["error"] == "ForbiddenError"
        assert d["message"] == "nope"
        assert d["details"] == {"resource_id": "a.vcf"}

    @pytest.mark.parametrize(
        "exc",
        [
            ValidationException("bad"),
            ConfigException("bad"),
            NotFoundError("Card", "a.vcf"),
            ForbiddenError(),
            UnsupportedLimitOnInitialSyncError(),
        ],
    )
    def test_all_inherit_from_base(self, exc):
        assert isinstance(exc, CardFedException)


class TestNotFoundError:
    def test_message_and_details(self):
        exc = NotFoundError("Card", "alice.vcf")
        assert exc.message == "Card not found: alice.vcf"
        assert exc.resource_type == "Card"
        assert exc.resource_id == "alice.vcf"
        assert exc.details == {"resource_type": "Card", "resource_id": "alice.vcf"}


class TestForbiddenError:
    def test_defaults(self):
        exc = ForbiddenError()
        assert exc.message == "Forbidden"
        assert exc.resource_id is None
        assert exc.details == {}

    def test_is_not_a_not_found(self):
        assert not isinstance(ForbiddenError(), NotFoundError)


class TestUnsupportedLimitOnInitialSyncError:
    def test_records_limit(self):
        exc = UnsupportedLimitOnInitialSyncError(10)
        assert exc.limit == 10
        assert exc.details == {"limit": 10}

    def test_without_limit(self):
        exc = UnsupportedLimitOnInitialSyncError()
        assert exc.details == {}


class TestValidationException:
    def test_field_and_value(self):
        exc = ValidationException("Sync limit must not be negative", field="limit", value=-1)
        assert exc.field == "limit"
        assert exc.details == {"field": "limit", "value": "-1"}


class TestConfigException:
    def test_missing_vars(self):
        exc = ConfigException("Missing config", missing_vars=["CARDFED_TRUSTED_PEERS"])
        assert exc.missing_vars == ["CARDFED_TRUSTED_PEERS"]
        assert exc.details == {"missing_vars": ["CARDFED_TRUSTED_PEERS"]}

    def test_missing_vars_default(self):
        assert ConfigException("x").missing_vars == []
