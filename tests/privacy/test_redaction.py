"""Tests for cardfed.privacy.redaction - removing local-only properties."""

from __future__ import annotations

import pytest

from cardfed.core.models import AclEntry, ContactRecord
from cardfed.privacy.redaction import RedactionResult, redact, strip_local_properties
from cardfed.privacy.scope import SCOPE_LOCAL, SCOPE_PARAMETER, Scope, is_local_only
from cardfed.privacy.vcard import read_card

ACL = (AclEntry("{DAV:}read", "principals/system/system"),)


def _record(data: bytes, uri: str = "alice.vcf") -> ContactRecord:
    return ContactRecord(id=uri, raw_data=data, acl=ACL, etag='"e"')


def _local_props(record: ContactRecord) -> list[str]:
    card = read_card(record.raw_data)
    return [p.name for p in card.properties if p.param(SCOPE_PARAMETER) == SCOPE_LOCAL]


class TestScope:
    def test_only_local_is_local_only(self):
        assert is_local_only("v2-local")
        for scope in (Scope.PRIVATE, Scope.FEDERATED, Scope.PUBLISHED):
            assert not is_local_only(scope.value)
        assert not is_local_only(None)
        assert not is_local_only("V2-LOCAL")


class TestRedactionResult:
    def test_ok(self):
        record = _record(b"")
        result = RedactionResult.ok(record)
        assert result.valid
        assert result.record is record
        assert result.errors == ()

    def test_invalid(self):
        result = RedactionResult.invalid(["FN is required"])
        assert not result.valid
        assert result.record is None
        assert result.errors == ("FN is required",)

    def test_invalid_always_has_a_reason(self):
        assert RedactionResult.invalid([]).errors == ("invalid card",)


class TestRedact:
    def test_removes_local_properties_keeps_others_in_order(self, vcard):
        record = _record(
            vcard(
                "FN:Alice",
                "N:Doe;Alice;;;",
                "EMAIL;X-NC-SCOPE=v2-local:alice@internal.example.com",
                "TEL;X-NC-SCOPE=v2-federated:+49 1",
                "ADR;X-NC-SCOPE=v2-local:;;Street;Town;;;",
                "URL;X-NC-SCOPE=v2-published:https://alice.example.com",
                "X-SOCIALPROFILE;X-NC-SCOPE=v2-private:@alice",
                "NOTE:no scope",
            )
        )

        result = redact(record)

        assert result.valid
        card = read_card(result.record.raw_data)
        assert card.names() == ["VERSION", "FN", "N", "TEL", "URL", "X-SOCIALPROFILE", "NOTE"]
        assert _local_props(result.record) == []

    def test_keeps_record_identity_and_acl(self, vcard):
        record = _record(vcard("FN:Alice", "N:Doe;Alice;;;", "EMAIL;X-NC-SCOPE=v2-local:a@x"))
        redacted = redact(record).record

        assert redacted.id == record.id
        assert redacted.acl == record.acl
        assert redacted.etag == record.etag
        assert redacted.size == len(redacted.raw_data)

    def test_exact_output(self, vcard):
        record = _record(vcard("FN:Bob", "N:Bob;;;;", "EMAIL;X-NC-SCOPE=v2-local:bob@example.com"))
        assert redact(record).record.raw_data == b"BEGIN:VCARD\r\nVERSION:3.0\r\nFN:Bob\r\nN:Bob;;;;\r\nEND:VCARD\r\n"

    def test_card_without_scopes_is_unchanged_in_content(self, vcard):
        record = _record(vcard("FN:Alice", "N:Doe;Alice;;;", "EMAIL:a@example.com"))
        result = redact(record)
        assert read_card(result.record.raw_data) == read_card(record.raw_data)

    def test_local_fn_makes_card_invalid(self, vcard):
        """A mandatory property scoped local-only leaves an invalid card."""
        record = _record(vcard("FN;X-NC-SCOPE=v2-local:Alice", "N:Doe;Alice;;;", "EMAIL:a@example.com"))
        result = redact(record)
        assert not result.valid
        assert "FN is required" in result.errors

    def test_local_n_invalid_for_v3(self, vcard):
        result = redact(_record(vcard("FN:Alice", "N;X-NC-SCOPE=v2-local:Doe;Alice;;;")))
        assert result.errors == ("N is required for vCard 3.0",)

    def test_local_n_fine_for_v4(self, vcard):
        result = redact(_record(vcard("FN:Alice", "N;X-NC-SCOPE=v2-local:Doe;Alice;;;", version="4.0")))
        assert result.valid
        assert read_card(result.record.raw_data).names() == ["VERSION", "FN"]

    def test_unparseable_card_is_invalid(self):
        result = redact(_record(b"not a card"))
        assert not result.valid
        assert result.errors

    def test_quoted_printable_values_stay_encoded(self, vcard):
        record = _record(
            vcard(
                "FN:Bob",
                "N:Bob;;;;",
                "NOTE;ENCODING=QUOTED-PRINTABLE:line1=0D=0Aline2",
                "EMAIL;X-NC-SCOPE=v2-local:bob@example.com",
                version="2.1",
            )
        )

        result = redact(record)

        assert result.valid
        assert result.record.raw_data == (
            b"BEGIN:VCARD\r\nVERSION:2.1\r\nFN:Bob\r\nN:Bob;;;;\r\n"
            b"NOTE;ENCODING=QUOTED-PRINTABLE:line1=0D=0Aline2\r\nEND:VCARD\r\n"
        )
        assert read_card(result.record.raw_data).names() == ["VERSION", "FN", "N", "NOTE"]

    def test_does_not_modify_input(self, vcard):
        data = vcard("FN:Alice", "N:Doe;Alice;;;", "EMAIL;X-NC-SCOPE=v2-local:a@x")
        record = _record(data)
        redact(record)
        assert record.raw_data == data


class TestRedactionProperties:
    CARDS = [
        (("FN:A", "N:A;;;;"), "3.0"),
        (("FN:A", "N:A;;;;", "EMAIL;X-NC-SCOPE=v2-local:a@x", "TEL:1"), "3.0"),
        (("EMAIL;X-NC-SCOPE=v2-local:a@x", "FN:A", "TEL;X-NC-SCOPE=v2-local:2", "N:A;;;;", "NOTE;X-NC-SCOPE=v2-local:n"), "3.0"),
        (("FN;X-NC-SCOPE=v2-federated:A", "N;X-NC-SCOPE=v2-published:A;;;;", "ORG;X-NC-SCOPE=v2-local:Corp"), "3.0"),
        (
            (
                "FN:A",
                "N:A;;;;",
                "NOTE;ENCODING=QUOTED-PRINTABLE:line1=0D=0Aline2",
                "ADR;HOME;QUOTED-PRINTABLE;X-NC-SCOPE=v2-local:;;Stra=C3=9Fe 1;Town;;;",
            ),
            "2.1",
        ),
    ]

    @pytest.mark.parametrize("properties,version", CARDS)
    def test_no_local_property_survives(self, vcard, properties, version):
        result = redact(_record(vcard(*properties, version=version)))
        assert result.valid
        assert _local_props(result.record) == []

    @pytest.mark.parametrize("properties,version", CARDS)
    def test_idempotent(self, vcard, properties, version):
        once = redact(_record(vcard(*properties, version=version))).record
        twice = redact(once)
        assert twice.valid
        assert twice.record == once

    def test_strip_local_properties_is_pure(self, vcard):
        card = read_card(vcard("FN:A", "EMAIL;X-NC-SCOPE=v2-local:a@x"))
        stripped = strip_local_properties(card)
        assert stripped.names() == ["VERSION", "FN"]
        assert card.names() == ["VERSION", "FN", "EMAIL"]
