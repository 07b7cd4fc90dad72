# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Scope redaction of contact cards for federation peers.

Every property annotated ``X-NC-SCOPE=v2-local`` is dropped and the
remaining card is validated again. Users can mark mandatory properties
(FN, N) as local-only; such a card no longer validates once redacted and
must then be treated as if it did not exist for the peer.

Usage::

    result = redact(record)
    if result.valid:
        return result.record
    # result.errors explains why the card is withheld
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.models import ContactRecord
from .scope import SCOPE_PARAMETER, is_local_only
from .vcard import CardFormatError, CardProperty, VCard, read_card, validate_card

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RedactionResult:
    """Outcome of redacting one card.

    Attributes:
        record: The redacted record. None when the card is invalid.
        errors: Why the redacted card cannot be disclosed. Empty on success.
    """

    record: ContactRecord | None = None
    errors: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return self.record is not None

    @classmethod
    def ok(cls, record: ContactRecord) -> RedactionResult:
        return cls(record=record)

    @classmethod
    def invalid(cls, errors: list[str] | tuple[str, ...]) -> RedactionResult:
        return cls(record=None, errors=tuple(errors) or ("invalid card",))


def _local_only(prop: CardProperty) -> bool:
    return is_local_only(prop.param(SCOPE_PARAMETER))


def strip_local_properties(card: VCard) -> VCard:
    """Return a copy of ``card`` without local-only properties, order kept."""
    return card.without(_local_only)


def redact(record: ContactRecord) -> RedactionResult:
    """Redact a stored card for disclosure to a federation peer.

    ``id`` and ``acl`` of the record are left untouched; only the card
    data is replaced.
    """
    try:
        card = read_card(record.raw_data)
    except CardFormatError as e:
        logger.warning(f"Stored card {record.id} could not be parsed: {e.message}")
        return RedactionResult.invalid([e.message])

    redacted = strip_local_properties(card)
    errors = validate_card(redacted)
    if errors:
        return RedactionResult.invalid(errors)

    removed = len(card.properties) - len(redacted.properties)
    if removed:
        logger.debug(f"Removed {removed} local-only properties from card {record.id}")
    return RedactionResult.ok(record.with_data(redacted.to_bytes()))
