"""cardfed privacy - property scopes and redaction of cards for peers."""

from .redaction import RedactionResult, redact, strip_local_properties
from .scope import (
    SCOPE_FEDERATED,
    SCOPE_LOCAL,
    SCOPE_PARAMETER,
    SCOPE_PRIVATE,
    SCOPE_PUBLISHED,
    Scope,
    is_local_only,
)
from .vcard import CardFormatError, CardProperty, VCard, read_card, validate_card

__all__ = [
    # Redaction
    "RedactionResult",
    "redact",
    "strip_local_properties",
    # Scopes
    "SCOPE_FEDERATED",
    "SCOPE_LOCAL",
    "SCOPE_PARAMETER",
    "SCOPE_PRIVATE",
    "SCOPE_PUBLISHED",
    "Scope",
    "is_local_only",
    # Cards
    "CardFormatError",
    "CardProperty",
    "VCard",
    "read_card",
    "validate_card",
]
