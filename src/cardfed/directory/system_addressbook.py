# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""The system address book as seen by users and by federation peers.

Every server user has a card in the system address book. Two rules sit
on top of plain ``AddressBook`` access:

- Enumeration: the full listing is only served when the share dialog may
  enumerate users without group or phone restrictions.
- Federation: a trusted peer (``system`` user plus a registered shared
  secret) receives cards with local-only properties removed. A card that
  is no longer valid once redacted is withheld: single fetches fail,
  bulk fetches skip it and sync reports it as deleted.

All other callers get plain ``AddressBook`` behavior.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..core.config import (
    ALLOW_ENUMERATION_KEY,
    RESTRICT_TO_GROUP_KEY,
    RESTRICT_TO_PHONE_KEY,
    AppConfig,
)
from ..core.exceptions import ForbiddenError, NotFoundError
from ..core.logging import AccessLogger, access_logger
from ..core.models import AddressBookInfo, ChangeSet, ContactRecord
from ..federation.models import Credential
from ..federation.peers import PeerRegistry
from ..federation.trust import PeerTrustVerifier
from ..privacy.redaction import redact
from .addressbook import AddressBook, check_sync_request
from .backend import CardBackend, SyncCapable
from .sync import FetchOutcome, reconcile

logger = logging.getLogger(__name__)


class SystemAddressBook(AddressBook):
    """Federation-aware access to the system address book.

    Args:
        backend: Card storage
        info: Descriptor of the system address book
        config: App config holding the enumeration flags; read on every call
        credential: Credentials of the current request
        peers: Registry of trusted servers
        access_log: Logger for operations and withheld cards; defaults to
            the module-level ``access_logger``

    Without a credential or a peer registry no caller is ever treated as a
    federation peer.
    """

    def __init__(
        self,
        backend: CardBackend,
        info: AddressBookInfo,
        config: AppConfig,
        credential: Credential | None = None,
        peers: PeerRegistry | None = None,
        access_log: AccessLogger | None = None,
    ):
        super().__init__(backend, info)
        self.config = config
        self.credential = credential
        self.verifier = PeerTrustVerifier(peers) if peers is not None else None
        self.access_log = access_log or access_logger

    # -------------------------------------------------------------------------
    # GATES
    # -------------------------------------------------------------------------

    def _flag(self, key: str, default: str) -> bool:
        return self.config.get_app_value("core", key, default) == "yes"

    def enumeration_allowed(self) -> bool:
        """Whether the full listing may be served right now."""
        if not self._flag(ALLOW_ENUMERATION_KEY, "yes"):
            return False
        if self._flag(RESTRICT_TO_GROUP_KEY, "no"):
            return False
        return not self._flag(RESTRICT_TO_PHONE_KEY, "no")

    def is_federated_request(self) -> bool:
        """Whether the current caller is a trusted federation peer."""
        if self.verifier is None or self.credential is None:
            return False
        return self.verifier.is_trusted(self.credential)

    def _log(self, operation: str, arguments: dict, federated: bool) -> None:
        self.access_log.log_access(
            operation,
            {**arguments, "username": self.credential.username if self.credential else None},
            federated,
        )

    # -------------------------------------------------------------------------
    # FEDERATED PATH
    # -------------------------------------------------------------------------

    def _redact_for_peer(self, record: ContactRecord, operation: str) -> ContactRecord | None:
        result = redact(record)
        if not result.valid:
            self.access_log.log_withheld(operation, record.id, list(result.errors))
            return None
        return result.record.with_acl(self.child_acl())

    def _fetch_for_peer(self, name: str, operation: str = "fetch_one") -> tuple[FetchOutcome, ContactRecord | None]:
        record = self.backend.get_card(self.info.id, name)
        if record is None:
            return FetchOutcome.NOT_FOUND, None
        redacted = self._redact_for_peer(record, operation)
        if redacted is None:
            return FetchOutcome.FORBIDDEN, None
        return FetchOutcome.FOUND, redacted

    # -------------------------------------------------------------------------
    # OPERATIONS
    # -------------------------------------------------------------------------

    def list_all(self) -> list[ContactRecord]:
        """List every card, unless enumeration is restricted."""
        if not self.enumeration_allowed():
            logger.debug("System address book enumeration is disabled or restricted")
            return []
        return super().list_all()

    def fetch_one(self, name: str) -> ContactRecord:
        """Return one card.

        Raises:
            NotFoundError: The card does not exist.
            ForbiddenError: A trusted peer asked for a card that exists but
                is not valid once its local-only properties are removed.
        """
        federated = self.is_federated_request()
        self._log("fetch_one", {"name": name}, federated)
        if not federated:
            return super().fetch_one(name)

        outcome, record = self._fetch_for_peer(name)
        if outcome is FetchOutcome.NOT_FOUND:
            raise NotFoundError("Card", name)
        if outcome is FetchOutcome.FORBIDDEN:
            raise ForbiddenError(f"Card {name} cannot be shared with federated servers", resource_id=name)
        return record

    def fetch_many(self, names: Sequence[str]) -> list[ContactRecord]:
        """Return the existing cards among ``names``.

        Trusted peers only receive the cards that stay valid after
        redaction; the others are left out without an error.
        """
        federated = self.is_federated_request()
        self._log("fetch_many", {"names": list(names)}, federated)
        if not federated:
            return super().fetch_many(names)

        cards = []
        for record in self.backend.get_multiple_cards(self.info.id, names):
            redacted = self._redact_for_peer(record, "fetch_many")
            if redacted is not None:
                cards.append(redacted)
        return cards

    def get_changes(
        self,
        sync_token: str | int | None,
        sync_level: int,
        limit: int | None = None,
    ) -> ChangeSet | None:
        """Return changes since ``sync_token``.

        For trusted peers, added or modified cards the peer cannot fetch
        are reported as deleted.

        Returns:
            The change set, or None when the backend has no change tracking.

        Raises:
            UnsupportedLimitOnInitialSyncError: ``limit`` given without a token.
        """
        check_sync_request(sync_token, limit)
        if not isinstance(self.backend, SyncCapable):
            return None

        federated = self.is_federated_request()
        self._log("get_changes", {"sync_token": sync_token, "sync_level": sync_level, "limit": limit}, federated)
        if not federated:
            return super().get_changes(sync_token, sync_level, limit)

        changes = self.backend.get_changes_for_address_book(self.info.id, sync_token, sync_level, limit)
        if changes is None:
            return None
        return reconcile(changes, lambda uri: self._fetch_for_peer(uri, "get_changes")[0])
