# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Plain (non-federated) address book access.

Cards are returned as stored, carrying the address book's child ACL.
``SystemAddressBook`` falls back to this class for every caller that is
not a trusted federation peer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..core.exceptions import NotFoundError, UnsupportedLimitOnInitialSyncError, ValidationException
from ..core.models import (
    PRINCIPAL_AUTHENTICATED,
    PRIVILEGE_READ,
    PRIVILEGE_WRITE,
    SYSTEM_PRINCIPAL,
    AclEntry,
    AddressBookInfo,
    ChangeSet,
    ContactRecord,
)
from .backend import CardBackend, SyncCapable

logger = logging.getLogger(__name__)


def check_sync_request(sync_token: str | int | None, limit: int | None) -> None:
    """Reject sync requests the protocol does not allow.

    Raises:
        UnsupportedLimitOnInitialSyncError: ``limit`` given without a token.
        ValidationException: ``limit`` is negative.
    """
    if not sync_token and limit:
        raise UnsupportedLimitOnInitialSyncError(limit)
    if limit is not None and limit < 0:
        raise ValidationException("Sync limit must not be negative", field="limit", value=limit)


class AddressBook:
    """One address book backed by a ``CardBackend``."""

    def __init__(self, backend: CardBackend, info: AddressBookInfo):
        if info.id is None or info.id == "":
            raise ValidationException("Address book id is required", field="id")
        self.backend = backend
        self.info = info

    @property
    def owner(self) -> str:
        return self.info.principal_uri

    def acl(self) -> list[AclEntry]:
        """Access-control list of the address book itself."""
        entries = [
            AclEntry(PRIVILEGE_READ, self.owner),
            AclEntry(PRIVILEGE_WRITE, self.owner),
        ]
        if self.owner == SYSTEM_PRINCIPAL:
            entries.append(AclEntry(PRIVILEGE_READ, PRINCIPAL_AUTHENTICATED))
        return entries

    def child_acl(self) -> list[AclEntry]:
        """Access-control list every card of this address book carries."""
        return self.acl()

    def _with_child_acl(self, record: ContactRecord) -> ContactRecord:
        return record.with_acl(self.child_acl())

    def list_all(self) -> list[ContactRecord]:
        return [self._with_child_acl(record) for record in self.backend.get_cards(self.info.id)]

    def fetch_one(self, name: str) -> ContactRecord:
        """Return the card stored under ``name``.

        Raises:
            NotFoundError: If there is no such card.
        """
        record = self.backend.get_card(self.info.id, name)
        if record is None:
            raise NotFoundError("Card", name)
        return self._with_child_acl(record)

    def fetch_many(self, names: Sequence[str]) -> list[ContactRecord]:
        """Return the existing cards among ``names``."""
        return [self._with_child_acl(record) for record in self.backend.get_multiple_cards(self.info.id, names)]

    def child_exists(self, name: str) -> bool:
        return self.backend.get_card(self.info.id, name) is not None

    def get_changes(
        self,
        sync_token: str | int | None,
        sync_level: int,
        limit: int | None = None,
    ) -> ChangeSet | None:
        """Return changes since ``sync_token``.

        Returns:
            The change set, or None when the backend has no change tracking.

        Raises:
            UnsupportedLimitOnInitialSyncError: ``limit`` given without a token.
        """
        check_sync_request(sync_token, limit)
        if not isinstance(self.backend, SyncCapable):
            return None
        return self.backend.get_changes_for_address_book(self.info.id, sync_token, sync_level, limit)
