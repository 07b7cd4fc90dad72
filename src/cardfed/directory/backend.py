# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Card storage capabilities and an in-memory implementation.

The address book talks to storage through two protocols:

- ``CardBackend``: read cards by URI, in bulk, or all of them.
- ``SyncCapable``: report changes since a sync token.

A backend without change tracking simply does not implement
``get_changes_for_address_book``; ``isinstance(backend, SyncCapable)``
is how callers find out.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections.abc import Sequence
from enum import IntEnum
from typing import Protocol, runtime_checkable

from ..core.exceptions import ValidationException
from ..core.models import ChangeSet, ContactRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class CardBackend(Protocol):
    """Read access to the cards of address books."""

    def get_card(self, address_book_id: int | str, uri: str) -> ContactRecord | None:
        """Return one card, or None if it does not exist."""
        ...

    def get_multiple_cards(self, address_book_id: int | str, uris: Sequence[str]) -> list[ContactRecord]:
        """Return the existing cards among ``uris``; missing ones are skipped."""
        ...

    def get_cards(self, address_book_id: int | str) -> list[ContactRecord]:
        """Return every card of the address book."""
        ...


@runtime_checkable
class SyncCapable(Protocol):
    """Change tracking for incremental sync."""

    def get_changes_for_address_book(
        self,
        address_book_id: int | str,
        sync_token: str | int | None,
        sync_level: int,
        limit: int | None = None,
    ) -> ChangeSet | None:
        """Return changes since ``sync_token`` (all cards if None).

        Returns None when the token is not one this backend issued.
        """
        ...


class ChangeOperation(IntEnum):
    ADDED = 1
    MODIFIED = 2
    DELETED = 3


def _etag(data: bytes) -> str:
    return f'"{hashlib.md5(data).hexdigest()}"'


class InMemoryCardBackend:
    """Dict-backed card storage without change tracking."""

    def __init__(self):
        self._cards: dict[tuple[str, str], ContactRecord] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(address_book_id: int | str, uri: str) -> tuple[str, str]:
        return (str(address_book_id), uri)

    def _record_change(self, address_book_id: int | str, uri: str, operation: ChangeOperation) -> None:
        """Called under the lock after each write; the plain backend keeps no change log."""

    def put_card(self, address_book_id: int | str, uri: str, card_data: bytes | str) -> ContactRecord:
        """Create or replace a card."""
        if isinstance(card_data, str):
            card_data = card_data.encode("utf-8")
        record = ContactRecord(
            id=uri,
            raw_data=card_data,
            etag=_etag(card_data),
            size=len(card_data),
            last_modified=int(time.time()),
        )
        key = self._key(address_book_id, uri)
        with self._lock:
            existed = key in self._cards
            self._cards[key] = record
            self._record_change(
                address_book_id, uri, ChangeOperation.MODIFIED if existed else ChangeOperation.ADDED
            )
        return record

    def delete_card(self, address_book_id: int | str, uri: str) -> bool:
        key = self._key(address_book_id, uri)
        with self._lock:
            if self._cards.pop(key, None) is None:
                return False
            self._record_change(address_book_id, uri, ChangeOperation.DELETED)
        return True

    def get_card(self, address_book_id: int | str, uri: str) -> ContactRecord | None:
        with self._lock:
            return self._cards.get(self._key(address_book_id, uri))

    def get_multiple_cards(self, address_book_id: int | str, uris: Sequence[str]) -> list[ContactRecord]:
        cards = []
        with self._lock:
            for uri in dict.fromkeys(uris):
                record = self._cards.get(self._key(address_book_id, uri))
                if record is not None:
                    cards.append(record)
        return cards

    def get_cards(self, address_book_id: int | str) -> list[ContactRecord]:
        book = str(address_book_id)
        with self._lock:
            return [record for (book_id, _), record in self._cards.items() if book_id == book]


class InMemorySyncBackend(InMemoryCardBackend):
    """In-memory storage that also keeps a change log per address book.

    Sync tokens are integers starting at 1. Every change is logged with
    the token current at the time and then bumps the token.
    """

    def __init__(self):
        super().__init__()
        self._tokens: dict[str, int] = {}
        self._changes: dict[str, list[tuple[int, str, ChangeOperation]]] = {}

    def current_sync_token(self, address_book_id: int | str) -> int:
        return self._tokens.get(str(address_book_id), 1)

    def _record_change(self, address_book_id: int | str, uri: str, operation: ChangeOperation) -> None:
        book = str(address_book_id)
        token = self._tokens.get(book, 1)
        self._changes.setdefault(book, []).append((token, uri, operation))
        self._tokens[book] = token + 1

    def get_changes_for_address_book(
        self,
        address_book_id: int | str,
        sync_token: str | int | None,
        sync_level: int,
        limit: int | None = None,
    ) -> ChangeSet | None:
        if limit is not None and limit < 0:
            raise ValidationException("Sync limit must not be negative", field="limit", value=limit)

        book = str(address_book_id)
        with self._lock:
            current = self.current_sync_token(book)

            if not sync_token:
                uris = sorted(uri for (book_id, uri) in self._cards if book_id == book)
                return ChangeSet(sync_token=current, added=tuple(uris))

            try:
                since = int(sync_token)
            except (TypeError, ValueError):
                logger.debug(f"Rejecting foreign sync token {sync_token!r} for address book {book}")
                return None
            if since < 1 or since > current:
                return None

            entries = [entry for entry in self._changes.get(book, []) if entry[0] >= since]
            next_token = current
            if limit:
                entries = entries[:limit]
                if entries:
                    next_token = entries[-1][0] + 1

        # Latest operation per URI wins
        latest: dict[str, ChangeOperation] = {}
        for _, uri, operation in entries:
            latest[uri] = operation

        added, modified, deleted = [], [], []
        for uri, operation in latest.items():
            if operation == ChangeOperation.ADDED:
                added.append(uri)
            elif operation == ChangeOperation.MODIFIED:
                modified.append(uri)
            else:
                deleted.append(uri)

        return ChangeSet(
            sync_token=next_token,
            added=tuple(added),
            modified=tuple(modified),
            deleted=tuple(deleted),
        )
