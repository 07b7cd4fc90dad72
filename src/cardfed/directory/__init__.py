"""cardfed directory - address book access for users and federation peers.

Key components:
- backend: CardBackend / SyncCapable protocols and in-memory storage
- addressbook: plain address book access
- system_addressbook: the federation-aware system address book
- sync: reconciliation of change sets served to peers
"""

from .addressbook import AddressBook, check_sync_request
from .backend import (
    CardBackend,
    ChangeOperation,
    InMemoryCardBackend,
    InMemorySyncBackend,
    SyncCapable,
)
from .sync import FetchOutcome, reconcile
from .system_addressbook import SystemAddressBook

__all__ = [
    "AddressBook",
    "check_sync_request",
    "CardBackend",
    "ChangeOperation",
    "InMemoryCardBackend",
    "InMemorySyncBackend",
    "SyncCapable",
    "FetchOutcome",
    "reconcile",
    "SystemAddressBook",
]
