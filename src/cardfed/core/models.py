# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Value objects exchanged between the address book, its backend and callers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

SYSTEM_PRINCIPAL = "principals/system/system"

PRIVILEGE_READ = "{DAV:}read"
PRIVILEGE_WRITE = "{DAV:}write"
PRINCIPAL_AUTHENTICATED = "{DAV:}authenticated"


@dataclass(frozen=True)
class AclEntry:
    """One access-control entry of a card or address book."""

    privilege: str
    principal: str
    protected: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "privilege": self.privilege,
            "principal": self.principal,
            "protected": self.protected,
        }


@dataclass(frozen=True)
class AddressBookInfo:
    """Descriptor of the address book a gate serves."""

    id: int | str
    uri: str
    principal_uri: str
    display_name: str | None = None


@dataclass(frozen=True)
class ContactRecord:
    """A stored contact card.

    ``raw_data`` is the serialized vCard. ``id`` is the card's URI within
    its address book (``alice.vcf``).
    """

    id: str
    raw_data: bytes
    acl: tuple[AclEntry, ...] = ()
    etag: str | None = None
    size: int | None = None
    last_modified: int | None = None

    def with_data(self, raw_data: bytes) -> ContactRecord:
        """Copy carrying different card data (size follows the data)."""
        return replace(self, raw_data=raw_data, size=len(raw_data))

    def with_acl(self, acl: tuple[AclEntry, ...] | list[AclEntry]) -> ContactRecord:
        return replace(self, acl=tuple(acl))

    def text(self) -> str:
        return self.raw_data.decode("utf-8")


@dataclass(frozen=True)
class ChangeSet:
    """Card URIs changed within one sync window.

    ``sync_token`` is opaque to callers; pass it back to continue.
    """

    sync_token: Any
    added: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "syncToken": self.sync_token,
            "added": list(self.added),
            "modified": list(self.modified),
            "deleted": list(self.deleted),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChangeSet:
        return cls(
            sync_token=data.get("syncToken"),
            added=tuple(data.get("added", ())),
            modified=tuple(data.get("modified", ())),
            deleted=tuple(data.get("deleted", ())),
        )
