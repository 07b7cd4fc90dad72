# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Data models for federation: request credentials and trusted peers."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any

SYSTEM_USER = "system"


class PeerStatus(IntEnum):
    """Handshake state of a trusted peer."""

    OK = 1
    PENDING = 2
    FAILURE = 3
    ACCESS_REVOKED = 4


def url_hash(url: str) -> str:
    """Stable key for a peer URL (scheme and trailing slash ignored)."""
    normalized = url.strip().removeprefix("https://").removeprefix("http://").rstrip("/")
    return hashlib.sha1(normalized.encode()).hexdigest()


@dataclass(frozen=True)
class Credential:
    """Basic-auth credentials presented with a request.

    Either part may be missing; an anonymous request has neither.
    """

    username: str | None = None
    secret: str | None = field(default=None, repr=False)

    @property
    def is_system(self) -> bool:
        return self.username == SYSTEM_USER


@dataclass
class TrustedPeer:
    """A federation peer allowed to read the system address book."""

    url: str
    shared_secret: str | None = field(default=None, repr=False)
    status: PeerStatus = PeerStatus.PENDING
    sync_token: str | None = None
    added_at: datetime = field(default_factory=datetime.now)

    @property
    def url_hash(self) -> str:
        return url_hash(self.url)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "url": self.url,
            "shared_secret": self.shared_secret,
            "status": int(self.status),
            "sync_token": self.sync_token,
            "added_at": self.added_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrustedPeer:
        """Create from dictionary."""
        return cls(
            url=data["url"],
            shared_secret=data.get("shared_secret"),
            status=PeerStatus(data.get("status", PeerStatus.PENDING)),
            sync_token=data.get("sync_token"),
            added_at=datetime.fromisoformat(data["added_at"]) if "added_at" in data else datetime.now(),
        )
