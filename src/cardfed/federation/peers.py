# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Trusted peer storage for cardfed.

A trusted peer is another directory server that authenticates against
this one with the ``system`` user and a shared secret. The registry is
owned outside the access gate; the gate only ever reads it.

``TrustedPeerStore`` is a simple in-memory registry that can persist
itself to a JSON file. Deployments with their own peer database only
need to provide something with a ``list_peers()`` method.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..core.config import get_config
from ..core.exceptions import ConfigException
from .models import PeerStatus, TrustedPeer, url_hash

logger = logging.getLogger(__name__)


@runtime_checkable
class PeerRegistry(Protocol):
    """Read access to the current set of trusted peers."""

    def list_peers(self) -> Sequence[TrustedPeer]:
        """Return every trusted peer, read fresh on each call."""
        ...


class TrustedPeerStore:
    """In-memory storage for trusted peers, keyed by URL hash.

    Optionally persists to a JSON file.
    """

    def __init__(self, persist_path: str | Path | None = None):
        """Initialize peer store.

        Args:
            persist_path: Optional path to persist peers to disk

        Raises:
            ConfigException: If the persisted file exists but cannot be read.
        """
        self._peers: dict[str, TrustedPeer] = {}
        self._lock = threading.Lock()
        self._persist_path = Path(persist_path) if persist_path else None

        if self._persist_path and self._persist_path.exists():
            self._load()

    def _load(self) -> None:
        """Load peers from disk."""
        if not self._persist_path:
            return

        try:
            with open(self._persist_path) as f:
                data = json.load(f)
            for peer_data in data.get("peers", []):
                peer = TrustedPeer.from_dict(peer_data)
                self._peers[peer.url_hash] = peer
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            # OSError: file issues, JSONDecodeError: invalid JSON, others: schema mismatch
            raise ConfigException(f"Failed to load trusted peers from {self._persist_path}: {e}") from e
        logger.info(f"Loaded {len(self._peers)} trusted peers from {self._persist_path}")

    def _save(self) -> None:
        """Save peers to disk."""
        if not self._persist_path:
            return

        try:
            self._persist_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._persist_path, "w") as f:
                json.dump({"peers": [p.to_dict() for p in self._peers.values()]}, f, indent=2)
        except OSError as e:
            logger.warning(f"Failed to save trusted peers: {e}")

    def add_peer(
        self,
        url: str,
        shared_secret: str | None = None,
        status: PeerStatus = PeerStatus.PENDING,
    ) -> TrustedPeer:
        """Add or update a peer.

        Args:
            url: Peer's base URL
            shared_secret: Secret the peer presents as the ``system`` password
            status: Handshake state

        Returns:
            The TrustedPeer object
        """
        key = url_hash(url)
        with self._lock:
            peer = self._peers.get(key)
            if peer is None:
                peer = TrustedPeer(url=url, shared_secret=shared_secret, status=status)
                self._peers[key] = peer
                logger.info(f"Added trusted peer: {url}")
            else:
                peer.url = url
                if shared_secret is not None:
                    peer.shared_secret = shared_secret
                peer.status = status
            self._save()
        return peer

    def set_shared_secret(self, url: str, shared_secret: str) -> bool:
        """Store the secret exchanged with a peer.

        Returns:
            True if the peer exists, False otherwise
        """
        with self._lock:
            peer = self._peers.get(url_hash(url))
            if peer is None:
                return False
            peer.shared_secret = shared_secret
            peer.status = PeerStatus.OK
            self._save()
        return True

    def get_peer(self, url: str) -> TrustedPeer | None:
        """Get a peer by URL."""
        return self._peers.get(url_hash(url))

    def list_peers(self) -> list[TrustedPeer]:
        """List all peers."""
        with self._lock:
            return list(self._peers.values())

    def remove_peer(self, url: str) -> bool:
        """Remove a peer.

        Returns:
            True if peer was removed, False if not found
        """
        with self._lock:
            if self._peers.pop(url_hash(url), None) is None:
                return False
            self._save()
        logger.info(f"Removed trusted peer: {url}")
        return True


# Global peer store (for simple usage)
_global_peer_store: TrustedPeerStore | None = None


def get_peer_store(persist_path: str | Path | None = None) -> TrustedPeerStore:
    """Get or create the global peer store.

    Args:
        persist_path: Path for persistence, only used on first call.
            Defaults to ``CARDFED_TRUSTED_PEERS``.
    """
    global _global_peer_store

    if _global_peer_store is None:
        if persist_path is None:
            persist_path = get_config().trusted_peers_path
        _global_peer_store = TrustedPeerStore(persist_path)

    return _global_peer_store


def clear_peer_store() -> None:
    """Forget the global peer store (useful for testing)."""
    global _global_peer_store
    _global_peer_store = None
