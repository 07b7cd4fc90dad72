"""cardfed federation - recognizing trusted peer servers.

Key components:
- models: Credential, TrustedPeer and peer handshake status
- peers: PeerRegistry protocol and the JSON-backed TrustedPeerStore
- trust: is_federated_peer and PeerTrustVerifier
"""

from .models import (
    SYSTEM_USER,
    Credential,
    PeerStatus,
    TrustedPeer,
    url_hash,
)
from .peers import PeerRegistry, TrustedPeerStore, clear_peer_store, get_peer_store
from .trust import PeerTrustVerifier, is_federated_peer

__all__ = [
    "SYSTEM_USER",
    "Credential",
    "PeerStatus",
    "TrustedPeer",
    "url_hash",
    "PeerRegistry",
    "TrustedPeerStore",
    "get_peer_store",
    "clear_peer_store",
    "PeerTrustVerifier",
    "is_federated_peer",
]
