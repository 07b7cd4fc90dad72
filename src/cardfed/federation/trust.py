# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Federation peer recognition.

A request comes from a trusted peer when it authenticates as the
``system`` user with a password equal to the shared secret of some
registered peer. Nothing here is cached: the registry is read on every
check so a peer added or removed mid-session takes effect immediately.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Iterable

from .models import Credential, TrustedPeer
from .peers import PeerRegistry

logger = logging.getLogger(__name__)


def _secrets_match(presented: str, expected: str | None) -> bool:
    if expected is None:
        return False
    return hmac.compare_digest(presented.encode(), expected.encode())


def is_federated_peer(credential: Credential | None, known_peers: Iterable[TrustedPeer]) -> bool:
    """Return True if ``credential`` belongs to one of ``known_peers``.

    Args:
        credential: Credentials of the current request, if any
        known_peers: The current trusted peer set

    Returns:
        False for a missing credential, a username other than ``system``,
        a missing secret, or an empty peer set.
    """
    if credential is None or not credential.is_system:
        return False
    if credential.secret is None:
        return False

    return any(_secrets_match(credential.secret, peer.shared_secret) for peer in known_peers)


class PeerTrustVerifier:
    """Checks request credentials against a live peer registry."""

    def __init__(self, registry: PeerRegistry):
        self._registry = registry

    def is_trusted(self, credential: Credential | None) -> bool:
        if credential is None or not credential.is_system or credential.secret is None:
            return False
        trusted = is_federated_peer(credential, self._registry.list_peers())
        if not trusted:
            logger.debug("System credential did not match any trusted peer")
        return trusted
