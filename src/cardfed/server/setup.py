# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Process start-up for apps that serve the system address book."""

from __future__ import annotations

import logging

from ..core.config import CoreSettings, get_config
from ..core.logging import configure_logging
from ..federation.peers import TrustedPeerStore, get_peer_store

logger = logging.getLogger(__name__)


def configure_server(settings: CoreSettings | None = None) -> TrustedPeerStore:
    """Configure logging and load the trusted peer store.

    Call once at start-up, before the first request.

    Args:
        settings: Settings to use; defaults to ``get_config()``.

    Returns:
        The process-wide peer store, read from ``settings.trusted_peers_path``.

    Raises:
        ConfigException: If the peer file exists but cannot be read.
    """
    settings = settings or get_config()
    configure_logging(settings)

    peers = get_peer_store(settings.trusted_peers_path)
    logger.info(
        f"cardfed ready with {len(peers.list_peers())} trusted peer(s)",
        extra={"extra_data": {"trusted_peers_path": settings.trusted_peers_path}},
    )
    return peers
