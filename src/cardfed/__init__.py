# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""cardfed - federated visibility filter for a shared contact directory.

The system address book lists every user of a server. Trusted federation
peers may read it, but properties users marked as local-only must never
leave the server.

Architecture:
  Request credential
    -> PeerTrustVerifier (system user + shared secret of a trusted peer?)
    -> SystemAddressBook (enumeration gate, federated or plain access)
    -> redact (drop X-NC-SCOPE=v2-local properties, re-validate)
    -> reconcile (sync feed lists withheld cards as deleted)
"""

__version__ = "0.1.0"

from . import (
    core as core,
)
