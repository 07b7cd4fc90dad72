"""Global test fixtures for the cardfed test suite."""

from __future__ import annotations

import os

import pytest

from cardfed.core.config import StaticAppConfig, clear_config_cache
from cardfed.core.models import SYSTEM_PRINCIPAL, AddressBookInfo
from cardfed.directory.backend import InMemoryCardBackend, InMemorySyncBackend
from cardfed.federation.models import Credential, PeerStatus
from cardfed.federation.peers import TrustedPeerStore

BOOK_ID = 1
PEER_SECRET = "s3cr3t-shared-with-peer"

# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all CARDFED_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("CARDFED_"):
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


# ============================================================================
# Card Builders
# ============================================================================


def make_vcard(*properties: str, version: str | None = "3.0") -> bytes:
    """Build a vCard from raw content lines.

    VERSION is inserted first unless ``version`` is None.
    """
    lines = ["BEGIN:VCARD"]
    if version is not None:
        lines.append(f"VERSION:{version}")
    lines.extend(properties)
    lines.append("END:VCARD")
    return ("\r\n".join(lines) + "\r\n").encode("utf-8")


@pytest.fixture
def vcard():
    """Factory fixture for vCard bytes."""
    return make_vcard


# ============================================================================
# Directory Fixtures
# ============================================================================


@pytest.fixture
def book_info() -> AddressBookInfo:
    return AddressBookInfo(id=BOOK_ID, uri="system", principal_uri=SYSTEM_PRINCIPAL)


@pytest.fixture
def backend() -> InMemorySyncBackend:
    return InMemorySyncBackend()


@pytest.fixture
def plain_backend() -> InMemoryCardBackend:
    """Card storage without change tracking."""
    return InMemoryCardBackend()


@pytest.fixture
def app_config() -> StaticAppConfig:
    return StaticAppConfig()


# ============================================================================
# Federation Fixtures
# ============================================================================


@pytest.fixture
def peer_store() -> TrustedPeerStore:
    store = TrustedPeerStore()
    store.add_peer("https://peer.example.com", shared_secret=PEER_SECRET, status=PeerStatus.OK)
    return store


@pytest.fixture
def peer_credential() -> Credential:
    return Credential(username="system", secret=PEER_SECRET)


@pytest.fixture
def user_credential() -> Credential:
    return Credential(username="alice", secret="alice-password")
