# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Request authentication helpers for address book endpoints.

Federation peers authenticate with HTTP Basic auth (``system`` plus the
shared secret). These helpers turn a request into a ``Credential`` and
build the system address book for it, binding the request's correlation
id so every log line of the request carries it.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re

from starlette.requests import Request

from ..core.config import AppConfig
from ..core.logging import generate_correlation_id, set_correlation_id
from ..core.models import AddressBookInfo
from ..directory.backend import CardBackend
from ..directory.system_addressbook import SystemAddressBook
from ..federation.models import Credential
from ..federation.peers import PeerRegistry

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Ids echoed from callers end up in log lines; keep them short and inert
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def parse_basic_auth(header: str | None) -> Credential:
    """Parse an ``Authorization`` header value.

    Anything that is not well-formed Basic auth yields an anonymous
    credential. A username without a colon has no secret.
    """
    if not header:
        return Credential()

    scheme, _, encoded = header.strip().partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        return Credential()

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.debug("Ignoring malformed Basic authorization header")
        return Credential()

    username, sep, secret = decoded.partition(":")
    return Credential(username=username, secret=secret if sep else None)


def credential_from_request(request: Request) -> Credential:
    """Extract the Basic-auth credential of a request."""
    return parse_basic_auth(request.headers.get("Authorization"))


def correlation_id_from_request(request: Request) -> str:
    """Return the caller's ``X-Request-ID``, or a fresh id if absent or malformed."""
    request_id = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if request_id and _REQUEST_ID_RE.match(request_id):
        return request_id
    return generate_correlation_id()


def system_address_book_for_request(
    request: Request,
    backend: CardBackend,
    info: AddressBookInfo,
    config: AppConfig,
    peers: PeerRegistry | None = None,
) -> SystemAddressBook:
    """Build the system address book as seen by the caller of ``request``.

    Also binds the request's correlation id to the current context.
    """
    set_correlation_id(correlation_id_from_request(request))
    return SystemAddressBook(
        backend,
        info,
        config,
        credential=credential_from_request(request),
        peers=peers,
    )
