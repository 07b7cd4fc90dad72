# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Reconciliation of change sets served to federation peers.

A peer must never be told a card was added or modified when it cannot
then fetch that card. Every added and modified URI is checked through the
peer's own fetch path; URIs the peer cannot fetch are reported as deleted
instead. URIs storage already reports as deleted are passed through
without a fetch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from enum import Enum

from ..core.models import ChangeSet

logger = logging.getLogger(__name__)


class FetchOutcome(Enum):
    """Result of trying to fetch one card on behalf of a peer."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"

    @property
    def fetchable(self) -> bool:
        return self is FetchOutcome.FOUND


def _partition(uris: Iterable[str], fetch: Callable[[str], FetchOutcome]) -> tuple[list[str], list[str]]:
    kept, gone = [], []
    for uri in uris:
        if fetch(uri).fetchable:
            kept.append(uri)
        else:
            gone.append(uri)
    return kept, gone


def reconcile(change_set: ChangeSet, fetch: Callable[[str], FetchOutcome]) -> ChangeSet:
    """Move URIs the peer cannot fetch from added/modified to deleted.

    Args:
        change_set: Changes as reported by storage
        fetch: The peer's fetch path, as a tagged outcome

    Returns:
        A new ChangeSet with the same sync token. Reclassified URIs are
        appended to ``deleted`` after the ones storage reported, added
        before modified.
    """
    added, withdrawn_added = _partition(change_set.added, fetch)
    modified, withdrawn_modified = _partition(change_set.modified, fetch)

    withdrawn = withdrawn_added + withdrawn_modified
    if withdrawn:
        logger.debug(f"Reporting {len(withdrawn)} undisclosable cards as deleted")

    return replace(
        change_set,
        added=tuple(added),
        modified=tuple(modified),
        deleted=(*change_set.deleted, *withdrawn),
    )
