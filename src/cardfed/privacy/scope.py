# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Visibility scopes of contact properties.

Account properties carry their visibility in the ``X-NC-SCOPE`` parameter
of the matching vCard property. Only ``v2-local`` is withheld from
federation peers; everything else (including no annotation at all) is
shareable with them.
"""

from __future__ import annotations

from enum import Enum

SCOPE_PARAMETER = "X-NC-SCOPE"


class Scope(str, Enum):
    """Visibility of a single contact property."""

    PRIVATE = "v2-private"  # Only visible to the user
    LOCAL = "v2-local"  # Visible on this server only
    FEDERATED = "v2-federated"  # Shared with trusted servers
    PUBLISHED = "v2-published"  # Shared with trusted servers and the lookup server


SCOPE_LOCAL = Scope.LOCAL.value
SCOPE_PRIVATE = Scope.PRIVATE.value
SCOPE_FEDERATED = Scope.FEDERATED.value
SCOPE_PUBLISHED = Scope.PUBLISHED.value


def is_local_only(scope: str | None) -> bool:
    """Return True if a property with this scope must stay on this server."""
    return scope == SCOPE_LOCAL
