"""
Ownership guard for ownable resources (playlists, comments).
"""
from typing import Any

from app.core.exceptions import Forbidden


def canonical_id(ref: Any) -> str | None:
    """Normalize an ObjectId, string id or ``{"_id": ...}`` document to a string."""
    if ref is None:
        return None
    if isinstance(ref, dict):
        ref = ref.get("_id", ref.get("id"))
        if ref is None:
            return None
    return str(ref)


def is_owner(acting_identity_id: Any, owner_ref: Any) -> bool:
    """True when both sides refer to the same identity."""
    acting = canonical_id(acting_identity_id)
    owner = canonical_id(owner_ref)
    if acting is None or owner is None:
        return False
    return acting == owner


def ensure_owner(
    acting_identity_id: Any,
    owner_ref: Any,
    message: str = "You do not own this resource",
) -> None:
    """
    Raise Forbidden unless the acting identity owns the resource.

    Callers must confirm the resource exists first so that a missing
    resource surfaces as NotFound rather than Forbidden.
    """
    if not is_owner(acting_identity_id, owner_ref):
        raise Forbidden(message)
