"""Pure identity resolution."""

from __future__ import annotations

from typing import Any

from graphdup.core.identity.models import (
    NULL_KEY,
    Identifiable,
    IdentityKey,
    ReferenceKey,
    UniqueKey,
)


def key_for(obj: Any) -> IdentityKey:
    """Derive the identity key of an object for session tracking.

    Args:
        obj: Any object, or None.

    Returns:
        NULL_KEY for None, a UniqueKey for Identifiable objects, and a
        ReferenceKey (identity-compared) for everything else.
    """
    if obj is None:
        return NULL_KEY
    if isinstance(obj, Identifiable) and not isinstance(obj, type):
        return UniqueKey(obj.__identity__())
    return ReferenceKey(obj)
