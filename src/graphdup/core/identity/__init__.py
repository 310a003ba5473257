"""Identity functionality: keys that detect the same source object."""

from graphdup.core.identity.models import (
    NULL_KEY,
    Identifiable,
    IdentityKey,
    ReferenceKey,
    UniqueKey,
)
from graphdup.core.identity.operations import key_for

__all__ = [
    "NULL_KEY",
    "Identifiable",
    "IdentityKey",
    "ReferenceKey",
    "UniqueKey",
    "key_for",
]
