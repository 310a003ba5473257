"""Identity key models.

Usage:
    key = key_for(obj)          # UniqueKey if obj is Identifiable, else ReferenceKey
    key_for(None) is NULL_KEY   # never equal to anything
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, Final, Protocol, runtime_checkable


@runtime_checkable
class Identifiable(Protocol):
    """Object exposing a stable unique identity (e.g. a persistent UUID).

    Two objects with equal identities are treated as the same source object
    by a duplication session.
    """

    def __identity__(self) -> Hashable: ...


@dataclass(frozen=True, slots=True)
class UniqueKey:
    """Identity key for Identifiable objects, compared by value."""

    value: Hashable


@dataclass(frozen=True, slots=True, eq=False)
class ReferenceKey:
    """Identity key compared by object reference.

    Holds a strong reference to the object so its `id()` cannot be reused
    while the key is alive.
    """

    obj: Any

    def __hash__(self) -> int:
        return id(self.obj)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReferenceKey):
            return NotImplemented
        return self.obj is other.obj


class _NullKey:
    """Key of None: unequal to every key, including itself."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return False

    def __hash__(self) -> int:
        return 0

    def __repr__(self) -> str:
        return "NULL_KEY"


NULL_KEY: Final = _NullKey()

type IdentityKey = UniqueKey | ReferenceKey | _NullKey
