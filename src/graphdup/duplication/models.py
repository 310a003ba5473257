"""Duplication models and configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from graphdup.core.policy import CopyPolicy


class _Skip:
    """Result of a value transform meaning 'do not assign'."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "SKIP"


SKIP: Final = _Skip()
"""Returned by value transforms for DO_NOT_COPY and unresolved MAP."""


@dataclass
class DuplicatorConfig:
    """Configuration for duplicator behaviour.

    Passed to GraphDuplicator at construction, or built from environment
    variables via `graphdup.config.DuplicationSettings`.
    """

    default_items_policy: CopyPolicy = CopyPolicy.COPY
    """Element policy for containers with no element declaration. Default: share elements."""

    allow_raw_allocation: bool = True
    """Allocate through the built-in `__new__` when a type defines its own `__new__`."""

    cache_policies: bool = True
    """Cache field policy resolution per field descriptor."""

    warn_on_policy_conflict: bool = True
    """Emit PolicyConflictWarning when a policy cannot apply to a field's type."""
