"""Container functionality: kinds and atomic-value classification."""

from graphdup.core.containers.models import ContainerKind
from graphdup.core.containers.operations import (
    ATOMIC_TYPES,
    BUILTIN_CONTAINERS,
    container_kind,
    is_atomic,
    is_atomic_type,
)

__all__ = [
    "ContainerKind",
    "ATOMIC_TYPES",
    "BUILTIN_CONTAINERS",
    "container_kind",
    "is_atomic",
    "is_atomic_type",
]
