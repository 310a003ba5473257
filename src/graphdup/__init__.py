"""graphdup: policy-driven duplication of object graphs.

Usage:
    from dataclasses import dataclass
    from typing import Annotated
    from graphdup import CopyAs, CopyPolicy, duplicatable, duplicate

    @duplicatable(CopyPolicy.DUPLICATE)
    @dataclass
    class Vertex:
        x: float
        y: float

    @dataclass
    class Node:
        vertex: Vertex                                      # DUPLICATE (type level)
        next: Annotated["Node | None", CopyAs(CopyPolicy.MAP_OR_DUPLICATE)] = None

    node = Node(Vertex(0, 0))
    node.next = node
    copy = duplicate(node)
    assert copy.next is copy and copy.vertex is not node.vertex
"""

__version__ = "0.1.0"

# Core primitives
from graphdup.core import (
    MISSING,
    NULL_KEY,
    ContainerKind,
    CopyAs,
    CopyPolicy,
    Duplicated,
    ElementPolicies,
    FieldDescriptor,
    Identifiable,
    PolicyConflictWarning,
    PolicyRegistry,
    PolicyResolver,
    container_kind,
    copy_field,
    duplicatable,
    fields_of,
    get_registry,
    is_atomic,
    key_for,
)

# Duplication services
from graphdup.duplication import (
    SKIP,
    DuplicationSession,
    DuplicatorConfig,
    GraphDuplicator,
    InstantiationError,
    PostDuplicable,
    SessionInUseError,
    copy_fields_from,
    copy_properties_from,
    duplicate,
    duplicate_all,
    get_duplicator,
    set_duplicator,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "MISSING",
    "NULL_KEY",
    "ContainerKind",
    "CopyAs",
    "CopyPolicy",
    "Duplicated",
    "ElementPolicies",
    "FieldDescriptor",
    "Identifiable",
    "PolicyConflictWarning",
    "PolicyRegistry",
    "PolicyResolver",
    "container_kind",
    "copy_field",
    "duplicatable",
    "fields_of",
    "get_registry",
    "is_atomic",
    "key_for",
    # Duplication
    "SKIP",
    "DuplicationSession",
    "DuplicatorConfig",
    "GraphDuplicator",
    "InstantiationError",
    "PostDuplicable",
    "SessionInUseError",
    "copy_fields_from",
    "copy_properties_from",
    "duplicate",
    "duplicate_all",
    "get_duplicator",
    "set_duplicator",
]
