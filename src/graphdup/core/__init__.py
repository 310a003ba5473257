"""Core functionalities: stateless protocols and primitives.

Architecture Note:
    core/ contains pure, stateless functionalities: the policy vocabulary and
    its resolution, identity keys, field introspection and container
    classification. For the stateful duplication services (sessions, the
    graph duplicator), see duplication/.
"""

from graphdup.core.containers import ContainerKind, container_kind, is_atomic
from graphdup.core.policy import (
    CopyAs,
    CopyPolicy,
    ElementPolicies,
    PolicyConflictWarning,
    PolicyRegistry,
    PolicyResolver,
    ResolvedPolicy,
    copy_field,
    duplicatable,
    get_registry,
)
from graphdup.core.fields import (
    FieldDescriptor,
    fields_of,
    instance_fields,
    is_compatible,
    read_field,
    write_field,
)
from graphdup.core.identity import (
    NULL_KEY,
    Identifiable,
    IdentityKey,
    ReferenceKey,
    UniqueKey,
    key_for,
)
from graphdup.core.types import MISSING, Duplicated

__all__ = [
    # Types
    "Duplicated",
    "MISSING",
    # Containers
    "ContainerKind",
    "container_kind",
    "is_atomic",
    # Policy
    "CopyAs",
    "CopyPolicy",
    "ElementPolicies",
    "PolicyConflictWarning",
    "PolicyRegistry",
    "PolicyResolver",
    "ResolvedPolicy",
    "copy_field",
    "duplicatable",
    "get_registry",
    # Fields
    "FieldDescriptor",
    "fields_of",
    "instance_fields",
    "is_compatible",
    "read_field",
    "write_field",
    # Identity
    "NULL_KEY",
    "Identifiable",
    "IdentityKey",
    "ReferenceKey",
    "UniqueKey",
    "key_for",
]
