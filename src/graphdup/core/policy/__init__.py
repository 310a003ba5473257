"""Policy functionality: copy behaviours, declarations, registry, and resolution."""

from graphdup.core.policy.core import (
    PolicyRegistry,
    PolicyResolver,
    copy_field,
    duplicatable,
    get_registry,
)
from graphdup.core.policy.models import (
    COPY_METADATA_KEY,
    CopyAs,
    CopyPolicy,
    ElementPolicies,
    PolicyConflictWarning,
    ResolvedPolicy,
)

__all__ = [
    # Models
    "COPY_METADATA_KEY",
    "CopyAs",
    "CopyPolicy",
    "ElementPolicies",
    "PolicyConflictWarning",
    "ResolvedPolicy",
    # Core
    "PolicyRegistry",
    "PolicyResolver",
    "copy_field",
    "duplicatable",
    "get_registry",
]
