"""Duplication services: sessions, allocation, containers, hooks, and the duplicator.

Architecture Note:
    duplication/ is the stateful layer. A DuplicationSession holds the
    identity map of one operation; GraphDuplicator walks the graph using the
    stateless policy, identity and field functionalities from core/.
"""

from graphdup.duplication.allocator import InstantiationError, allocate
from graphdup.duplication.containers import ContainerSpecializer
from graphdup.duplication.duplicator import (
    GraphDuplicator,
    copy_fields_from,
    copy_properties_from,
    duplicate,
    duplicate_all,
    get_duplicator,
    set_duplicator,
)
from graphdup.duplication.hooks import PostDuplicable, invoke_post_duplicate
from graphdup.duplication.models import SKIP, DuplicatorConfig
from graphdup.duplication.session import DuplicationSession, SessionInUseError

__all__ = [
    "InstantiationError",
    "allocate",
    "ContainerSpecializer",
    "GraphDuplicator",
    "copy_fields_from",
    "copy_properties_from",
    "duplicate",
    "duplicate_all",
    "get_duplicator",
    "set_duplicator",
    "PostDuplicable",
    "invoke_post_duplicate",
    "SKIP",
    "DuplicatorConfig",
    "DuplicationSession",
    "SessionInUseError",
]
