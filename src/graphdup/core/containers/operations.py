"""Pure classification functions for containers and atomic values."""

from __future__ import annotations

import datetime
import types
import uuid
from collections import deque
from collections.abc import MutableMapping, MutableSequence, MutableSet
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from functools import cache
from typing import Any

from graphdup.core.containers.models import ContainerKind

ATOMIC_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    Decimal,
    Fraction,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    uuid.UUID,
    Enum,
    range,
    type,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
    types.EllipsisType,
    types.NotImplementedType,
)
"""Immutable value types that are never duplicated, only shared."""

BUILTIN_CONTAINERS: tuple[type, ...] = (list, dict, set, frozenset, tuple, deque, bytearray)
"""Built-in containers whose elements live in the instance itself, not in attributes."""


@cache
def is_atomic_type(cls: type) -> bool:
    """Check whether instances of a type are immutable values.

    Args:
        cls: Type to check.

    Returns:
        True if instances are primitives, text, or other immutable values.
    """
    return issubclass(cls, ATOMIC_TYPES)


def is_atomic(value: Any) -> bool:
    """Check whether a value is a primitive or text value.

    Atomic values are already independent: duplicating one returns it unchanged.
    """
    return is_atomic_type(type(value))


@cache
def container_kind(cls: type) -> ContainerKind | None:
    """Classify a type as a container kind.

    Text and byte strings are atomic, not containers. Read-only mappings
    offer no way to insert entries, so they are duplicated field by field
    like any other object.

    Args:
        cls: Concrete type to classify.

    Returns:
        The container kind, or None if the type is not a recognised container.
    """
    if is_atomic_type(cls):
        return None
    if issubclass(cls, tuple):
        return ContainerKind.FIXED_SEQUENCE
    if issubclass(cls, frozenset):
        return ContainerKind.FROZEN_SET
    if issubclass(cls, (dict, MutableMapping)):
        return ContainerKind.MAPPING
    if issubclass(cls, (set, MutableSet)):
        return ContainerKind.SET
    if issubclass(cls, (list, MutableSequence)):
        return ContainerKind.SEQUENCE
    return None
