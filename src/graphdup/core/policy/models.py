"""Policy models: copy behaviours and their declarations.

A policy tells the duplicator what to do with a field or container element:
share it, skip it, duplicate it, or resolve it through the session map.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

COPY_METADATA_KEY = "copy_policy"
"""Dataclass field metadata key holding a CopyAs declaration."""


class CopyPolicy(Enum):
    """Behaviour of a field or element during duplication."""

    COPY = auto()  # Assign the same reference/value
    DO_NOT_COPY = auto()  # Leave the target at its zero value
    DUPLICATE = auto()  # Recursively produce an independent copy
    MAP = auto()  # Resolve via the session map only, else leave unset
    MAP_OR_COPY = auto()  # Resolve via the session map, else COPY
    MAP_OR_DUPLICATE = auto()  # Resolve via the session map, else DUPLICATE

    @property
    def is_mapping(self) -> bool:
        """True for policies that consult the session map first."""
        return self in (CopyPolicy.MAP, CopyPolicy.MAP_OR_COPY, CopyPolicy.MAP_OR_DUPLICATE)

    def on_unmapped(self) -> CopyPolicy:
        """Fallback policy when a mapping policy finds no session entry.

        Returns:
            COPY for MAP_OR_COPY, DUPLICATE for MAP_OR_DUPLICATE,
            DO_NOT_COPY (skip) for MAP. Non-mapping policies return themselves.
        """
        if self is CopyPolicy.MAP_OR_COPY:
            return CopyPolicy.COPY
        if self is CopyPolicy.MAP_OR_DUPLICATE:
            return CopyPolicy.DUPLICATE
        if self is CopyPolicy.MAP:
            return CopyPolicy.DO_NOT_COPY
        return self


def _check_policy(name: str, value: object) -> None:
    if value is not None and not isinstance(value, CopyPolicy):
        raise TypeError(f"{name} must be a CopyPolicy or None, got {value!r}")


@dataclass(frozen=True, slots=True)
class CopyAs:
    """Declaration of copy behaviour for a field or a type.

    Use as `typing.Annotated` metadata on a field, as dataclass field metadata
    (see `copy_field`), or as the argument of `@duplicatable`.

    Attributes:
        policy: Behaviour for the field (or for fields of the declared type).
        items: Element policy when the value is a sequence or set container.
        keys: Key policy for mapping containers. Defaults to `items`.
        values: Value policy for mapping containers. Defaults to `items`.

    Example:
        faces: Annotated[list[Face], CopyAs(CopyPolicy.DUPLICATE, items=CopyPolicy.DUPLICATE)]
    """

    policy: CopyPolicy = CopyPolicy.COPY
    items: CopyPolicy | None = None
    keys: CopyPolicy | None = None
    values: CopyPolicy | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.policy, CopyPolicy):
            raise TypeError(f"policy must be a CopyPolicy, got {self.policy!r}")
        _check_policy("items", self.items)
        _check_policy("keys", self.keys)
        _check_policy("values", self.values)

    @property
    def declares_elements(self) -> bool:
        """True if any element policy is declared."""
        return self.items is not None or self.keys is not None or self.values is not None

    @classmethod
    def coerce(cls, declaration: CopyAs | CopyPolicy) -> CopyAs:
        """Normalise a bare CopyPolicy into a CopyAs declaration."""
        if isinstance(declaration, CopyAs):
            return declaration
        if isinstance(declaration, CopyPolicy):
            return cls(declaration)
        raise TypeError(f"Expected CopyAs or CopyPolicy, got {declaration!r}")


@dataclass(frozen=True, slots=True)
class ElementPolicies:
    """Resolved element policies for one container duplication."""

    items: CopyPolicy = CopyPolicy.COPY
    keys: CopyPolicy = CopyPolicy.COPY
    values: CopyPolicy = CopyPolicy.COPY

    @classmethod
    def uniform(cls, policy: CopyPolicy) -> ElementPolicies:
        """Same policy for items, keys and values."""
        return cls(items=policy, keys=policy, values=policy)


@dataclass(frozen=True, slots=True)
class ResolvedPolicy:
    """Result of resolving a field's policy.

    Attributes:
        field: Policy applied to the field value itself.
        elements: Declaration carrying element policies for a container value,
            or None if the resolving declaration did not specify any.
    """

    field: CopyPolicy
    elements: CopyAs | None = None


class PolicyConflictWarning(UserWarning):
    """A policy was declared that cannot apply to the field's type.

    Emitted, not raised: the conflicting policy is treated as COPY.
    """
