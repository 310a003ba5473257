"""Tests for policy declarations and resolution.

Critical Invariants:
- Field-level declaration beats type-level, which beats the structural default
- Fields of container types default to DO_NOT_COPY, others to COPY
- Conflicting policies on atomic fields degrade to COPY with a warning
"""

import warnings
from dataclasses import dataclass, field
from typing import Annotated

import pytest

from graphdup import CopyAs, CopyPolicy, PolicyConflictWarning, copy_field, duplicatable
from graphdup.core.fields import fields_of
from graphdup.core.policy import (
    COPY_METADATA_KEY,
    ElementPolicies,
    PolicyRegistry,
    PolicyResolver,
    get_registry,
)


@duplicatable(CopyPolicy.DUPLICATE)
@dataclass
class Bounds:
    lower: float = 0.0
    upper: float = 1.0


@dataclass
class Shape:
    bounds: Bounds
    overridden: Annotated[Bounds, CopyAs(CopyPolicy.COPY)]
    owner: object = copy_field(CopyPolicy.MAP, default=None)
    notes: list[str] = field(default_factory=list)


class ShapeList(list):
    pass


def _descriptor(cls, name):
    return next(d for d in fields_of(cls) if d.name == name)


# Policy model


def test_mapping_policies_fall_back_as_declared():
    """MAP_OR_* fall back to their named policy; plain MAP skips."""
    assert CopyPolicy.MAP_OR_COPY.on_unmapped() is CopyPolicy.COPY
    assert CopyPolicy.MAP_OR_DUPLICATE.on_unmapped() is CopyPolicy.DUPLICATE
    assert CopyPolicy.MAP.on_unmapped() is CopyPolicy.DO_NOT_COPY
    assert CopyPolicy.DUPLICATE.on_unmapped() is CopyPolicy.DUPLICATE


def test_is_mapping_only_for_map_policies():
    mapping = {policy for policy in CopyPolicy if policy.is_mapping}
    assert mapping == {CopyPolicy.MAP, CopyPolicy.MAP_OR_COPY, CopyPolicy.MAP_OR_DUPLICATE}


def test_copy_as_rejects_non_policies():
    with pytest.raises(TypeError, match="policy must be a CopyPolicy"):
        CopyAs("DUPLICATE")  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="items must be a CopyPolicy"):
        CopyAs(CopyPolicy.COPY, items="x")  # type: ignore[arg-type]


def test_coerce_wraps_bare_policy():
    assert CopyAs.coerce(CopyPolicy.MAP) == CopyAs(CopyPolicy.MAP)


def test_copy_field_stores_declaration_in_metadata():
    declaration = _descriptor(Shape, "owner").declaration
    assert declaration == CopyAs(CopyPolicy.MAP)
    shape_field = next(f for f in Shape.__dataclass_fields__.values() if f.name == "owner")
    assert shape_field.metadata[COPY_METADATA_KEY] == CopyAs(CopyPolicy.MAP)


# Registry


def test_duplicatable_registers_type_level_policy():
    assert get_registry().declaration_for(Bounds) == CopyAs(CopyPolicy.DUPLICATE)
    assert Bounds.__copy_policy__ == CopyAs(CopyPolicy.DUPLICATE)


def test_bare_duplicatable_registers_without_policy():
    @duplicatable
    @dataclass
    class Plain:
        value: int

    assert get_registry().is_registered(Plain)
    assert get_registry().declaration_for(Plain) is None


def test_declarations_are_inherited():
    """Subclasses use the nearest declaration in their MRO."""

    @dataclass
    class DerivedBounds(Bounds):
        extra: int = 0

    assert get_registry().declaration_for(DerivedBounds) == CopyAs(CopyPolicy.DUPLICATE)


def test_duplicatable_merges_element_keywords():
    @duplicatable(CopyPolicy.DUPLICATE, items=CopyPolicy.MAP_OR_COPY)
    class Face(list):
        pass

    declaration = get_registry().declaration_for(Face)
    assert declaration == CopyAs(CopyPolicy.DUPLICATE, items=CopyPolicy.MAP_OR_COPY)


def test_register_rejects_non_class(registry):
    with pytest.raises(TypeError, match="Only classes"):
        registry.register("not a class")  # type: ignore[arg-type]


def test_register_third_party_type(registry):
    """Types that cannot be decorated are registered imperatively."""
    registry.register(ShapeList, CopyPolicy.DUPLICATE)
    assert registry.declaration_for(ShapeList) == CopyAs(CopyPolicy.DUPLICATE)
    registry.clear()
    assert registry.declaration_for(ShapeList) is None


# Resolution order


def test_field_level_beats_type_level():
    resolver = PolicyResolver()
    resolved = resolver.policy_for(_descriptor(Shape, "overridden"))
    assert resolved.field is CopyPolicy.COPY


def test_type_level_applies_without_field_declaration():
    resolver = PolicyResolver()
    assert resolver.policy_for(_descriptor(Shape, "bounds")).field is CopyPolicy.DUPLICATE


def test_structural_default_copy_for_plain_owner():
    resolver = PolicyResolver()
    assert resolver.policy_for(_descriptor(Shape, "notes")).field is CopyPolicy.COPY


def test_structural_default_do_not_copy_for_container_owner():
    resolver = PolicyResolver()
    resolved = resolver.policy_for(_descriptor(Shape, "notes"), container_source=True)
    assert resolved.field is CopyPolicy.DO_NOT_COPY


def test_cache_follows_registry_changes():
    """Cached resolutions are dropped when the registry changes."""
    registry = PolicyRegistry()
    resolver = PolicyResolver(registry)
    descriptor = _descriptor(Shape, "bounds")
    assert resolver.policy_for(descriptor).field is CopyPolicy.COPY

    registry.register(Bounds, CopyPolicy.MAP_OR_COPY)

    assert resolver.policy_for(descriptor).field is CopyPolicy.MAP_OR_COPY


def test_untyped_field_uses_runtime_type_of_value():
    from graphdup.core.fields import FieldDescriptor

    resolver = PolicyResolver()
    dynamic = FieldDescriptor(owner=Shape, name="extra", dynamic=True)
    assert resolver.policy_for(dynamic, value=Bounds()).field is CopyPolicy.DUPLICATE
    assert resolver.policy_for(dynamic, value=3).field is CopyPolicy.COPY


# Policy conflicts


def test_duplicate_on_atomic_field_degrades_to_copy_with_warning():
    @dataclass
    class Labelled:
        label: Annotated[str, CopyAs(CopyPolicy.DUPLICATE)]

    resolver = PolicyResolver()
    with pytest.warns(PolicyConflictWarning, match="Labelled.label declares DUPLICATE"):
        resolved = resolver.policy_for(_descriptor(Labelled, "label"))
    assert resolved.field is CopyPolicy.COPY


def test_policy_conflict_warning_can_be_disabled():
    @dataclass
    class Counted:
        count: Annotated[int, CopyAs(CopyPolicy.MAP)]

    resolver = PolicyResolver(warn_on_conflict=False)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert resolver.policy_for(_descriptor(Counted, "count")).field is CopyPolicy.COPY


# Element policies


def test_element_policies_default_to_inherited():
    resolver = PolicyResolver()
    inherited = ElementPolicies.uniform(CopyPolicy.COPY)
    assert resolver.element_policies(None, list, inherited) == inherited


def test_keys_and_values_follow_items():
    resolver = PolicyResolver()
    declaration = CopyAs(CopyPolicy.DUPLICATE, items=CopyPolicy.DUPLICATE, keys=CopyPolicy.COPY)
    policies = resolver.element_policies(
        declaration, dict, ElementPolicies.uniform(CopyPolicy.COPY)
    )
    assert policies == ElementPolicies(
        items=CopyPolicy.DUPLICATE, keys=CopyPolicy.COPY, values=CopyPolicy.DUPLICATE
    )


def test_container_type_declaration_supplies_element_policies(registry):
    registry.register(ShapeList, CopyAs(CopyPolicy.DUPLICATE, items=CopyPolicy.MAP_OR_COPY))
    resolver = PolicyResolver(registry)
    policies = resolver.element_policies(
        None, ShapeList, ElementPolicies.uniform(CopyPolicy.COPY)
    )
    assert policies.items is CopyPolicy.MAP_OR_COPY


def test_element_type_declaration_overrides_inherited_policy():
    resolver = PolicyResolver()
    assert resolver.element_policy(Bounds(), CopyPolicy.COPY) is CopyPolicy.DUPLICATE
    assert resolver.element_policy("text", CopyPolicy.COPY) is CopyPolicy.COPY
    assert resolver.element_policy(None, CopyPolicy.MAP) is CopyPolicy.MAP
