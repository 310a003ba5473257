"""Policy registry, declaration helpers, and policy resolution.

Usage:
    @duplicatable(CopyPolicy.DUPLICATE)
    @dataclass
    class BoundingBox:
        lower: float
        upper: float

    @dataclass
    class Element:
        name: str
        bounds: BoundingBox                                 # DUPLICATE (type level)
        node: Annotated[Node, CopyAs(CopyPolicy.MAP)]       # field level
        cache: dict = copy_field(CopyPolicy.DO_NOT_COPY, default_factory=dict)
"""

from __future__ import annotations

import dataclasses
import warnings
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, overload

from graphdup.core.containers import is_atomic_type
from graphdup.core.policy.models import (
    COPY_METADATA_KEY,
    CopyAs,
    CopyPolicy,
    ElementPolicies,
    PolicyConflictWarning,
    ResolvedPolicy,
)

if TYPE_CHECKING:
    from graphdup.core.fields import FieldDescriptor


class PolicyRegistry:
    """Process-local registry of type-level copy declarations.

    Declarations are inherited: looking up a subclass returns the declaration
    of the first registered class in its MRO.
    """

    def __init__(self) -> None:
        """Initialize empty policy registry."""
        self._by_type: dict[type, CopyAs | None] = {}
        self._lookup_cache: dict[type, CopyAs | None] = {}
        self._version = 0

    @property
    def version(self) -> int:
        """Counter incremented on every change, for cache invalidation."""
        return self._version

    def register(self, cls: type, declaration: CopyAs | CopyPolicy | None = None) -> None:
        """Register a type, optionally with a type-level copy declaration.

        Args:
            cls: Type to register.
            declaration: Policy for fields declared with this type, or None
                to register the type without changing its copy behaviour.

        Raises:
            TypeError: If cls is not a class.
        """
        if not isinstance(cls, type):
            raise TypeError(f"Only classes can carry copy declarations, got {cls!r}")
        self._by_type[cls] = CopyAs.coerce(declaration) if declaration is not None else None
        self._lookup_cache.clear()
        self._version += 1

    def declaration_for(self, cls: type) -> CopyAs | None:
        """Get the type-level declaration for a type, following inheritance.

        Args:
            cls: Type to look up.

        Returns:
            The nearest declaration in the MRO, or None if there is none.
        """
        try:
            return self._lookup_cache[cls]
        except KeyError:
            pass
        declaration = None
        for klass in getattr(cls, "__mro__", (cls,)):
            found = self._by_type.get(klass)
            if found is not None:
                declaration = found
                break
        self._lookup_cache[cls] = declaration
        return declaration

    def is_registered(self, cls: type) -> bool:
        """Check if a type was registered directly."""
        return cls in self._by_type

    def clear(self) -> None:
        """Remove all registrations."""
        self._by_type.clear()
        self._lookup_cache.clear()
        self._version += 1


# Module-level registry instance
_registry = PolicyRegistry()


def get_registry() -> PolicyRegistry:
    """Access the global policy registry.

    Returns:
        The process-local PolicyRegistry instance.
    """
    return _registry


@overload
def duplicatable[C: type](cls: C, /) -> C: ...


@overload
def duplicatable[C: type](
    cls: CopyPolicy | CopyAs | None = None,
    /,
    *,
    items: CopyPolicy | None = None,
    keys: CopyPolicy | None = None,
    values: CopyPolicy | None = None,
) -> Callable[[C], C]: ...


def duplicatable(
    cls: Any = None,
    /,
    *,
    items: CopyPolicy | None = None,
    keys: CopyPolicy | None = None,
    values: CopyPolicy | None = None,
) -> Any:
    """Register a class with an optional type-level copy declaration.

    Supports these forms:
        @duplicatable                                       # register only
        @duplicatable()                                     # same
        @duplicatable(CopyPolicy.DUPLICATE)                 # type-level policy
        @duplicatable(CopyPolicy.DUPLICATE, items=CopyPolicy.DUPLICATE)

    A type-level policy applies to every field declared with this type (or a
    subclass) that has no field-level declaration, and to container elements
    of this type. Element policies apply when instances are containers.

    Args:
        cls: The class when used bare, otherwise the type-level policy.
        items: Element policy for sequence and set instances.
        keys: Key policy for mapping instances.
        values: Value policy for mapping instances.

    Returns:
        Decorated class or decorator function.
    """
    if isinstance(cls, type):
        _registry.register(cls)
        cls.__copy_policy__ = None  # type: ignore[attr-defined]
        return cls

    declaration: CopyAs | None = None
    if cls is not None or items is not None or keys is not None or values is not None:
        base = CopyAs.coerce(cls) if cls is not None else CopyAs()
        declaration = CopyAs(
            base.policy,
            items=items if items is not None else base.items,
            keys=keys if keys is not None else base.keys,
            values=values if values is not None else base.values,
        )

    def decorator(c: type) -> type:
        _registry.register(c, declaration)
        c.__copy_policy__ = declaration  # type: ignore[attr-defined]
        return c

    return decorator


def copy_field(
    policy: CopyPolicy = CopyPolicy.COPY,
    *,
    items: CopyPolicy | None = None,
    keys: CopyPolicy | None = None,
    values: CopyPolicy | None = None,
    metadata: dict[str, Any] | None = None,
    **field_kwargs: Any,
) -> Any:
    """Dataclass field with an attached copy declaration.

    Accepts every `dataclasses.field` keyword argument.

    Example:
        owner: Node | None = copy_field(CopyPolicy.MAP, default=None)
    """
    merged = dict(metadata or {})
    merged[COPY_METADATA_KEY] = CopyAs(policy, items=items, keys=keys, values=values)
    return dataclasses.field(metadata=merged, **field_kwargs)


class PolicyResolver:
    """Resolves the policy of fields and container elements.

    Resolution order for a field is strict: declaration on the field itself,
    then declaration on the field's declared type, then the structural
    default (DO_NOT_COPY for fields of container types, COPY otherwise).

    Args:
        registry: Registry of type-level declarations.
        cache: Cache resolutions per field descriptor.
        warn_on_conflict: Emit PolicyConflictWarning for policies that cannot
            apply to atomic field types.
    """

    def __init__(
        self,
        registry: PolicyRegistry | None = None,
        cache: bool = True,
        warn_on_conflict: bool = True,
    ) -> None:
        self._registry = registry or _registry
        self._cache_enabled = cache
        self._warn_on_conflict = warn_on_conflict
        self._cache: dict[tuple[FieldDescriptor, bool], ResolvedPolicy] = {}
        self._cache_version = self._registry.version
        self._warned: set[FieldDescriptor] = set()

    @property
    def registry(self) -> PolicyRegistry:
        """Registry consulted for type-level declarations."""
        return self._registry

    def policy_for(
        self,
        descriptor: FieldDescriptor,
        container_source: bool = False,
        value: Any = None,
    ) -> ResolvedPolicy:
        """Resolve the policy of one field.

        Args:
            descriptor: Field to resolve.
            container_source: True if the field's owner is a container type.
            value: Current field value. Only used when the field has no
                usable declared type (dynamic attributes, `Any`), in which
                case the value's runtime type is consulted.

        Returns:
            The resolved field policy and any element declaration.
        """
        field_type = descriptor.field_type
        if descriptor.declaration is None and field_type in (None, object):
            # No declared class to look up: use the runtime type
            return self._resolve(descriptor, type(value), container_source)

        if not self._cache_enabled:
            return self._resolve(descriptor, field_type, container_source)

        if self._cache_version != self._registry.version:
            self._cache.clear()
            self._cache_version = self._registry.version
        key = (descriptor, container_source)
        resolved = self._cache.get(key)
        if resolved is None:
            resolved = self._resolve(descriptor, field_type, container_source)
            self._cache[key] = resolved
        return resolved

    def _resolve(
        self,
        descriptor: FieldDescriptor,
        field_type: type | None,
        container_source: bool,
    ) -> ResolvedPolicy:
        declaration = descriptor.declaration
        if declaration is None and field_type is not None:
            declaration = self._registry.declaration_for(field_type)
        if declaration is None:
            default = CopyPolicy.DO_NOT_COPY if container_source else CopyPolicy.COPY
            return ResolvedPolicy(default)

        policy = declaration.policy
        if (
            policy not in (CopyPolicy.COPY, CopyPolicy.DO_NOT_COPY)
            and field_type is not None
            and is_atomic_type(field_type)
        ):
            self._report_conflict(descriptor, policy, field_type)
            policy = CopyPolicy.COPY
        return ResolvedPolicy(policy, declaration if declaration.declares_elements else None)

    def _report_conflict(
        self, descriptor: FieldDescriptor, policy: CopyPolicy, field_type: type
    ) -> None:
        if not self._warn_on_conflict or descriptor in self._warned:
            return
        self._warned.add(descriptor)
        warnings.warn(
            f"{descriptor.owner.__name__}.{descriptor.name} declares {policy.name} "
            f"but {field_type.__name__} values are atomic; treating it as COPY.",
            PolicyConflictWarning,
            stacklevel=4,
        )

    def element_policies(
        self,
        declaration: CopyAs | None,
        container_type: type,
        inherited: ElementPolicies,
    ) -> ElementPolicies:
        """Resolve the element policies for one container value.

        Precedence: the declaration holding the container (field level or
        caller supplied), then the container type's own declaration, then
        the inherited policies.

        Args:
            declaration: Declaration attached to the field (or passed by the
                caller) that holds the container, if any.
            container_type: Concrete type of the container.
            inherited: Policies used for whatever is not declared.

        Returns:
            Element policies. Undeclared keys and values follow `items`.
        """
        if declaration is None or not declaration.declares_elements:
            declaration = self._registry.declaration_for(container_type)
        if declaration is None or not declaration.declares_elements:
            return inherited
        if declaration.items is None:
            return ElementPolicies(
                items=inherited.items,
                keys=declaration.keys if declaration.keys is not None else inherited.keys,
                values=declaration.values if declaration.values is not None else inherited.values,
            )
        items = declaration.items
        return ElementPolicies(
            items=items,
            keys=declaration.keys if declaration.keys is not None else items,
            values=declaration.values if declaration.values is not None else items,
        )

    def element_policy(self, element: Any, inherited: CopyPolicy) -> CopyPolicy:
        """Policy for one container element.

        An element whose runtime type carries a type-level declaration uses
        that policy; otherwise the inherited element policy applies.
        """
        if element is None:
            return inherited
        declaration = self._registry.declaration_for(type(element))
        return declaration.policy if declaration is not None else inherited
