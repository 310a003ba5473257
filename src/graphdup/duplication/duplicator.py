"""Graph duplicator: policy-driven deep copy of possibly cyclic object graphs.

Usage:
    @duplicatable(CopyPolicy.DUPLICATE)
    @dataclass
    class Tag:
        label: str

    @dataclass
    class Material:
        name: str
        tag: Annotated[Tag, CopyAs(CopyPolicy.MAP_OR_DUPLICATE)]

    shared = Tag("structural")
    steel, concrete = duplicate_all([Material("steel", shared), Material("concrete", shared)])
    assert steel.tag is concrete.tag and steel.tag is not shared

Every source object is registered in the session immediately after its blank
duplicate is allocated and before any field is copied, so references that
lead back to it (cycles, or several paths to one object) resolve to the same
duplicate instead of recursing again.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, get_type_hints

from graphdup.core.containers import container_kind, is_atomic
from graphdup.core.fields import (
    FieldDescriptor,
    fields_of,
    instance_fields,
    is_compatible,
    read_field,
    write_field,
)
from graphdup.core.policy import (
    CopyAs,
    CopyPolicy,
    ElementPolicies,
    PolicyRegistry,
    PolicyResolver,
)
from graphdup.core.types import MISSING, Duplicated
from graphdup.duplication.allocator import allocate
from graphdup.duplication.containers import ContainerSpecializer
from graphdup.duplication.hooks import invoke_post_duplicate
from graphdup.duplication.models import SKIP, DuplicatorConfig
from graphdup.duplication.session import DuplicationSession


def _property_descriptor(owner: type, name: str, prop: property) -> FieldDescriptor:
    """Describe a property as a field typed by its getter's return annotation."""
    try:
        declared = get_type_hints(prop.fget).get("return", Any)
    except (NameError, TypeError):
        declared = Any
    return FieldDescriptor(owner=owner, name=name, declared_type=declared)


def _root_declaration(items: CopyPolicy | CopyAs | None) -> CopyAs | None:
    if items is None:
        return None
    if isinstance(items, CopyAs):
        return items
    return CopyAs(CopyPolicy.DUPLICATE, items=items)


class GraphDuplicator:
    """Duplicates object graphs according to declared copy policies.

    Stateless between calls apart from policy caches: all per-operation state
    lives in the DuplicationSession.

    Args:
        config: Duplicator configuration. Defaults to DuplicatorConfig().
        registry: Registry of type-level declarations. Defaults to the
            process-wide registry.
    """

    def __init__(
        self,
        config: DuplicatorConfig | None = None,
        registry: PolicyRegistry | None = None,
    ) -> None:
        self._config = config or DuplicatorConfig()
        self._resolver = PolicyResolver(
            registry,
            cache=self._config.cache_policies,
            warn_on_conflict=self._config.warn_on_policy_conflict,
        )
        self._default_elements = ElementPolicies.uniform(self._config.default_items_policy)
        self._containers = ContainerSpecializer(self._resolver, self.transform)

    @property
    def config(self) -> DuplicatorConfig:
        """Configuration this duplicator was built with."""
        return self._config

    @property
    def resolver(self) -> PolicyResolver:
        """Policy resolver used for fields and elements."""
        return self._resolver

    def duplicate[T](
        self,
        source: T,
        session: DuplicationSession | None = None,
        items: CopyPolicy | CopyAs | None = None,
    ) -> Duplicated[T]:
        """Produce a duplicate of an object graph.

        Args:
            source: Root object. None returns None; atomic values return themselves.
            session: Session to share with other calls. A fresh one is used if None.
            items: Element policy for the root, if it is a container. A CopyAs
                may set key and value policies for mappings.

        Returns:
            Duplicate of the root, of the same concrete type.

        Raises:
            InstantiationError: If some object in the graph cannot be allocated.
            SessionInUseError: If the session is held by another thread.
        """
        session = session if session is not None else DuplicationSession()
        with session.acquire():
            return self._duplicate(source, session, _root_declaration(items), None)

    def duplicate_all[T](
        self,
        sources: Iterable[T],
        session: DuplicationSession | None = None,
        items: CopyPolicy | CopyAs | None = None,
    ) -> list[Duplicated[T]]:
        """Duplicate several roots, in order, against one session.

        References between the roots (and to objects they share) stay
        consistent among the duplicates.

        Returns:
            Duplicates in the order of the sources.
        """
        session = session if session is not None else DuplicationSession()
        declaration = _root_declaration(items)
        with session.acquire():
            return [self._duplicate(source, session, declaration, None) for source in sources]

    def transform(
        self,
        value: Any,
        policy: CopyPolicy,
        session: DuplicationSession,
        inherited: ElementPolicies | None = None,
        declaration: CopyAs | None = None,
    ) -> Any:
        """Apply a copy policy to one field value, element, key or value.

        Args:
            value: Raw value read from the source.
            policy: Resolved policy.
            session: Active session.
            inherited: Element policies passed down from an enclosing container.
            declaration: Declaration carrying element policies for the value.

        Returns:
            The value to assign, or SKIP to leave the target unassigned.
        """
        if policy is CopyPolicy.DO_NOT_COPY:
            return SKIP
        if policy.is_mapping:
            mapped = session.lookup(value)
            if mapped is not MISSING:
                return mapped
            policy = policy.on_unmapped()
            if policy is CopyPolicy.DO_NOT_COPY:
                return SKIP
        if policy is CopyPolicy.COPY:
            return value
        return self._duplicate(value, session, declaration, inherited)

    def _duplicate(
        self,
        source: Any,
        session: DuplicationSession,
        declaration: CopyAs | None,
        inherited: ElementPolicies | None,
    ) -> Any:
        if source is None or is_atomic(source):
            return source
        existing = session.lookup(source)
        if existing is not MISSING:
            return existing

        cls = type(source)
        kind = container_kind(cls)
        if kind is None:
            duplicate = allocate(cls, source, self._config.allow_raw_allocation)
            session.register(source, duplicate)
            self._copy_fields(duplicate, source, session, container_source=False)
            invoke_post_duplicate(duplicate)
            return duplicate

        policies = self._resolver.element_policies(
            declaration, cls, inherited or self._default_elements
        )
        if kind.is_immutable:
            duplicate = self._containers.materialize(kind, source, policies, session)
            existing = session.lookup(source)
            if existing is not MISSING:
                # An element led back here and registered its own duplicate first
                return existing
            session.register(source, duplicate)
        else:
            duplicate = allocate(cls, source, self._config.allow_raw_allocation)
            session.register(source, duplicate)
            self._copy_fields(duplicate, source, session, container_source=True)
            self._containers.populate(kind, source, duplicate, policies, session)
        invoke_post_duplicate(duplicate)
        return duplicate

    def _copy_fields(
        self,
        target: Any,
        source: Any,
        session: DuplicationSession,
        container_source: bool,
    ) -> None:
        same_type = type(target) is type(source)
        target_fields = None
        if not same_type:
            target_fields = {descriptor.name: descriptor for descriptor in fields_of(type(target))}
        for descriptor in instance_fields(source):
            target_descriptor = (
                descriptor if same_type else self._counterpart(descriptor, target, target_fields)
            )
            if target_descriptor is None:
                continue
            value = read_field(source, descriptor)
            if value is MISSING:
                continue
            resolved = self._resolver.policy_for(descriptor, container_source, value)
            result = self.transform(value, resolved.field, session, None, resolved.elements)
            if result is SKIP:
                self._leave_at_zero(target, target_descriptor)
            else:
                write_field(target, target_descriptor, result)

    def _counterpart(
        self,
        descriptor: FieldDescriptor,
        target: Any,
        target_fields: dict[str, FieldDescriptor] | None,
    ) -> FieldDescriptor | None:
        """Find the target field matching a source field by name and type."""
        candidate = (target_fields or {}).get(descriptor.name)
        if candidate is None:
            if descriptor.dynamic and hasattr(target, "__dict__"):
                return FieldDescriptor(owner=type(target), name=descriptor.name, dynamic=True)
            return None
        return candidate if is_compatible(candidate, descriptor) else None

    @staticmethod
    def _leave_at_zero(target: Any, descriptor: FieldDescriptor) -> None:
        if descriptor.dynamic or read_field(target, descriptor) is not MISSING:
            return
        write_field(target, descriptor, descriptor.zero_value())

    def copy_fields_from(
        self,
        target: Any,
        source: Any,
        session: DuplicationSession | None = None,
    ) -> None:
        """Populate an existing object's fields from another object.

        Fields are matched by name and compatible declared type; the source
        field's policy decides how each value is transferred.

        Args:
            target: Object to write to.
            source: Object to read from. Never modified.
            session: Session for MAP policies and shared duplicates.
        """
        session = session if session is not None else DuplicationSession()
        with session.acquire():
            self._copy_fields(
                target,
                source,
                session,
                container_source=container_kind(type(source)) is not None,
            )

    @staticmethod
    def copy_properties_from(target: Any, source: Any) -> None:
        """Shallow-copy public property values between objects.

        Every public property of the target's type that has a setter receives
        the value of the same-named readable property of the source's type.
        When both getters annotate a return type, the source's must be a
        subclass of the target's. Plain source attributes are ignored and
        copy policies are not consulted.

        Args:
            target: Object whose properties are set.
            source: Object to read from.
        """
        seen: set[str] = set()
        for klass in type(target).__mro__:
            for name, member in vars(klass).items():
                if name in seen or name.startswith("_"):
                    continue
                seen.add(name)
                if not isinstance(member, property) or member.fset is None:
                    continue
                readable = getattr(type(source), name, None)
                if not isinstance(readable, property) or readable.fget is None:
                    continue
                if not is_compatible(
                    _property_descriptor(type(target), name, member),
                    _property_descriptor(type(source), name, readable),
                ):
                    continue
                setattr(target, name, readable.fget(source))


# Module-level duplicator instance
_duplicator = GraphDuplicator()


def get_duplicator() -> GraphDuplicator:
    """Access the default duplicator used by module-level helpers."""
    return _duplicator


def set_duplicator(duplicator: GraphDuplicator) -> GraphDuplicator:
    """Replace the default duplicator.

    Returns:
        The previous default duplicator.
    """
    global _duplicator
    previous, _duplicator = _duplicator, duplicator
    return previous


def duplicate[T](
    source: T,
    session: DuplicationSession | None = None,
    items: CopyPolicy | CopyAs | None = None,
) -> Duplicated[T]:
    """Duplicate an object graph with the default duplicator."""
    return _duplicator.duplicate(source, session, items)


def duplicate_all[T](
    sources: Iterable[T],
    session: DuplicationSession | None = None,
    items: CopyPolicy | CopyAs | None = None,
) -> list[Duplicated[T]]:
    """Duplicate several roots against one session with the default duplicator."""
    return _duplicator.duplicate_all(sources, session, items)


def copy_fields_from(target: Any, source: Any, session: DuplicationSession | None = None) -> None:
    """Populate an existing object's fields from another with the default duplicator."""
    _duplicator.copy_fields_from(target, source, session)


def copy_properties_from(target: Any, source: Any) -> None:
    """Shallow-copy public property values between objects."""
    GraphDuplicator.copy_properties_from(target, source)
