"""Container specializer: populates duplicates of container types.

Elements are transformed with the element policies resolved for the
container, in the source's iteration order. Mutable containers are filled in
place after allocation; immutable ones (tuples, frozensets) are materialised
from their transformed contents.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from graphdup.core.containers import ContainerKind
from graphdup.core.policy import CopyPolicy, ElementPolicies, PolicyResolver
from graphdup.duplication.models import SKIP
from graphdup.duplication.session import DuplicationSession

ElementTransform = Callable[[Any, CopyPolicy, DuplicationSession, ElementPolicies], Any]
"""Signature: (value, policy, session, inherited element policies) -> value or SKIP"""


class ContainerSpecializer:
    """Copies container contents according to element policies.

    Args:
        resolver: Resolves per-element policy overrides from element types.
        transform: Value-transform rule applied to each element, key and value.
    """

    def __init__(self, resolver: PolicyResolver, transform: ElementTransform) -> None:
        self._resolver = resolver
        self._transform = transform

    def populate(
        self,
        kind: ContainerKind,
        source: Any,
        duplicate: Any,
        policies: ElementPolicies,
        session: DuplicationSession,
    ) -> None:
        """Fill an allocated, empty mutable container from its source.

        Args:
            kind: Container kind of the source's concrete type.
            source: Container being duplicated.
            duplicate: Blank container of the same concrete type.
            policies: Element policies for this container.
            session: Active duplication session.
        """
        if kind is ContainerKind.MAPPING:
            for key, value in self._entries(source, policies, session):
                duplicate[key] = value
        elif kind is ContainerKind.SET:
            for item in self._items(source, policies, session):
                duplicate.add(item)
        elif kind is ContainerKind.SEQUENCE:
            for item in self._items(source, policies, session):
                duplicate.append(item)
        else:
            raise ValueError(f"{kind.name} containers are materialised, not populated")

    def materialize(
        self,
        kind: ContainerKind,
        source: Any,
        policies: ElementPolicies,
        session: DuplicationSession,
    ) -> Any:
        """Build a duplicate of an immutable container from transformed contents.

        Fixed-size sequences are written by position into a buffer pre-sized to
        the source; skipped positions keep the zero value None.

        Returns:
            New container of the source's concrete type.
        """
        cls = type(source)
        if kind is ContainerKind.FIXED_SEQUENCE:
            buffer: list[Any] = [None] * len(source)
            if policies.items is not CopyPolicy.DO_NOT_COPY:
                for index, element in enumerate(source):
                    value = self._element(element, policies.items, policies, session)
                    if value is not SKIP:
                        buffer[index] = value
            return tuple.__new__(cls, buffer)
        if kind is ContainerKind.FROZEN_SET:
            return frozenset.__new__(cls, self._items(source, policies, session))
        raise ValueError(f"{kind.name} containers are populated, not materialised")

    def _element(
        self,
        element: Any,
        inherited: CopyPolicy,
        policies: ElementPolicies,
        session: DuplicationSession,
    ) -> Any:
        policy = self._resolver.element_policy(element, inherited)
        return self._transform(element, policy, session, policies)

    def _items(
        self, source: Any, policies: ElementPolicies, session: DuplicationSession
    ) -> Iterator[Any]:
        if policies.items is CopyPolicy.DO_NOT_COPY:
            return
        for element in source:
            value = self._element(element, policies.items, policies, session)
            if value is not SKIP:
                yield value

    def _entries(
        self, source: Any, policies: ElementPolicies, session: DuplicationSession
    ) -> Iterator[tuple[Any, Any]]:
        if CopyPolicy.DO_NOT_COPY in (policies.keys, policies.values):
            return
        for key, value in source.items():
            new_key = self._element(key, policies.keys, policies, session)
            if new_key is SKIP:
                continue
            new_value = self._element(value, policies.values, policies, session)
            if new_value is SKIP:
                continue
            yield new_key, new_value
