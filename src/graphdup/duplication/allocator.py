"""Blank-instance allocation.

Duplicates start as blank instances of the source's concrete type, created
without running `__init__` or a user-defined `__new__`, so no validation or
business logic executes. Containers whose storage only exists after
`__init__` are the exception: they are built empty through their
no-argument constructor.
"""

from __future__ import annotations

import copy
from collections import defaultdict, deque
from typing import Any

from graphdup.core.containers import BUILTIN_CONTAINERS, container_kind
from graphdup.core.fields import is_pydantic_model


class InstantiationError(TypeError):
    """Raised when no blank instance of a type can be allocated.

    Fatal: aborts the whole duplication operation.

    Attributes:
        cls: The type that could not be allocated.
    """

    def __init__(self, cls: type, reason: str = "") -> None:
        self.cls = cls
        message = f"Cannot allocate a blank instance of {cls.__qualname__}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


def _allocate_pydantic(cls: type, source: Any) -> Any:
    """Blank pydantic model, mirroring BaseModel.__copy__ with an empty __dict__."""
    instance = _raw_allocate(cls)
    object.__setattr__(instance, "__dict__", {})
    object.__setattr__(
        instance, "__pydantic_extra__", copy.copy(getattr(source, "__pydantic_extra__", None))
    )
    object.__setattr__(
        instance,
        "__pydantic_fields_set__",
        set(getattr(source, "__pydantic_fields_set__", ())),
    )
    object.__setattr__(
        instance, "__pydantic_private__", copy.copy(getattr(source, "__pydantic_private__", None))
    )
    return instance


def _overrides_new(cls: type) -> bool:
    """Check whether a Python-level `__new__` precedes the built-in one in the MRO."""
    for klass in cls.__mro__:
        new = vars(klass).get("__new__")
        if new is not None:
            return isinstance(new, staticmethod)
    return False


def _raw_allocate(cls: type) -> Any:
    """Allocate with the first built-in `__new__` in the MRO.

    User-level `__new__` overrides are skipped.
    """
    for klass in cls.__mro__:
        new = vars(klass).get("__new__")
        if new is None or isinstance(new, staticmethod):
            continue
        try:
            return klass.__new__(cls)  # type: ignore[call-overload]
        except TypeError as exc:
            raise InstantiationError(cls, str(exc)) from exc
    raise InstantiationError(cls, "no built-in allocator in MRO")


def _stores_elements_in_attributes(cls: type) -> bool:
    """Check whether a container keeps its elements in instance attributes.

    UserList, UserDict and most custom collection ABC subclasses create their
    storage in `__init__`, so a raw allocation has nowhere to put elements.
    """
    return container_kind(cls) is not None and not issubclass(cls, BUILTIN_CONTAINERS)


def _construct_empty(cls: type, allow_raw: bool) -> Any:
    """Raw instance initialised by its no-argument `__init__`, then emptied."""
    instance = _raw_allocate(cls)
    try:
        instance.__init__()  # type: ignore[misc]
    except TypeError as exc:
        if not allow_raw:
            raise InstantiationError(cls, f"no-argument __init__ failed: {exc}") from exc
        return _raw_allocate(cls)
    if len(instance):
        instance.clear()
    return instance


def _match_shape(instance: Any, source: Any) -> None:
    """Carry over construction-time state that built-in containers keep outside fields."""
    if isinstance(instance, deque) and source.maxlen is not None:
        deque.__init__(instance, (), source.maxlen)
    elif isinstance(instance, defaultdict):
        instance.default_factory = source.default_factory


def allocate(cls: type, source: Any, allow_raw: bool = True) -> Any:
    """Allocate a blank instance of a concrete type.

    Allocation order:
    1. Pydantic models get an empty model, as `BaseModel.__copy__` builds one.
    2. Every other type starts from the first built-in `__new__` in the MRO,
       so a user-defined `__new__` never runs and cannot hand back the source.
    3. Containers that keep their elements in attributes then run their
       no-argument `__init__` to create that storage, and are emptied.
       Nothing else runs `__init__`.

    Args:
        cls: Concrete type of the source object.
        source: Object being duplicated, used to match container shape.
        allow_raw: Permit the built-in allocator when it bypasses a
            user-defined `__new__`, and keep a container raw when its
            no-argument `__init__` fails.

    Returns:
        A new instance of exactly `cls`, never the source itself.

    Raises:
        InstantiationError: If no allocation path works.
    """
    if is_pydantic_model(cls):
        return _allocate_pydantic(cls, source)
    if not allow_raw and _overrides_new(cls):
        raise InstantiationError(cls, "__new__ is overridden and raw allocation is disabled")
    if _stores_elements_in_attributes(cls):
        instance = _construct_empty(cls, allow_raw)
    else:
        instance = _raw_allocate(cls)
    if instance is source:
        raise InstantiationError(cls, "allocation returned the source object")
    if type(instance) is not cls:
        raise InstantiationError(cls, f"allocation returned {type(instance).__qualname__}")
    _match_shape(instance, source)
    return instance
