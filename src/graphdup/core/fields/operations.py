"""Runtime field introspection.

Enumerates the storage fields of dataclasses, pydantic models, slotted classes
and plain annotated classes, and reads/writes them without going through
validating `__setattr__` overrides.
"""

from __future__ import annotations

import dataclasses
import inspect
import typing
from collections.abc import Iterable
from functools import cache
from typing import Annotated, Any, ClassVar, get_origin

from graphdup.core.fields.models import FieldDescriptor
from graphdup.core.policy.models import COPY_METADATA_KEY, CopyAs, CopyPolicy
from graphdup.core.types import MISSING

_HINT_ERRORS = (NameError, TypeError, AttributeError, SyntaxError)


def is_pydantic_model(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in getattr(cls, "__mro__", ()):
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def declaration_from_annotation(annotation: Any) -> CopyAs | None:
    """Extract a CopyAs (or bare CopyPolicy) from `Annotated` metadata."""
    if get_origin(annotation) is not Annotated:
        return None
    return declaration_from_metadata(annotation.__metadata__)


def declaration_from_metadata(metadata: Iterable[Any]) -> CopyAs | None:
    """Return the first copy declaration in a sequence of metadata objects."""
    for item in metadata:
        if isinstance(item, (CopyAs, CopyPolicy)):
            return CopyAs.coerce(item)
    return None


def _is_classvar(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    return isinstance(annotation, str) and annotation.startswith(("ClassVar", "typing.ClassVar"))


def _resolve_hints(cls: type) -> dict[str, Any]:
    """Resolved annotations of a class and its bases, keeping Annotated extras.

    Falls back to the raw (possibly string) annotations when forward
    references cannot be resolved.
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except _HINT_ERRORS:
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(inspect.get_annotations(klass))
        return hints


def _mangle(klass: type, name: str) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{klass.__name__.lstrip('_')}{name}"
    return name


def _dataclass_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    hints = _resolve_hints(cls)
    result = []
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        declaration = f.metadata.get(COPY_METADATA_KEY)
        if declaration is None:
            declaration = declaration_from_annotation(annotation)
        result.append(
            FieldDescriptor(
                owner=cls,
                name=f.name,
                declared_type=annotation,
                declaration=CopyAs.coerce(declaration) if declaration is not None else None,
                default=f.default if f.default is not dataclasses.MISSING else MISSING,
                default_factory=(
                    f.default_factory if f.default_factory is not dataclasses.MISSING else MISSING
                ),
            )
        )
    return tuple(result)


def _pydantic_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    hints = _resolve_hints(cls)
    result = []
    for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
        annotation = hints.get(name, info.annotation)
        declaration = declaration_from_metadata(info.metadata)
        if declaration is None:
            declaration = declaration_from_annotation(annotation)
        default: Any = MISSING
        default_factory: Any = MISSING
        if info.default_factory is not None:
            if not getattr(info, "default_factory_takes_data", False):
                default_factory = info.default_factory
        elif not info.is_required():
            default = info.default
        result.append(
            FieldDescriptor(
                owner=cls,
                name=name,
                declared_type=annotation,
                declaration=declaration,
                default=default,
                default_factory=default_factory,
            )
        )
    return tuple(result)


def _plain_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    hints = _resolve_hints(cls)
    seen: dict[str, FieldDescriptor] = {}
    for klass in reversed(cls.__mro__):
        if klass is object or klass.__module__ == "builtins":
            continue
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            name = _mangle(klass, slot)
            annotation = hints.get(slot, object)
            seen[name] = FieldDescriptor(
                owner=cls,
                name=name,
                declared_type=annotation,
                declaration=declaration_from_annotation(annotation),
            )
        for name in inspect.get_annotations(klass):
            annotation = hints.get(name, object)
            if name in seen or _is_classvar(annotation):
                continue
            class_value = vars(klass).get(name, MISSING)
            if hasattr(type(class_value), "__get__"):
                # Methods, properties and other descriptors are not storage
                continue
            seen[name] = FieldDescriptor(
                owner=cls,
                name=name,
                declared_type=annotation,
                declaration=declaration_from_annotation(annotation),
                default=class_value,
            )
    return tuple(seen.values())


@cache
def fields_of(cls: type) -> tuple[FieldDescriptor, ...]:
    """Enumerate the declared fields of a type, in declaration order.

    Args:
        cls: Concrete type to introspect.

    Returns:
        Field descriptors for dataclass fields, pydantic model fields,
        `__slots__` entries and annotated attributes of plain classes.
    """
    if dataclasses.is_dataclass(cls):
        return _dataclass_fields(cls)
    if is_pydantic_model(cls):
        return _pydantic_fields(cls)
    return _plain_fields(cls)


def instance_fields(obj: Any) -> tuple[FieldDescriptor, ...]:
    """Declared fields of an object's type plus its undeclared instance attributes."""
    cls = type(obj)
    declared = fields_of(cls)
    instance_dict = getattr(obj, "__dict__", None)
    if not instance_dict:
        return declared
    names = {descriptor.name for descriptor in declared}
    dynamic = tuple(
        FieldDescriptor(owner=cls, name=name, dynamic=True)
        for name in instance_dict
        if name not in names and not (name.startswith("__") and name.endswith("__"))
    )
    return declared + dynamic


def read_field(obj: Any, descriptor: FieldDescriptor) -> Any:
    """Read a field's current value, or MISSING if it is unset."""
    try:
        return object.__getattribute__(obj, descriptor.name)
    except AttributeError:
        return MISSING


def write_field(obj: Any, descriptor: FieldDescriptor, value: Any) -> None:
    """Assign a field, bypassing frozen and validating `__setattr__` overrides."""
    object.__setattr__(obj, descriptor.name, value)


def is_compatible(target: FieldDescriptor, source: FieldDescriptor) -> bool:
    """Check that a source field's value may be assigned to a target field.

    Fields are compatible when names match and the source's declared class is
    a subclass of the target's. Unknown declared types are compatible.
    """
    if target.name != source.name:
        return False
    target_type, source_type = target.field_type, source.field_type
    if target_type is None or source_type is None:
        return True
    try:
        return issubclass(source_type, target_type)
    except TypeError:
        return True
