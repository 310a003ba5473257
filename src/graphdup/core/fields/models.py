"""Field descriptor model.

A FieldDescriptor names one storage slot of a type: a dataclass field, a
pydantic model field, a `__slots__` entry, an annotated class attribute, or a
per-instance `__dict__` attribute with no class-level declaration.
"""

from __future__ import annotations

import types
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Annotated, Any, Union, get_args, get_origin

from graphdup.core.policy.models import CopyAs
from graphdup.core.types import MISSING


def _unwrap_type(annotation: Any) -> type | None:
    """Reduce an annotation to the class used for type-level policy lookup."""
    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    if annotation is Any:
        return None
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) != 1:
            return None
        return _unwrap_type(members[0])
    if origin is not None:
        annotation = origin
    return annotation if isinstance(annotation, type) else None


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Describes one field of a type, as seen by the duplicator.

    Identity (equality, hashing) is the owning type, name and dynamic flag.

    Attributes:
        owner: Type the field was enumerated from.
        name: Attribute name on instances.
        declared_type: Annotation of the field, `object` when unknown.
        declaration: Directly attached copy declaration, if any.
        default: Declared default value, or MISSING.
        default_factory: Zero-argument factory for the default, or MISSING.
        dynamic: True for instance attributes with no class-level declaration.
    """

    owner: type
    name: str
    declared_type: Any = field(default=object, compare=False)
    declaration: CopyAs | None = field(default=None, compare=False)
    default: Any = field(default=MISSING, compare=False)
    default_factory: Callable[[], Any] | Any = field(default=MISSING, compare=False)
    dynamic: bool = False

    @property
    def field_type(self) -> type | None:
        """Class of the field for type-level policy lookup.

        `X | None` unwraps to `X`, `list[X]` to `list`. Returns None when the
        annotation does not name a single class.
        """
        return _unwrap_type(self.declared_type)

    def zero_value(self) -> Any:
        """Value a skipped field is left at: its default, else None."""
        if self.default is not MISSING:
            return self.default
        if self.default_factory is not MISSING:
            return self.default_factory()
        return None
