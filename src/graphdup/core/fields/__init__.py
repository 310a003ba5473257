"""Field functionality: descriptors and runtime introspection."""

from graphdup.core.fields.models import FieldDescriptor
from graphdup.core.fields.operations import (
    declaration_from_annotation,
    fields_of,
    instance_fields,
    is_compatible,
    is_pydantic_model,
    read_field,
    write_field,
)

__all__ = [
    "FieldDescriptor",
    "declaration_from_annotation",
    "fields_of",
    "instance_fields",
    "is_compatible",
    "is_pydantic_model",
    "read_field",
    "write_field",
]
