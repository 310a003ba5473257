"""Core type definitions for graphdup."""

from typing import Final

type Duplicated[T] = T
"""Type alias indicating a value is a duplicate produced by graphdup.

When you see `Duplicated[T]` in a return type, the returned value is a new
instance of the same concrete type as the source. Fields copied under the
COPY policy still share references with the source graph.
"""


class _Missing:
    """Marker for 'no value' where None is a legitimate value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()
