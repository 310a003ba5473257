"""Container kind model."""

from enum import Enum, auto


class ContainerKind(Enum):
    """Structural kind of a container type."""

    SEQUENCE = auto()  # Appendable: list, deque, bytearray, MutableSequence
    FIXED_SEQUENCE = auto()  # Sized at creation, written by position: tuple
    SET = auto()  # Keyed membership: set, MutableSet
    FROZEN_SET = auto()  # Immutable keyed membership: frozenset
    MAPPING = auto()  # Paired entries: dict, MutableMapping

    @property
    def is_immutable(self) -> bool:
        """True if the container cannot be populated after allocation."""
        return self in (ContainerKind.FIXED_SEQUENCE, ContainerKind.FROZEN_SET)
