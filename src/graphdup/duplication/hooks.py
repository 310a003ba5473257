"""Post-duplication hooks.

Usage:
    @dataclass
    class Mesh:
        faces: list[Face]
        _index: dict = copy_field(CopyPolicy.DO_NOT_COPY, default_factory=dict)

        def __post_duplicate__(self) -> None:
            self._index = {face.guid: face for face in self.faces}
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PostDuplicable(Protocol):
    """Fix-up logic run on a duplicate once its own copy is complete.

    The hook runs after the duplicate's fields and elements are populated.
    In cyclic graphs, objects that refer back to it may still be mid-copy,
    so the hook must not rely on them being finished.
    """

    def __post_duplicate__(self) -> None: ...


def invoke_post_duplicate(duplicate: Any) -> bool:
    """Run a duplicate's post-duplication hook, if its type declares one.

    Args:
        duplicate: Newly populated duplicate.

    Returns:
        True if a hook was called.
    """
    hook = getattr(type(duplicate), "__post_duplicate__", None)
    if hook is None:
        return False
    hook(duplicate)
    return True
