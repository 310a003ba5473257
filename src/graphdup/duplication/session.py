"""Duplication session: the identity map of one duplication operation.

A session maps the identity key of every source object duplicated so far to
its duplicate. Sharing one session across several root calls keeps the
references between those roots consistent in the copies.

Usage:
    session = DuplicationSession()
    m1_copy = duplicate(m1, session=session)
    m2_copy = duplicate(m2, session=session)   # shares duplicates with m1_copy
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from graphdup.core.identity import NULL_KEY, IdentityKey, key_for
from graphdup.core.types import MISSING


class SessionInUseError(RuntimeError):
    """Raised when a session is used by a second thread while in use."""

    pass


class DuplicationSession:
    """Identity-keyed map from source objects to their duplicates.

    Entries are write-once: after a source is registered, every lookup of it
    returns the same duplicate for the life of the session. Sessions are not
    thread-safe and must be used by one duplication at a time.
    """

    def __init__(self) -> None:
        """Initialize an empty session."""
        self._map: dict[IdentityKey, Any] = {}
        self._owner: int | None = None
        self._depth = 0

    def register(self, source: Any, duplicate: Any) -> None:
        """Record the duplicate of a source object.

        Args:
            source: Original object. None is ignored.
            duplicate: Its duplicate.

        Raises:
            ValueError: If the source is already mapped to a different duplicate.
        """
        key = key_for(source)
        if key is NULL_KEY:
            return
        existing = self._map.get(key, MISSING)
        if existing is not MISSING and existing is not duplicate:
            raise ValueError(
                f"{type(source).__name__} source is already mapped to another duplicate"
            )
        self._map[key] = duplicate

    def lookup(self, source: Any) -> Any:
        """Get the duplicate of a source object.

        Returns:
            The registered duplicate, or MISSING if there is none.
        """
        key = key_for(source)
        if key is NULL_KEY:
            return MISSING
        return self._map.get(key, MISSING)

    def get(self, source: Any, default: Any = None) -> Any:
        """Get the duplicate of a source object, or a default."""
        duplicate = self.lookup(source)
        return default if duplicate is MISSING else duplicate

    def __contains__(self, source: object) -> bool:
        return self.lookup(source) is not MISSING

    def __len__(self) -> int:
        return len(self._map)

    def duplicates(self) -> Iterator[Any]:
        """Iterate registered duplicates in registration order."""
        return iter(list(self._map.values()))

    def clear(self) -> None:
        """Forget all mappings.

        Raises:
            SessionInUseError: If a duplication is in progress.
        """
        if self._depth:
            raise SessionInUseError("Cannot clear a session during duplication")
        self._map.clear()

    @property
    def in_use(self) -> bool:
        """True while a duplication operation holds the session."""
        return self._depth > 0

    @contextmanager
    def acquire(self) -> Iterator[DuplicationSession]:
        """Hold the session for the current thread.

        Re-entrant on the owning thread, so nested and batched calls work.

        Raises:
            SessionInUseError: If another thread currently holds the session.
        """
        thread = threading.get_ident()
        if self._depth and self._owner != thread:
            raise SessionInUseError(
                "DuplicationSession is in use by another thread; "
                "share a session only between sequential calls"
            )
        self._owner = thread
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1
            if not self._depth:
                self._owner = None

    def __repr__(self) -> str:
        return f"DuplicationSession(entries={len(self._map)})"
