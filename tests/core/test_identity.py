"""Tests for identity keys.

Critical Invariants:
- Plain objects are keyed by reference, never by equality
- Identifiable objects with equal identities share a key
- The key of None matches nothing, not even itself
"""

from dataclasses import dataclass
from uuid import UUID, uuid4

from graphdup.core.identity import NULL_KEY, Identifiable, ReferenceKey, UniqueKey, key_for


@dataclass
class Point:
    x: int
    y: int


@dataclass(eq=False)
class Persisted:
    guid: UUID

    def __identity__(self) -> UUID:
        return self.guid


def test_equal_objects_get_distinct_reference_keys():
    """Value equality must not merge distinct source objects."""
    a, b = Point(1, 2), Point(1, 2)
    assert a == b
    assert key_for(a) != key_for(b)
    assert key_for(a) == key_for(a)


def test_reference_key_hashes_by_identity():
    a = Point(1, 2)
    keys = {key_for(a): "a"}
    assert keys[ReferenceKey(a)] == "a"
    assert ReferenceKey(Point(1, 2)) not in keys


def test_identifiable_objects_keyed_by_identity_value():
    guid = uuid4()
    first, second = Persisted(guid), Persisted(guid)
    assert isinstance(first, Identifiable)
    assert key_for(first) == UniqueKey(guid)
    assert key_for(first) == key_for(second)
    assert key_for(first) != key_for(Persisted(uuid4()))


def test_classes_are_never_identifiable():
    """A class defining __identity__ is keyed by reference, not called unbound."""
    key = key_for(Persisted)
    assert isinstance(key, ReferenceKey)


def test_null_key_never_equal():
    assert key_for(None) is NULL_KEY
    assert NULL_KEY != NULL_KEY
    assert NULL_KEY != key_for(Point(0, 0))
    assert repr(NULL_KEY) == "NULL_KEY"
