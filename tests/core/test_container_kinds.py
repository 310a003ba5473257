"""Tests for container classification and atomic values."""

import datetime
from collections import OrderedDict, UserDict, UserList, defaultdict, deque
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple
from uuid import uuid4

import pytest

from graphdup.core.containers import ContainerKind, container_kind, is_atomic


class Color(Enum):
    RED = 1


class Point(NamedTuple):
    x: int
    y: int


class Polyline(list):
    pass


@pytest.mark.parametrize(
    "value",
    [None, True, 3, 2.5, 1j, "text", b"raw", Decimal("1.5"), Color.RED, uuid4(),
     datetime.date(2024, 1, 1), datetime.timedelta(seconds=3), range(3), len, int],
)
def test_atomic_values(value):
    assert is_atomic(value)


@pytest.mark.parametrize("value", [[], {}, set(), (), object(), bytearray()])
def test_non_atomic_values(value):
    assert not is_atomic(value)


@pytest.mark.parametrize(
    ("cls", "kind"),
    [
        (list, ContainerKind.SEQUENCE),
        (deque, ContainerKind.SEQUENCE),
        (bytearray, ContainerKind.SEQUENCE),
        (Polyline, ContainerKind.SEQUENCE),
        (tuple, ContainerKind.FIXED_SEQUENCE),
        (Point, ContainerKind.FIXED_SEQUENCE),
        (set, ContainerKind.SET),
        (frozenset, ContainerKind.FROZEN_SET),
        (dict, ContainerKind.MAPPING),
        (OrderedDict, ContainerKind.MAPPING),
        (defaultdict, ContainerKind.MAPPING),
    ],
)
def test_container_kinds(cls, kind):
    assert container_kind(cls) is kind


def test_user_collections_are_containers():
    assert container_kind(UserList) is ContainerKind.SEQUENCE
    assert container_kind(UserDict) is ContainerKind.MAPPING


def test_read_only_mappings_are_not_containers():
    """Read-only mappings cannot receive entries, so they copy like plain objects."""

    class Frozen(Mapping):
        def __init__(self, data):
            self._data = dict(data)

        def __getitem__(self, key):
            return self._data[key]

        def __iter__(self):
            return iter(self._data)

        def __len__(self):
            return len(self._data)

    assert container_kind(MappingProxyType) is None
    assert container_kind(Frozen) is None


def test_text_is_not_a_container():
    assert container_kind(str) is None
    assert container_kind(bytes) is None
    assert container_kind(object) is None


def test_immutable_kinds():
    assert ContainerKind.FIXED_SEQUENCE.is_immutable
    assert ContainerKind.FROZEN_SET.is_immutable
    assert not ContainerKind.SEQUENCE.is_immutable
    assert not ContainerKind.MAPPING.is_immutable
