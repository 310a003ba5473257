"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from graphdup import DuplicationSession, GraphDuplicator, PolicyRegistry


@pytest.fixture
def session():
    """Fresh DuplicationSession."""
    return DuplicationSession()


@pytest.fixture
def duplicator():
    """GraphDuplicator with default configuration."""
    return GraphDuplicator()


@pytest.fixture
def registry():
    """Isolated PolicyRegistry, not the process-wide one."""
    return PolicyRegistry()
