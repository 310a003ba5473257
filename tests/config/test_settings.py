"""Tests for environment-driven duplicator settings."""

import pytest
from pydantic import ValidationError

from graphdup import CopyPolicy, DuplicatorConfig, GraphDuplicator
from graphdup.config import DuplicationSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the caller's environment and any .env file."""
    for name in (
        "GRAPHDUP_DEFAULT_ITEMS_POLICY",
        "GRAPHDUP_ALLOW_RAW_ALLOCATION",
        "GRAPHDUP_CACHE_POLICIES",
        "GRAPHDUP_WARN_ON_POLICY_CONFLICT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults_match_duplicator_config():
    assert DuplicationSettings().to_config() == DuplicatorConfig()


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("GRAPHDUP_DEFAULT_ITEMS_POLICY", "duplicate")
    monkeypatch.setenv("GRAPHDUP_ALLOW_RAW_ALLOCATION", "false")

    settings = DuplicationSettings()

    assert settings.default_items_policy is CopyPolicy.DUPLICATE
    assert settings.allow_raw_allocation is False


def test_reads_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("GRAPHDUP_WARN_ON_POLICY_CONFLICT=0\n")
    assert DuplicationSettings().warn_on_policy_conflict is False


def test_explicit_values_accept_names_and_members():
    assert DuplicationSettings(default_items_policy="Map_Or_Copy").default_items_policy is (
        CopyPolicy.MAP_OR_COPY
    )
    assert DuplicationSettings(default_items_policy=CopyPolicy.MAP).default_items_policy is (
        CopyPolicy.MAP
    )


def test_unknown_policy_name_rejected():
    with pytest.raises(ValidationError, match="expected one of COPY"):
        DuplicationSettings(default_items_policy="CLONE")


def test_to_config_drives_duplicator(monkeypatch):
    monkeypatch.setenv("GRAPHDUP_DEFAULT_ITEMS_POLICY", "DUPLICATE")
    config = DuplicationSettings().to_config()
    duplicator = GraphDuplicator(config)

    source = [[1, 2]]
    copy = duplicator.duplicate(source)

    assert duplicator.config.default_items_policy is CopyPolicy.DUPLICATE
    assert copy == source
    assert copy[0] is not source[0]
