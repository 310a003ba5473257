"""Configuration settings using Pydantic Settings.

Provides typed duplicator configuration with environment variable support.

Usage:
    from graphdup.config import DuplicationSettings
    from graphdup import GraphDuplicator

    # Load from environment variables (GRAPHDUP_*)
    settings = DuplicationSettings()
    duplicator = GraphDuplicator(settings.to_config())

    # Or override with explicit values
    settings = DuplicationSettings(default_items_policy="DUPLICATE")
"""

from __future__ import annotations

from typing import Any

try:
    from pydantic import field_validator
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for config module. "
        "Install with: pip install pydantic-settings"
    ) from e

from graphdup.core.policy import CopyPolicy
from graphdup.duplication.models import DuplicatorConfig


class DuplicationSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the graph duplicator.

    Attributes:
        default_items_policy: Element policy for undeclared containers.
            Accepts a CopyPolicy member or its name (case-insensitive).
        allow_raw_allocation: Allocate through built-in allocators when a
            type defines its own `__new__`.
        cache_policies: Cache field policy resolution.
        warn_on_policy_conflict: Warn when a policy cannot apply to a field.

    Environment Variables:
        GRAPHDUP_DEFAULT_ITEMS_POLICY
        GRAPHDUP_ALLOW_RAW_ALLOCATION
        GRAPHDUP_CACHE_POLICIES
        GRAPHDUP_WARN_ON_POLICY_CONFLICT
    """

    model_config = SettingsConfigDict(
        env_prefix="GRAPHDUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_items_policy: CopyPolicy = CopyPolicy.COPY
    allow_raw_allocation: bool = True
    cache_policies: bool = True
    warn_on_policy_conflict: bool = True

    @field_validator("default_items_policy", mode="before")
    @classmethod
    def _policy_from_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return CopyPolicy[value.strip().upper()]
            except KeyError:
                names = ", ".join(member.name for member in CopyPolicy)
                message = f"Unknown copy policy {value!r}; expected one of {names}"
                raise ValueError(message) from None
        return value

    def to_config(self) -> DuplicatorConfig:
        """Build the DuplicatorConfig these settings describe."""
        return DuplicatorConfig(
            default_items_policy=self.default_items_policy,
            allow_raw_allocation=self.allow_raw_allocation,
            cache_policies=self.cache_policies,
            warn_on_policy_conflict=self.warn_on_policy_conflict,
        )
