"""Repository configuration loading and service settings."""

from __future__ import annotations

from .loader import (
    CONFIG_PATH,
    load_repository_config,
    merge_with_defaults,
    parse_repository_config,
)
from .models import (
    CommunitySettings,
    PullRequestSettings,
    RepositoryConfig,
    SpamSettings,
)
from .settings import WardenSettings
from .validation import validate_repository_config

__all__ = [
    "CONFIG_PATH",
    "CommunitySettings",
    "PullRequestSettings",
    "RepositoryConfig",
    "SpamSettings",
    "WardenSettings",
    "load_repository_config",
    "merge_with_defaults",
    "parse_repository_config",
    "validate_repository_config",
]
