"""Content moderation pipeline for incoming repository activity."""

from __future__ import annotations

from .errors import (
    ConfigurationError,
    ContentNotFoundError,
    FetchError,
    ModerationError,
    MutationError,
    RemediationError,
)
from .models import (
    CLEAN,
    Clean,
    DirectoryEntry,
    Event,
    EventKind,
    ModerationConfig,
    Spam,
    TemplateSet,
    Verdict,
)
from .observability import ModerationEventLogger, ModerationEventType
from .pipeline import ModerationPipeline, evaluate
from .protocol import (
    ItemMutator,
    ModerationCapabilities,
    RepositoryContents,
    UserDirectory,
)
from .remediation import (
    SPAM_LABEL,
    RemediationAction,
    RemediationExecutor,
    RemediationReport,
    remediate,
)
from .signals import account_age_days, contains_any_keyword, count_links
from .similarity import levenshtein_distance, similarity_pct
from .templates import fetch_templates

__all__ = [
    "CLEAN",
    "SPAM_LABEL",
    "Clean",
    "ConfigurationError",
    "ContentNotFoundError",
    "DirectoryEntry",
    "Event",
    "EventKind",
    "FetchError",
    "ItemMutator",
    "ModerationCapabilities",
    "ModerationConfig",
    "ModerationError",
    "ModerationEventLogger",
    "ModerationEventType",
    "ModerationPipeline",
    "MutationError",
    "RemediationAction",
    "RemediationError",
    "RemediationExecutor",
    "RemediationReport",
    "RepositoryContents",
    "Spam",
    "TemplateSet",
    "UserDirectory",
    "Verdict",
    "account_age_days",
    "contains_any_keyword",
    "count_links",
    "evaluate",
    "fetch_templates",
    "levenshtein_distance",
    "remediate",
    "similarity_pct",
]
