"""Validation rules for repository configuration."""

from __future__ import annotations

import re
import typing as typ

from warden.moderation.errors import ConfigurationError

if typ.TYPE_CHECKING:
    from .models import CommunitySettings, RepositoryConfig, SpamSettings

_MAX_PERCENT = 100


def _validate_spam(spam: SpamSettings, issues: list[str]) -> None:
    if spam.min_account_age_days < 0:
        issues.append(
            "spam.minAccountAgeDays must be non-negative, "
            f"got {spam.min_account_age_days}"
        )
    if spam.max_links < 0:
        issues.append(f"spam.maxLinks must be non-negative, got {spam.max_links}")
    if not 0 <= spam.max_template_similarity <= _MAX_PERCENT:
        issues.append(
            "spam.maxTemplateSimilarity must be between 0 and 100, "
            f"got {spam.max_template_similarity}"
        )


def _validate_community(community: CommunitySettings, issues: list[str]) -> None:
    for pattern, label in community.auto_labeler.items():
        try:
            re.compile(pattern, re.IGNORECASE)
        except re.error as exc:
            issues.append(f"community.autoLabeler key {pattern!r} is invalid: {exc}")
        if not label.strip():
            issues.append(f"community.autoLabeler label for {pattern!r} is empty")


def validate_repository_config(config: RepositoryConfig) -> RepositoryConfig:
    """Validate a configuration instance, returning it when all checks pass.

    Blank spam keywords are dropped rather than rejected, since an empty
    keyword would otherwise match every submission.

    Raises
    ------
    ConfigurationError
        If any threshold or pattern is malformed.

    """
    issues: list[str] = []
    _validate_spam(config.spam, issues)
    _validate_community(config.community, issues)
    if issues:
        raise ConfigurationError(issues)

    config.spam.keywords = [
        keyword for keyword in dict.fromkeys(config.spam.keywords) if keyword.strip()
    ]
    return config
