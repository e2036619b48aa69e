"""Typed repository configuration for Warden.

Repositories opt in by committing ``.github/warden.yml``. Keys use
camelCase in YAML and snake_case in Python.

Example
-------
.. code-block:: yaml

    dryRun: false
    spam:
      keywords: ["buy now", "casino"]
      maxLinks: 5
    community:
      autoLabeler:
        crash: bug

"""

from __future__ import annotations

import msgspec

from warden.moderation.models import ModerationConfig

DEFAULT_SPAM_KEYWORDS: tuple[str, ...] = ("spam", "buy now", "cheap meds")
DEFAULT_WELCOME_MESSAGE = (
    "Thanks for opening your first issue/PR! We'll take a look soon."
)
DEFAULT_NEW_CONTRIBUTOR_LABEL = "first-time-contributor"
DEFAULT_AUTO_LABELS: dict[str, str] = {
    "bug": "bug",
    "enhancement": "enhancement",
    "feature": "enhancement",
}


class SpamSettings(msgspec.Struct, kw_only=True, rename="camel"):
    """Spam moderation thresholds.

    Attributes
    ----------
    enabled : bool
        Whether the moderation pipeline runs at all.
    keywords : list[str]
        Case-insensitive substrings that mark content as spam.
    min_account_age_days : int
        Accounts younger than this many days are flagged.
    max_links : int
        Bodies with more links than this are flagged.
    max_template_similarity : int
        Percentage (0-100) at or above which a new item is considered an
        unfilled template.

    """

    enabled: bool = True
    keywords: list[str] = msgspec.field(
        default_factory=lambda: list(DEFAULT_SPAM_KEYWORDS)
    )
    min_account_age_days: int = 1
    max_links: int = 10
    max_template_similarity: int = 90


class CommunitySettings(msgspec.Struct, kw_only=True, rename="camel"):
    """Welcome message and labelling preferences for newly opened items."""

    welcome_message: str | None = DEFAULT_WELCOME_MESSAGE
    new_contributor_label: str | None = DEFAULT_NEW_CONTRIBUTOR_LABEL
    auto_labeler: dict[str, str] = msgspec.field(
        default_factory=lambda: dict(DEFAULT_AUTO_LABELS)
    )


class PullRequestSettings(msgspec.Struct, kw_only=True, rename="camel"):
    """Pull request hygiene features."""

    require_body: bool = True
    conventional_commits: bool = True
    auto_format: bool = True


class RepositoryConfig(msgspec.Struct, kw_only=True, rename="camel"):
    """Complete, merged configuration for one repository."""

    dry_run: bool = False
    spam: SpamSettings = msgspec.field(default_factory=SpamSettings)
    community: CommunitySettings = msgspec.field(default_factory=CommunitySettings)
    pr: PullRequestSettings = msgspec.field(default_factory=PullRequestSettings)

    def moderation_config(self) -> ModerationConfig:
        """Return the read-only view consumed by the moderation pipeline."""
        return ModerationConfig(
            enabled=self.spam.enabled,
            keywords=frozenset(self.spam.keywords),
            min_account_age_days=self.spam.min_account_age_days,
            max_links=self.spam.max_links,
            max_template_similarity_pct=self.spam.max_template_similarity,
            dry_run=self.dry_run,
        )
