"""Typed domain models for content moderation."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

if typ.TYPE_CHECKING:
    import datetime as dt


class EventKind(enum.StrEnum):
    """Repository activity that triggers moderation."""

    ISSUE_OPENED = "issues.opened"
    ISSUE_EDITED = "issues.edited"
    PULL_REQUEST_OPENED = "pull_request.opened"
    PULL_REQUEST_EDITED = "pull_request.edited"
    PULL_REQUEST_SYNCHRONIZE = "pull_request.synchronize"
    COMMENT_CREATED = "issue_comment.created"


_NEWLY_OPENED = frozenset({EventKind.ISSUE_OPENED, EventKind.PULL_REQUEST_OPENED})


@dataclasses.dataclass(frozen=True, slots=True)
class Event:
    """Immutable snapshot of a webhook payload relevant to moderation.

    Attributes
    ----------
    kind
        Event name and action pair that triggered processing.
    repository
        Repository slug in ``owner/name`` format.
    number
        Issue or pull request number. Comments carry their parent item's
        number.
    author_login
        Login of the user who authored the content.
    author_created_at
        Account creation time when the payload carried it; ``None`` means
        it must be fetched on demand.
    title
        Item title, empty for comments.
    body
        Item or comment body, empty when absent.
    is_pull_request
        Whether the item being acted upon is a pull request.
    author_association
        GitHub author association (``FIRST_TIMER``, ``MEMBER``, ...).
    head_ref, head_sha
        Pull request head branch and commit, when known.

    """

    kind: EventKind
    repository: str
    number: int
    author_login: str
    author_created_at: dt.datetime | None = None
    title: str = ""
    body: str = ""
    is_pull_request: bool = False
    author_association: str | None = None
    head_ref: str | None = None
    head_sha: str | None = None

    @property
    def is_comment(self) -> bool:
        """Return True for comment events."""
        return self.kind is EventKind.COMMENT_CREATED

    @property
    def is_newly_opened(self) -> bool:
        """Return True when the event opened a new issue or pull request."""
        return self.kind in _NEWLY_OPENED

    @property
    def owner(self) -> str:
        """Return the repository owner."""
        return self.repository.partition("/")[0]

    @property
    def name(self) -> str:
        """Return the repository name."""
        return self.repository.partition("/")[2]


@dataclasses.dataclass(frozen=True, slots=True)
class Clean:
    """Verdict for content that no stage flagged."""

    @property
    def is_spam(self) -> bool:
        """Return False; clean verdicts never trigger remediation."""
        return False


@dataclasses.dataclass(frozen=True, slots=True)
class Spam:
    """Terminal verdict carrying the reason the content was flagged."""

    reason: str

    @property
    def is_spam(self) -> bool:
        """Return True; spam verdicts trigger remediation."""
        return True


type Verdict = Clean | Spam

CLEAN: typ.Final = Clean()


@dataclasses.dataclass(frozen=True, slots=True)
class ModerationConfig:
    """Validated moderation thresholds for one event.

    Instances are produced by :mod:`warden.config`, which rejects malformed
    values before the pipeline ever sees them.
    """

    enabled: bool = True
    keywords: frozenset[str] = frozenset({"spam", "buy now", "cheap meds"})
    min_account_age_days: int = 1
    max_links: int = 10
    max_template_similarity_pct: int = 90
    dry_run: bool = False


@dataclasses.dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """Entry returned when listing a repository directory."""

    name: str
    path: str
    type: str = "file"

    @property
    def is_file(self) -> bool:
        """Return True for regular files."""
        return self.type == "file"


type TemplateSet = tuple[str, ...]
