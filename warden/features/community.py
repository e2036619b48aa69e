"""Community niceties for newly opened issues and pull requests.

Runs only after moderation returns a clean verdict:

- ask for a description when the body is blank and ``pr.requireBody`` is set;
- welcome first-time contributors and tag them with the configured label;
- add labels whose keyword pattern matches the title or body.

Label failures are logged and ignored. Comment failures propagate to the
dispatcher.
"""

from __future__ import annotations

import dataclasses
import re
import typing as typ

from warden.logging import get_logger, log_info, log_warning
from warden.moderation.errors import MutationError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from warden.config.models import RepositoryConfig
    from warden.moderation.models import Event
    from warden.moderation.protocol import ItemMutator

logger = get_logger(__name__)

FIRST_TIME_ASSOCIATIONS = frozenset({"FIRST_TIMER", "FIRST_TIME_CONTRIBUTOR"})
EMPTY_BODY_COMMENT = (
    "Hi there! It looks like you didn't provide a description. Please update "
    "the issue/PR with more details so we can help you better."
)


@dataclasses.dataclass(frozen=True, slots=True)
class CommunityOutcome:
    """Comments and labels posted (or planned, in dry run) for one event."""

    dry_run: bool = False
    comments: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()


def matching_labels(
    auto_labeler: cabc.Mapping[str, str], *, title: str, body: str
) -> list[str]:
    """Return de-duplicated labels whose pattern matches title or body."""
    labels: list[str] = []
    for pattern, label in auto_labeler.items():
        regex = re.compile(pattern, re.IGNORECASE)
        if regex.search(title) or regex.search(body):
            labels.append(label)
    return list(dict.fromkeys(labels))


class CommunityFeature:
    """Post welcome messages and labels on newly opened items."""

    def __init__(self, mutator: ItemMutator, *, dry_run: bool) -> None:
        """Bind the feature to one item's mutator."""
        self._mutator = mutator
        self._dry_run = dry_run
        self._comments: list[str] = []
        self._labels: list[str] = []

    async def run(self, event: Event, config: RepositoryConfig) -> CommunityOutcome:
        """Apply the community actions relevant to ``event``."""
        if not event.is_newly_opened:
            return CommunityOutcome(dry_run=self._dry_run)

        community = config.community
        if not event.body.strip() and config.pr.require_body:
            await self._comment(EMPTY_BODY_COMMENT, "empty body reminder")

        if event.author_association in FIRST_TIME_ASSOCIATIONS and (
            community.welcome_message
        ):
            await self._comment(community.welcome_message, "welcome message")
            if community.new_contributor_label:
                await self._label([community.new_contributor_label])

        auto_labels = matching_labels(
            community.auto_labeler, title=event.title, body=event.body
        )
        if auto_labels:
            await self._label(auto_labels)

        return CommunityOutcome(
            dry_run=self._dry_run,
            comments=tuple(self._comments),
            labels=tuple(dict.fromkeys(self._labels)),
        )

    async def _comment(self, text: str, description: str) -> None:
        if self._dry_run:
            log_info(logger, "DRY RUN: Would have posted %s.", description)
        else:
            await self._mutator.post_comment(text)
        self._comments.append(text)

    async def _label(self, labels: list[str]) -> None:
        if self._dry_run:
            log_info(logger, "DRY RUN: Would have added labels: %s", ", ".join(labels))
            self._labels.extend(labels)
            return
        try:
            await self._mutator.add_labels(labels)
        except MutationError as exc:
            log_warning(logger, "Failed to add labels %s: %s", ", ".join(labels), exc)
            return
        self._labels.extend(labels)
