"""Trigger the repository's format-check workflow for pull requests.

When a pull request is opened or updated in a repository that uses Biome
(``biome.json`` at the root), Warden sends a ``format-check``
``repository_dispatch`` event carrying the pull request number, head ref
and head SHA. Failures are logged, never raised.
"""

from __future__ import annotations

import enum
import typing as typ

from warden.logging import get_logger, log_debug, log_error, log_info
from warden.moderation.errors import FetchError, MutationError
from warden.moderation.models import EventKind

if typ.TYPE_CHECKING:
    from warden.config.models import RepositoryConfig
    from warden.moderation.models import Event
    from warden.moderation.protocol import RepositoryContents

logger = get_logger(__name__)

FORMAT_CONFIG_PATH = "biome.json"
FORMAT_EVENT_TYPE = "format-check"
_TRIGGER_KINDS = frozenset(
    {EventKind.PULL_REQUEST_OPENED, EventKind.PULL_REQUEST_SYNCHRONIZE}
)


class WorkflowDispatcher(typ.Protocol):
    """Send ``repository_dispatch`` events."""

    async def dispatch_event(
        self, event_type: str, client_payload: dict[str, typ.Any]
    ) -> None:
        """Trigger workflows listening for ``event_type``."""
        ...


class FormatCheckOutcome(enum.StrEnum):
    """Result of evaluating the format-check feature for one event."""

    SKIPPED = "skipped"
    PLANNED = "planned"
    DISPATCHED = "dispatched"
    FAILED = "failed"


async def trigger_format_check(
    event: Event,
    config: RepositoryConfig,
    contents: RepositoryContents,
    dispatcher: WorkflowDispatcher,
) -> FormatCheckOutcome:
    """Dispatch the format-check workflow when ``event`` calls for it."""
    if event.kind not in _TRIGGER_KINDS or not config.pr.auto_format:
        return FormatCheckOutcome.SKIPPED

    try:
        await contents.fetch_file_content(FORMAT_CONFIG_PATH)
    except FetchError as exc:
        log_debug(
            logger, "No %s found, skipping format check: %s", FORMAT_CONFIG_PATH, exc
        )
        return FormatCheckOutcome.SKIPPED

    if config.dry_run:
        log_info(
            logger,
            "DRY RUN: Would have triggered format workflow for PR #%d",
            event.number,
        )
        return FormatCheckOutcome.PLANNED

    try:
        await dispatcher.dispatch_event(
            FORMAT_EVENT_TYPE,
            {"pr_number": event.number, "ref": event.head_ref, "sha": event.head_sha},
        )
    except MutationError as exc:
        log_error(logger, "Failed to trigger format workflow: %s", exc, exc_info=exc)
        return FormatCheckOutcome.FAILED

    log_info(logger, "Triggered format check for PR #%d", event.number)
    return FormatCheckOutcome.DISPATCHED
