"""Per-event orchestration of moderation and the follow-on features.

For each supported delivery the dispatcher loads the repository config,
runs the moderation pipeline and, if the verdict is spam, remediates and
stops. Clean events continue to the community and format-check features.

Failures are contained per event: configuration errors, remediation errors
and community comment failures are logged and reported in the
:class:`DispatchOutcome` instead of propagating to the webhook handler.

Usage
-----
>>> dispatcher = EventDispatcher(
...     lambda event: client.for_item(
...         event.repository, event.number, is_pull_request=event.is_pull_request
...     )
... )
>>> outcome = await dispatcher.handle(event)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from warden.config.loader import load_repository_config
from warden.features.community import CommunityFeature
from warden.features.formatting import WorkflowDispatcher, trigger_format_check
from warden.logging import get_logger, log_error, log_info
from warden.moderation.errors import (
    ConfigurationError,
    MutationError,
    RemediationError,
)
from warden.moderation.pipeline import ModerationPipeline
from warden.moderation.protocol import (
    ItemMutator,
    ModerationCapabilities,
    RepositoryContents,
    UserDirectory,
)
from warden.moderation.remediation import RemediationExecutor

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from warden.features.community import CommunityOutcome
    from warden.features.formatting import FormatCheckOutcome
    from warden.moderation.models import Event, Verdict
    from warden.moderation.remediation import RemediationReport

__all__ = ["DispatchOutcome", "EventDispatcher", "ItemCapabilities"]

logger = get_logger(__name__)


class ItemCapabilities(
    UserDirectory, RepositoryContents, ItemMutator, WorkflowDispatcher, typ.Protocol
):
    """Everything the dispatcher needs for one issue or pull request."""


@dc.dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Summary of how one event was handled.

    Attributes
    ----------
    event
        The event that was dispatched.
    verdict
        Moderation verdict, or ``None`` when config loading failed.
    remediation
        Remediation report for spam verdicts.
    community
        Community feature outcome for clean verdicts.
    format_check
        Format-check feature outcome for clean verdicts.
    error
        Description of the failure that ended processing early, if any.

    """

    event: Event
    verdict: Verdict | None = None
    remediation: RemediationReport | None = None
    community: CommunityOutcome | None = None
    format_check: FormatCheckOutcome | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return True when no step failed."""
        return self.error is None

    def as_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-compatible summary for HTTP responses."""
        reason = getattr(self.verdict, "reason", None)
        return {
            "event": str(self.event.kind),
            "item": f"{self.event.repository}#{self.event.number}",
            "verdict": None
            if self.verdict is None
            else ("spam" if self.verdict.is_spam else "clean"),
            "reason": reason,
            "dry_run": None if self.remediation is None else self.remediation.dry_run,
            "actions": []
            if self.remediation is None
            else [str(action) for action in self.remediation.actions],
            "format_check": (
                None if self.format_check is None else str(self.format_check)
            ),
            "error": self.error,
        }


class EventDispatcher:
    """Route events through moderation, remediation and follow-on features."""

    def __init__(
        self,
        capability_factory: cabc.Callable[[Event], ItemCapabilities],
        *,
        pipeline: ModerationPipeline | None = None,
        executor: RemediationExecutor | None = None,
    ) -> None:
        """Configure how per-item capabilities are built.

        Parameters
        ----------
        capability_factory
            Returns the capabilities bound to the event's issue or pull
            request.
        pipeline
            Moderation pipeline; a default instance is used when omitted.
        executor
            Remediation executor; a default instance is used when omitted.

        """
        self._capability_factory = capability_factory
        self._pipeline = pipeline or ModerationPipeline()
        self._executor = executor or RemediationExecutor()

    async def handle(self, event: Event) -> DispatchOutcome:
        """Process ``event`` and return a summary of what happened."""
        item = self._capability_factory(event)
        try:
            config = await load_repository_config(item)
        except ConfigurationError as exc:
            log_error(
                logger,
                "Rejected configuration for %s: %s",
                event.repository,
                exc,
            )
            return DispatchOutcome(event=event, error=f"configuration: {exc}")

        moderation_config = config.moderation_config()
        capabilities = ModerationCapabilities(users=item, contents=item, mutator=item)
        verdict = await self._pipeline.evaluate(event, moderation_config, capabilities)

        if verdict.is_spam:
            try:
                report = await self._executor.remediate(
                    event, verdict, moderation_config, capabilities
                )
            except RemediationError as exc:
                return DispatchOutcome(event=event, verdict=verdict, error=str(exc))
            return DispatchOutcome(event=event, verdict=verdict, remediation=report)

        community: CommunityOutcome | None = None
        error: str | None = None
        try:
            community = await CommunityFeature(item, dry_run=config.dry_run).run(
                event, config
            )
        except MutationError as exc:
            log_error(
                logger,
                "Community actions failed for %s#%d: %s",
                event.repository,
                event.number,
                exc,
            )
            error = f"community: {exc}"

        format_check = await trigger_format_check(event, config, item, item)
        log_info(
            logger,
            "Handled %s for %s#%d",
            event.kind,
            event.repository,
            event.number,
        )
        return DispatchOutcome(
            event=event,
            verdict=verdict,
            community=community,
            format_check=format_check,
            error=error,
        )
