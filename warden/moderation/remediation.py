"""Label, close and comment on items judged to be spam.

Remediation is not transactional. The label is best-effort; closing and
commenting are required and a failure in either raises
:class:`RemediationError`. Every action is safe to repeat on an item that
is already labelled and closed.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from .errors import MutationError, RemediationError
from .models import Spam
from .observability import ModerationEventLogger

if typ.TYPE_CHECKING:
    from .models import Event, ModerationConfig, Verdict
    from .protocol import ModerationCapabilities

SPAM_LABEL: typ.Final = "spam"


class RemediationAction(enum.StrEnum):
    """Actions the executor may take against a spam item."""

    ADD_LABEL = "add_label"
    CLOSE = "close"
    COMMENT = "comment"


@dataclasses.dataclass(frozen=True, slots=True)
class RemediationReport:
    """Outcome of one remediation run.

    Attributes
    ----------
    dry_run
        Whether actions were only planned.
    actions
        Actions performed, or planned when ``dry_run`` is set.
    label_failed
        Whether the best-effort label action failed.

    """

    dry_run: bool = False
    actions: tuple[RemediationAction, ...] = ()
    label_failed: bool = False


def spam_comment(reason: str) -> str:
    """Return the comment posted on items closed as spam."""
    return (
        "This item has been automatically marked as spam and closed. "
        f"Reason: {reason}"
    )


class RemediationExecutor:
    """Apply (or plan, in dry run) the spam remediation actions."""

    def __init__(self, *, event_logger: ModerationEventLogger | None = None) -> None:
        """Configure the structured event logger."""
        self._event_logger = event_logger or ModerationEventLogger()

    async def remediate(
        self,
        event: Event,
        verdict: Verdict,
        config: ModerationConfig,
        capabilities: ModerationCapabilities,
    ) -> RemediationReport:
        """Remediate ``event`` when ``verdict`` is spam.

        Returns
        -------
        RemediationReport
            Empty for clean verdicts; otherwise the applied or planned
            actions.

        Raises
        ------
        RemediationError
            If closing the item or posting the comment fails.

        """
        if not isinstance(verdict, Spam):
            return RemediationReport(dry_run=config.dry_run)

        planned = tuple(RemediationAction)
        if config.dry_run:
            self._event_logger.log_remediation_planned(event, planned, verdict.reason)
            return RemediationReport(dry_run=True, actions=planned)

        mutator = capabilities.mutator
        applied: list[RemediationAction] = []
        label_failed = False
        try:
            await mutator.add_labels([SPAM_LABEL])
            applied.append(RemediationAction.ADD_LABEL)
        except MutationError as exc:
            label_failed = True
            self._event_logger.log_label_failed(event, exc)

        await self._required(
            event, verdict, RemediationAction.CLOSE, mutator.close_item()
        )
        applied.append(RemediationAction.CLOSE)

        await self._required(
            event,
            verdict,
            RemediationAction.COMMENT,
            mutator.post_comment(spam_comment(verdict.reason)),
        )
        applied.append(RemediationAction.COMMENT)

        self._event_logger.log_remediation_applied(event, applied, verdict.reason)
        return RemediationReport(
            dry_run=False,
            actions=tuple(applied),
            label_failed=label_failed,
        )

    async def _required(
        self,
        event: Event,
        verdict: Spam,
        action: RemediationAction,
        call: typ.Awaitable[None],
    ) -> None:
        try:
            await call
        except MutationError as exc:
            self._event_logger.log_remediation_failed(event, action=action, error=exc)
            raise RemediationError(action, verdict.reason) from exc


async def remediate(
    event: Event,
    verdict: Verdict,
    config: ModerationConfig,
    capabilities: ModerationCapabilities,
) -> RemediationReport:
    """Remediate ``event`` with a default :class:`RemediationExecutor`."""
    return await RemediationExecutor().remediate(event, verdict, config, capabilities)
