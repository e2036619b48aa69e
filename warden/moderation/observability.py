"""Emit structured observability events for moderation decisions.

This module defines event identifiers and a logger wrapper used by the
pipeline and remediation executor to report verdicts, degraded fetches and
remediation outcomes.

Usage
-----
>>> event_logger = ModerationEventLogger()
>>> event_logger.log_verdict(event, Spam("Too many links in content."))

"""

from __future__ import annotations

import enum
import typing as typ

from warden.logging import get_logger, log_debug, log_error, log_info, log_warning

from .models import Spam

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import Event, Verdict

logger = get_logger(__name__)


class ModerationEventType(enum.StrEnum):
    """Structured log event types for moderation runs."""

    VERDICT_CLEAN = "moderation.verdict.clean"
    VERDICT_SPAM = "moderation.verdict.spam"
    FETCH_FAILED = "moderation.fetch.failed"
    TEMPLATE_SCORED = "moderation.template.scored"
    REMEDIATION_PLANNED = "moderation.remediation.planned"
    REMEDIATION_APPLIED = "moderation.remediation.applied"
    REMEDIATION_FAILED = "moderation.remediation.failed"
    LABEL_FAILED = "moderation.label.failed"


def _item_ref(event: Event) -> str:
    return f"{event.repository}#{event.number}"


class ModerationEventLogger:
    """Emit structured moderation events via femtologging."""

    def log_verdict(self, event: Event, verdict: Verdict) -> None:
        """Log the single verdict produced for ``event``."""
        if isinstance(verdict, Spam):
            log_info(
                logger,
                "[%s] item=%s kind=%s author=%s reason=%s",
                ModerationEventType.VERDICT_SPAM,
                _item_ref(event),
                event.kind,
                event.author_login,
                verdict.reason,
            )
            return
        log_debug(
            logger,
            "[%s] item=%s kind=%s author=%s",
            ModerationEventType.VERDICT_CLEAN,
            _item_ref(event),
            event.kind,
            event.author_login,
        )

    def log_fetch_failed(
        self,
        event: Event,
        *,
        signal: str,
        error: BaseException,
        fallback: str,
    ) -> None:
        """Log a failed capability read and the fallback that replaced it.

        Parameters
        ----------
        event
            Event being moderated.
        signal
            Name of the signal the read was feeding (``account_age``,
            ``templates``).
        error
            The failure raised by the capability.
        fallback
            Description of the value substituted for the missing signal.

        """
        log_warning(
            logger,
            "[%s] item=%s signal=%s fallback=%s error_type=%s error_message=%s",
            ModerationEventType.FETCH_FAILED,
            _item_ref(event),
            signal,
            fallback,
            type(error).__name__,
            str(error),
        )

    def log_template_scored(self, event: Event, similarity: int) -> None:
        """Log one template similarity score at DEBUG."""
        log_debug(
            logger,
            "[%s] item=%s similarity_pct=%d",
            ModerationEventType.TEMPLATE_SCORED,
            _item_ref(event),
            similarity,
        )

    def log_remediation_planned(
        self,
        event: Event,
        actions: cabc.Sequence[str],
        reason: str,
    ) -> None:
        """Log the actions a dry run would have performed."""
        log_info(
            logger,
            "[%s] item=%s dry_run=True actions=%s reason=%s",
            ModerationEventType.REMEDIATION_PLANNED,
            _item_ref(event),
            ",".join(actions),
            reason,
        )

    def log_remediation_applied(
        self,
        event: Event,
        actions: cabc.Sequence[str],
        reason: str,
    ) -> None:
        """Log the actions actually performed against the item."""
        log_info(
            logger,
            "[%s] item=%s dry_run=False actions=%s reason=%s",
            ModerationEventType.REMEDIATION_APPLIED,
            _item_ref(event),
            ",".join(actions),
            reason,
        )

    def log_label_failed(self, event: Event, error: BaseException) -> None:
        """Log a swallowed label failure."""
        log_warning(
            logger,
            "[%s] item=%s error_type=%s error_message=%s",
            ModerationEventType.LABEL_FAILED,
            _item_ref(event),
            type(error).__name__,
            str(error),
        )

    def log_remediation_failed(
        self,
        event: Event,
        *,
        action: str,
        error: BaseException,
    ) -> None:
        """Log a required remediation action that failed."""
        log_error(
            logger,
            "[%s] item=%s action=%s error_type=%s error_message=%s",
            ModerationEventType.REMEDIATION_FAILED,
            _item_ref(event),
            action,
            type(error).__name__,
            str(error),
            exc_info=error,
        )
