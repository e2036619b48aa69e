"""Ordered moderation stages producing one verdict per event.

Stages run in a fixed order: account age, keywords, link density, template
similarity. Each stage either abstains with :data:`CLEAN` or returns a
terminal :class:`Spam` verdict; the first ``Spam`` ends the run.

Usage
-----
>>> verdict = await evaluate(event, config, capabilities)
>>> if verdict.is_spam:
...     await remediate(event, verdict, config, capabilities)

"""

from __future__ import annotations

import typing as typ

from warden.common.time import utcnow

from .errors import FetchError
from .models import CLEAN, Spam
from .observability import ModerationEventLogger
from .signals import account_age_days, contains_any_keyword, count_links
from .similarity import similarity_pct, similarity_upper_bound
from .templates import fetch_templates

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from .models import Event, ModerationConfig, Verdict
    from .protocol import ModerationCapabilities

    type Stage = cabc.Callable[
        [Event, ModerationConfig, ModerationCapabilities, dt.datetime],
        cabc.Awaitable[Verdict],
    ]

REASON_ACCOUNT_TOO_NEW: typ.Final = "Account is too new."
REASON_SPAM_KEYWORDS: typ.Final = "Content contains spam keywords."
REASON_TOO_MANY_LINKS: typ.Final = "Too many links in content."
REASON_TEMPLATE_SIMILARITY: typ.Final = (
    "Content is too similar to the template (did you fill it out?)."
)

# A blank body on a newly opened item counts as an untouched template.
BLANK_BODY_SIMILARITY: typ.Final = 100


class ModerationPipeline:
    """Evaluate events against the moderation stages.

    The pipeline holds no per-event state, so one instance can serve
    concurrent events.
    """

    def __init__(
        self,
        *,
        clock: cabc.Callable[[], dt.datetime] = utcnow,
        event_logger: ModerationEventLogger | None = None,
    ) -> None:
        """Configure the evaluation clock and structured event logger."""
        self._clock = clock
        self._event_logger = event_logger or ModerationEventLogger()
        self._stages: tuple[Stage, ...] = (
            self._check_account_age,
            self._check_keywords,
            self._check_link_density,
            self._check_template_similarity,
        )

    async def evaluate(
        self,
        event: Event,
        config: ModerationConfig,
        capabilities: ModerationCapabilities,
    ) -> Verdict:
        """Return the verdict for ``event``.

        When moderation is disabled no stage runs and no capability is
        called.
        """
        if not config.enabled:
            return CLEAN

        now = self._clock()
        for stage in self._stages:
            verdict = await stage(event, config, capabilities, now)
            if verdict.is_spam:
                self._event_logger.log_verdict(event, verdict)
                return verdict

        self._event_logger.log_verdict(event, CLEAN)
        return CLEAN

    async def _resolve_created_at(
        self,
        event: Event,
        capabilities: ModerationCapabilities,
        now: dt.datetime,
    ) -> dt.datetime:
        if event.author_created_at is not None:
            return event.author_created_at
        try:
            return await capabilities.users.fetch_user_created_at(event.author_login)
        except FetchError as exc:
            # Fails closed: an unknown account age is treated as brand new.
            self._event_logger.log_fetch_failed(
                event,
                signal="account_age",
                error=exc,
                fallback="created_at=now",
            )
            return now

    async def _check_account_age(
        self,
        event: Event,
        config: ModerationConfig,
        capabilities: ModerationCapabilities,
        now: dt.datetime,
    ) -> Verdict:
        created_at = await self._resolve_created_at(event, capabilities, now)
        if account_age_days(created_at, now=now) < config.min_account_age_days:
            return Spam(REASON_ACCOUNT_TOO_NEW)
        return CLEAN

    async def _check_keywords(
        self,
        event: Event,
        config: ModerationConfig,
        capabilities: ModerationCapabilities,
        now: dt.datetime,
    ) -> Verdict:
        del capabilities, now
        if contains_any_keyword(event.title, config.keywords) or contains_any_keyword(
            event.body, config.keywords
        ):
            return Spam(REASON_SPAM_KEYWORDS)
        return CLEAN

    async def _check_link_density(
        self,
        event: Event,
        config: ModerationConfig,
        capabilities: ModerationCapabilities,
        now: dt.datetime,
    ) -> Verdict:
        del capabilities, now
        if count_links(event.body) > config.max_links:
            return Spam(REASON_TOO_MANY_LINKS)
        return CLEAN

    async def _check_template_similarity(
        self,
        event: Event,
        config: ModerationConfig,
        capabilities: ModerationCapabilities,
        now: dt.datetime,
    ) -> Verdict:
        del now
        if not event.is_newly_opened:
            return CLEAN

        def _on_failure(exc: FetchError) -> None:
            self._event_logger.log_fetch_failed(
                event,
                signal="templates",
                error=exc,
                fallback="no templates",
            )

        templates = await fetch_templates(
            capabilities.contents,
            is_pull_request=event.is_pull_request,
            on_failure=_on_failure,
        )
        blank_body = not event.body.strip()
        threshold = config.max_template_similarity_pct
        for template in templates:
            if blank_body:
                similarity = BLANK_BODY_SIMILARITY
            # Edit distance is at least the length gap.
            elif similarity_upper_bound(event.body, template) < threshold:
                continue
            else:
                similarity = similarity_pct(event.body, template)
            self._event_logger.log_template_scored(event, similarity)
            if similarity >= threshold:
                return Spam(REASON_TEMPLATE_SIMILARITY)
        return CLEAN


async def evaluate(
    event: Event,
    config: ModerationConfig,
    capabilities: ModerationCapabilities,
    *,
    clock: cabc.Callable[[], dt.datetime] = utcnow,
) -> Verdict:
    """Evaluate ``event`` with a default :class:`ModerationPipeline`."""
    return await ModerationPipeline(clock=clock).evaluate(event, config, capabilities)
