"""Unit tests for the per-event dispatcher."""

from __future__ import annotations

import pytest

from tests.helpers.fakes import FakeItem, fixed_clock, make_event
from warden.config import CONFIG_PATH
from warden.dispatch import EventDispatcher
from warden.features import FormatCheckOutcome
from warden.features.formatting import FORMAT_CONFIG_PATH
from warden.moderation import (
    EventKind,
    ModerationPipeline,
    MutationError,
    RemediationAction,
    Spam,
)
from warden.moderation.pipeline import REASON_SPAM_KEYWORDS

LIVE_CONFIG = "dryRun: false\n"


def _dispatcher(item: FakeItem) -> EventDispatcher:
    return EventDispatcher(
        lambda _event: item, pipeline=ModerationPipeline(clock=fixed_clock())
    )


@pytest.mark.asyncio
async def test_spam_is_remediated_and_stops() -> None:
    """Spam verdicts remediate and skip the follow-on features."""
    item = FakeItem(files={CONFIG_PATH: LIVE_CONFIG, FORMAT_CONFIG_PATH: "{}"})
    event = make_event(
        EventKind.PULL_REQUEST_OPENED,
        title="Buy now",
        author_association="FIRST_TIMER",
    )

    outcome = await _dispatcher(item).handle(event)

    assert outcome.verdict == Spam(REASON_SPAM_KEYWORDS)
    assert outcome.remediation is not None
    assert outcome.remediation.actions == tuple(RemediationAction)
    assert outcome.community is None
    assert outcome.format_check is None
    assert item.closed
    assert item.dispatched == [], "Spam must not trigger the format check."
    assert outcome.succeeded


@pytest.mark.asyncio
async def test_missing_config_runs_dry() -> None:
    """Without a config file nothing is changed on GitHub."""
    item = FakeItem()
    event = make_event(title="cheap meds", author_association="FIRST_TIMER")

    outcome = await _dispatcher(item).handle(event)

    assert outcome.verdict is not None
    assert outcome.verdict.is_spam
    assert outcome.remediation is not None
    assert outcome.remediation.dry_run
    assert item.mutation_calls() == []


@pytest.mark.asyncio
async def test_clean_event_runs_features() -> None:
    """Clean events continue to the community and format features."""
    item = FakeItem(files={CONFIG_PATH: LIVE_CONFIG, FORMAT_CONFIG_PATH: "{}"})
    event = make_event(
        EventKind.PULL_REQUEST_OPENED,
        title="Improve docs",
        author_association="FIRST_TIMER",
    )

    outcome = await _dispatcher(item).handle(event)

    assert outcome.verdict is not None
    assert not outcome.verdict.is_spam
    assert outcome.community is not None
    assert len(item.comments) == 1
    assert outcome.format_check is FormatCheckOutcome.DISPATCHED
    assert outcome.succeeded


@pytest.mark.asyncio
async def test_invalid_config_is_reported() -> None:
    """A broken config file stops processing with an error."""
    item = FakeItem(files={CONFIG_PATH: "spam:\n  maxLinks: -1\n"})

    outcome = await _dispatcher(item).handle(make_event(title="buy now"))

    assert outcome.verdict is None
    assert outcome.error is not None
    assert outcome.error.startswith("configuration:")
    assert item.mutation_calls() == []


@pytest.mark.asyncio
async def test_remediation_failure_is_reported() -> None:
    """A failed close is reported on the outcome."""
    item = FakeItem(
        files={CONFIG_PATH: LIVE_CONFIG},
        write_errors={"close": MutationError.failed("close", "500")},
    )

    outcome = await _dispatcher(item).handle(make_event(title="buy now"))

    assert outcome.verdict == Spam(REASON_SPAM_KEYWORDS)
    assert outcome.remediation is None
    assert not outcome.succeeded


@pytest.mark.asyncio
async def test_community_failure_still_runs_format_check() -> None:
    """Community comment failures are reported, format check still runs."""
    item = FakeItem(
        files={CONFIG_PATH: LIVE_CONFIG, FORMAT_CONFIG_PATH: "{}"},
        write_errors={"comment": MutationError.failed("comment", "500")},
    )
    event = make_event(
        EventKind.PULL_REQUEST_OPENED,
        title="Improve docs",
        author_association="FIRST_TIMER",
    )

    outcome = await _dispatcher(item).handle(event)

    assert outcome.error is not None
    assert outcome.error.startswith("community:")
    assert outcome.format_check is FormatCheckOutcome.DISPATCHED


@pytest.mark.asyncio
async def test_as_dict_summarises_outcome() -> None:
    """The outcome serialises to a JSON-compatible summary."""
    item = FakeItem(files={CONFIG_PATH: LIVE_CONFIG})

    outcome = await _dispatcher(item).handle(make_event(title="buy now", number=9))

    assert outcome.as_dict() == {
        "event": "issues.opened",
        "item": "acme/widgets#9",
        "verdict": "spam",
        "reason": REASON_SPAM_KEYWORDS,
        "dry_run": False,
        "actions": ["add_label", "close", "comment"],
        "format_check": None,
        "error": None,
    }
