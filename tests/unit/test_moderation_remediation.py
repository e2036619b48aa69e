"""Unit tests for the spam remediation executor."""

from __future__ import annotations

import pytest

from tests.helpers.fakes import FakeItem, make_event
from warden.moderation import (
    CLEAN,
    SPAM_LABEL,
    ModerationConfig,
    MutationError,
    RemediationAction,
    RemediationError,
    RemediationExecutor,
    Spam,
    remediate,
)
from warden.moderation.remediation import spam_comment

VERDICT = Spam("Too many links in content.")
CONFIG = ModerationConfig()


@pytest.fixture
def executor() -> RemediationExecutor:
    """Return a remediation executor."""
    return RemediationExecutor()


@pytest.mark.asyncio
async def test_applies_label_close_and_comment(executor: RemediationExecutor) -> None:
    """Spam items are labelled, closed and commented on, in that order."""
    item = FakeItem()

    report = await executor.remediate(
        make_event(), VERDICT, CONFIG, item.capabilities()
    )

    assert item.mutation_calls() == [
        ("add_labels", (SPAM_LABEL,)),
        ("close_item", None),
        ("post_comment", spam_comment(VERDICT.reason)),
    ]
    assert report.actions == (
        RemediationAction.ADD_LABEL,
        RemediationAction.CLOSE,
        RemediationAction.COMMENT,
    )
    assert not report.dry_run
    assert not report.label_failed


@pytest.mark.asyncio
async def test_comment_includes_reason(executor: RemediationExecutor) -> None:
    """The posted comment explains why the item was closed."""
    item = FakeItem()

    await executor.remediate(make_event(), VERDICT, CONFIG, item.capabilities())

    assert VERDICT.reason in item.comments[0]


@pytest.mark.asyncio
async def test_dry_run_makes_no_mutations(executor: RemediationExecutor) -> None:
    """Dry run plans every action without calling the mutator."""
    item = FakeItem()
    config = ModerationConfig(dry_run=True)

    report = await executor.remediate(
        make_event(), VERDICT, config, item.capabilities()
    )

    assert item.calls == [], "Dry run must not call any capability."
    assert report.dry_run
    assert report.actions == tuple(RemediationAction)


@pytest.mark.asyncio
async def test_clean_verdict_does_nothing(executor: RemediationExecutor) -> None:
    """Clean verdicts never remediate."""
    item = FakeItem()

    report = await executor.remediate(make_event(), CLEAN, CONFIG, item.capabilities())

    assert item.calls == []
    assert report.actions == ()


@pytest.mark.asyncio
async def test_label_failure_is_best_effort(executor: RemediationExecutor) -> None:
    """A failed label does not stop close and comment."""
    item = FakeItem(
        write_errors={"add_labels": MutationError.failed("add_labels", "403")}
    )

    report = await executor.remediate(
        make_event(), VERDICT, CONFIG, item.capabilities()
    )

    assert item.closed
    assert item.comments == [spam_comment(VERDICT.reason)]
    assert report.label_failed
    assert report.actions == (RemediationAction.CLOSE, RemediationAction.COMMENT)


@pytest.mark.asyncio
async def test_close_failure_raises(executor: RemediationExecutor) -> None:
    """Closing is required; its failure stops remediation."""
    cause = MutationError.failed("close", "500")
    item = FakeItem(write_errors={"close": cause})

    with pytest.raises(RemediationError) as excinfo:
        await executor.remediate(make_event(), VERDICT, CONFIG, item.capabilities())

    assert excinfo.value.action == RemediationAction.CLOSE
    assert excinfo.value.reason == VERDICT.reason
    assert excinfo.value.__cause__ is cause
    assert item.comments == [], "Comment must not be posted after close fails."


@pytest.mark.asyncio
async def test_comment_failure_raises(executor: RemediationExecutor) -> None:
    """Commenting is required; remediation is not rolled back."""
    item = FakeItem(write_errors={"comment": MutationError.failed("comment", "500")})

    with pytest.raises(RemediationError) as excinfo:
        await executor.remediate(make_event(), VERDICT, CONFIG, item.capabilities())

    assert excinfo.value.action == RemediationAction.COMMENT
    assert item.closed, "Close is not undone when the comment fails."
    assert SPAM_LABEL in item.labels


@pytest.mark.asyncio
async def test_repeated_remediation_is_idempotent(
    executor: RemediationExecutor,
) -> None:
    """Remediating an already labelled, closed item succeeds again."""
    item = FakeItem()
    event = make_event()

    await executor.remediate(event, VERDICT, CONFIG, item.capabilities())
    report = await executor.remediate(event, VERDICT, CONFIG, item.capabilities())

    assert item.closed
    assert item.labels == {SPAM_LABEL}
    assert len(report.actions) == 3


@pytest.mark.asyncio
async def test_module_level_remediate() -> None:
    """``remediate`` uses a default executor."""
    item = FakeItem()

    report = await remediate(make_event(), VERDICT, CONFIG, item.capabilities())

    assert report.actions[-1] == RemediationAction.COMMENT
