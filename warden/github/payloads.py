"""Decode GitHub webhook payloads into moderation events.

Only the fields moderation and the follow-on features read are declared;
msgspec ignores everything else in the payload. Each supported
``(event, action)`` pair maps to one :class:`~warden.moderation.EventKind`,
so downstream code switches on the kind rather than on which payload keys
happen to be present.
"""

from __future__ import annotations

import typing as typ

import msgspec

from warden.common.time import parse_github_datetime
from warden.moderation.models import Event, EventKind

if typ.TYPE_CHECKING:
    import datetime as dt


class PayloadError(ValueError):
    """Raised when a supported webhook payload has an invalid shape."""


class _User(msgspec.Struct, kw_only=True):
    login: str
    created_at: str | None = None


class _Owner(msgspec.Struct, kw_only=True):
    login: str


class _Repository(msgspec.Struct, kw_only=True):
    name: str
    owner: _Owner
    full_name: str | None = None

    @property
    def slug(self) -> str:
        return self.full_name or f"{self.owner.login}/{self.name}"


class _Issue(msgspec.Struct, kw_only=True):
    number: int
    user: _User
    title: str | None = ""
    body: str | None = ""
    author_association: str | None = None
    # Present (as a dict of URLs) when the issue is really a pull request.
    pull_request: dict[str, typ.Any] | None = None


class _Head(msgspec.Struct, kw_only=True):
    ref: str
    sha: str


class _PullRequest(msgspec.Struct, kw_only=True):
    number: int
    user: _User
    title: str | None = ""
    body: str | None = ""
    author_association: str | None = None
    head: _Head | None = None


class _Comment(msgspec.Struct, kw_only=True):
    user: _User
    body: str | None = ""
    author_association: str | None = None


class IssuesPayload(msgspec.Struct, kw_only=True):
    """Payload of the ``issues`` webhook."""

    action: str
    issue: _Issue
    repository: _Repository
    sender: _User | None = None


class PullRequestPayload(msgspec.Struct, kw_only=True):
    """Payload of the ``pull_request`` webhook."""

    action: str
    pull_request: _PullRequest
    repository: _Repository
    sender: _User | None = None


class IssueCommentPayload(msgspec.Struct, kw_only=True):
    """Payload of the ``issue_comment`` webhook."""

    action: str
    issue: _Issue
    comment: _Comment
    repository: _Repository
    sender: _User | None = None


def _created_at(author: _User, sender: _User | None) -> dt.datetime | None:
    """Return the author's account creation time if the payload carries it."""
    raw = author.created_at
    if raw is None and sender is not None and sender.login == author.login:
        raw = sender.created_at
    if raw is None:
        return None
    try:
        return parse_github_datetime(raw)
    except ValueError:
        return None


def _event_kind(event_name: str, action: str) -> EventKind | None:
    try:
        return EventKind(f"{event_name}.{action}")
    except ValueError:
        return None


def _from_issues(kind: EventKind, payload: IssuesPayload) -> Event:
    issue = payload.issue
    return Event(
        kind=kind,
        repository=payload.repository.slug,
        number=issue.number,
        author_login=issue.user.login,
        author_created_at=_created_at(issue.user, payload.sender),
        title=issue.title or "",
        body=issue.body or "",
        is_pull_request=False,
        author_association=issue.author_association,
    )


def _from_pull_request(kind: EventKind, payload: PullRequestPayload) -> Event:
    pull = payload.pull_request
    return Event(
        kind=kind,
        repository=payload.repository.slug,
        number=pull.number,
        author_login=pull.user.login,
        author_created_at=_created_at(pull.user, payload.sender),
        title=pull.title or "",
        body=pull.body or "",
        is_pull_request=True,
        author_association=pull.author_association,
        head_ref=pull.head.ref if pull.head else None,
        head_sha=pull.head.sha if pull.head else None,
    )


def _from_comment(kind: EventKind, payload: IssueCommentPayload) -> Event:
    comment = payload.comment
    return Event(
        kind=kind,
        repository=payload.repository.slug,
        number=payload.issue.number,
        author_login=comment.user.login,
        author_created_at=_created_at(comment.user, payload.sender),
        body=comment.body or "",
        is_pull_request=payload.issue.pull_request is not None,
        author_association=comment.author_association,
    )


def event_from_payload(event_name: str, payload: dict[str, typ.Any]) -> Event | None:
    """Build an :class:`Event` from a webhook delivery.

    Parameters
    ----------
    event_name
        Value of the ``X-GitHub-Event`` header.
    payload
        Decoded JSON body of the delivery.

    Returns
    -------
    Event | None
        The moderation event, or ``None`` when the event/action pair is not
        one Warden acts on.

    Raises
    ------
    PayloadError
        If a supported delivery is missing required fields.

    """
    action = payload.get("action")
    if not isinstance(action, str):
        return None
    kind = _event_kind(event_name, action)
    if kind is None:
        return None

    try:
        match event_name:
            case "issues":
                return _from_issues(kind, msgspec.convert(payload, IssuesPayload))
            case "pull_request":
                return _from_pull_request(
                    kind, msgspec.convert(payload, PullRequestPayload)
                )
            case _:
                return _from_comment(
                    kind, msgspec.convert(payload, IssueCommentPayload)
                )
    except msgspec.ValidationError as exc:
        msg = f"invalid {event_name} payload: {exc}"
        raise PayloadError(msg) from exc
