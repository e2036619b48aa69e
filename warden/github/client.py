"""GitHub REST client implementing the moderation capabilities.

:class:`GitHubRestClient` owns the HTTP connection pool and speaks the REST
API. :meth:`GitHubRestClient.for_item` binds it to one issue or pull
request, returning a :class:`GitHubItemContext` that satisfies the
``UserDirectory``, ``RepositoryContents`` and ``ItemMutator`` protocols and
translates transport failures into the moderation error taxonomy.
"""

from __future__ import annotations

import base64
import binascii
import collections.abc as cabc
import dataclasses
import typing as typ
from urllib.parse import quote

import httpx

from warden.common.time import parse_github_datetime
from warden.moderation.errors import ContentNotFoundError, FetchError, MutationError
from warden.moderation.models import DirectoryEntry

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError

if typ.TYPE_CHECKING:
    import datetime as dt

_HTTP_ERROR_STATUS_THRESHOLD = 400


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client."""

    token: str
    api_url: str = "https://api.github.com"
    timeout_s: float = 20.0
    user_agent: str = "warden/0.1"


def _contents_path(owner: str, name: str, path: str) -> str:
    return f"/repos/{owner}/{name}/contents/{quote(path.lstrip('/'), safe='/')}"


def _split_slug(repository: str) -> tuple[str, str]:
    owner, _, name = repository.partition("/")
    if not owner or not name or "/" in name:
        msg = f"repository must be in owner/name format, got: {repository!r}"
        raise ValueError(msg)
    return owner, name


def _decode_file(path: str, payload: dict[str, typ.Any]) -> str:
    content = payload.get("content")
    if not isinstance(content, str):
        raise GitHubResponseShapeError.missing(f"{path}.content")
    encoding = payload.get("encoding", "base64")
    if encoding != "base64":
        # Files over 1 MB come back with encoding "none" and no content.
        raise GitHubResponseShapeError.missing(f"{path}.content ({encoding})")
    try:
        raw = base64.b64decode(content)
    except (binascii.Error, ValueError) as exc:
        raise GitHubResponseShapeError.missing(f"{path}.content") from exc
    return raw.decode("utf-8", errors="replace")


def _directory_entries(items: list[typ.Any]) -> list[DirectoryEntry]:
    entries: list[DirectoryEntry] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        path = item.get("path")
        if not isinstance(name, str) or not isinstance(path, str):
            continue
        entries.append(
            DirectoryEntry(name=name, path=path, type=str(item.get("type", "file")))
        )
    return entries


class GitHubRestClient:
    """Thin async wrapper over the GitHub REST endpoints Warden uses."""

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_s,
            headers={
                "Authorization": f"Bearer {config.token}",
                "User-Agent": config.user_agent,
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    def for_item(
        self,
        repository: str,
        number: int,
        *,
        is_pull_request: bool,
    ) -> GitHubItemContext:
        """Return capabilities bound to one issue or pull request."""
        owner, name = _split_slug(repository)
        return GitHubItemContext(
            self,
            owner=owner,
            name=name,
            number=number,
            is_pull_request=is_pull_request,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, typ.Any] | None = None,
    ) -> typ.Any:  # noqa: ANN401 - decoded JSON
        """Send a request and return the decoded JSON body, if any.

        Raises
        ------
        GitHubAPIError
            On transport failures or non-2xx responses.

        """
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise GitHubAPIError.transport_error(method, path, exc) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(method, path, response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubResponseShapeError.missing(f"{path} JSON body") from exc

    async def get_user(self, login: str) -> dict[str, typ.Any]:
        """Return the public profile of ``login``."""
        payload = await self.request("GET", f"/users/{quote(login, safe='')}")
        if not isinstance(payload, dict):
            raise GitHubResponseShapeError.missing("user")
        return payload

    async def get_contents(
        self, owner: str, name: str, path: str
    ) -> typ.Any:  # noqa: ANN401 - file object or directory listing
        """Return the contents API payload for a file or directory."""
        return await self.request("GET", _contents_path(owner, name, path))

    async def add_labels(
        self, owner: str, name: str, number: int, labels: cabc.Sequence[str]
    ) -> None:
        """Add labels to an issue or pull request."""
        await self.request(
            "POST",
            f"/repos/{owner}/{name}/issues/{number}/labels",
            json={"labels": list(labels)},
        )

    async def close_issue(self, owner: str, name: str, number: int) -> None:
        """Close an issue as not planned."""
        await self.request(
            "PATCH",
            f"/repos/{owner}/{name}/issues/{number}",
            json={"state": "closed", "state_reason": "not_planned"},
        )

    async def close_pull_request(self, owner: str, name: str, number: int) -> None:
        """Close a pull request; ``state_reason`` is not accepted for pulls."""
        await self.request(
            "PATCH",
            f"/repos/{owner}/{name}/pulls/{number}",
            json={"state": "closed"},
        )

    async def create_comment(
        self, owner: str, name: str, number: int, body: str
    ) -> None:
        """Post a comment on an issue or pull request."""
        await self.request(
            "POST",
            f"/repos/{owner}/{name}/issues/{number}/comments",
            json={"body": body},
        )

    async def create_dispatch_event(
        self,
        owner: str,
        name: str,
        *,
        event_type: str,
        client_payload: dict[str, typ.Any],
    ) -> None:
        """Trigger a ``repository_dispatch`` workflow event."""
        await self.request(
            "POST",
            f"/repos/{owner}/{name}/dispatches",
            json={"event_type": event_type, "client_payload": client_payload},
        )


class GitHubItemContext:
    """Moderation capabilities bound to a single issue or pull request."""

    def __init__(  # noqa: PLR0913
        self,
        client: GitHubRestClient,
        *,
        owner: str,
        name: str,
        number: int,
        is_pull_request: bool,
    ) -> None:
        """Bind the client to the item identified by ``owner/name#number``."""
        self._client = client
        self.owner = owner
        self.name = name
        self.number = number
        self.is_pull_request = is_pull_request

    async def fetch_user_created_at(self, login: str) -> dt.datetime:
        """Return when ``login``'s account was created."""
        target = f"user {login}"
        try:
            user = await self._client.get_user(login)
            created_at = user.get("created_at")
            if not isinstance(created_at, str):
                raise GitHubResponseShapeError.missing("user.created_at")
            return parse_github_datetime(created_at)
        except GitHubAPIError as exc:
            raise _fetch_error(target, exc) from exc
        except (GitHubResponseShapeError, ValueError) as exc:
            raise FetchError.for_target(target, exc) from exc

    async def fetch_file_content(self, path: str) -> str:
        """Return the decoded UTF-8 text of the file at ``path``."""
        try:
            payload = await self._client.get_contents(self.owner, self.name, path)
            if not isinstance(payload, dict):
                raise GitHubResponseShapeError.unexpected(path, "file")
            return _decode_file(path, payload)
        except GitHubAPIError as exc:
            raise _fetch_error(path, exc) from exc
        except GitHubResponseShapeError as exc:
            raise FetchError.for_target(path, exc) from exc

    async def list_directory(self, path: str) -> list[DirectoryEntry]:
        """Return the entries of the directory at ``path``."""
        try:
            payload = await self._client.get_contents(self.owner, self.name, path)
            if not isinstance(payload, list):
                raise GitHubResponseShapeError.unexpected(path, "directory")
            return _directory_entries(payload)
        except GitHubAPIError as exc:
            raise _fetch_error(path, exc) from exc
        except GitHubResponseShapeError as exc:
            raise FetchError.for_target(path, exc) from exc

    async def add_labels(self, labels: cabc.Sequence[str]) -> None:
        """Add ``labels`` to the item."""
        await self._mutate(
            "add_labels",
            self._client.add_labels(self.owner, self.name, self.number, labels),
        )

    async def close_item(self) -> None:
        """Close the item using the endpoint that matches its kind."""
        if self.is_pull_request:
            call = self._client.close_pull_request(self.owner, self.name, self.number)
        else:
            call = self._client.close_issue(self.owner, self.name, self.number)
        await self._mutate("close", call)

    async def post_comment(self, text: str) -> None:
        """Post ``text`` as a comment on the item."""
        await self._mutate(
            "comment",
            self._client.create_comment(self.owner, self.name, self.number, text),
        )

    async def dispatch_event(
        self, event_type: str, client_payload: dict[str, typ.Any]
    ) -> None:
        """Trigger a ``repository_dispatch`` event on the item's repository."""
        await self._mutate(
            "dispatch",
            self._client.create_dispatch_event(
                self.owner,
                self.name,
                event_type=event_type,
                client_payload=client_payload,
            ),
        )

    async def _mutate(self, action: str, call: cabc.Awaitable[None]) -> None:
        try:
            await call
        except (GitHubAPIError, GitHubResponseShapeError) as exc:
            raise MutationError.failed(action, exc) from exc


def _fetch_error(target: str, exc: GitHubAPIError) -> FetchError:
    if exc.is_not_found:
        return ContentNotFoundError.missing(target)
    return FetchError.for_target(target, exc)
