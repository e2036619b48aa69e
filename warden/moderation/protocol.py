"""Capability protocols consumed by the moderation core.

The core never talks to GitHub directly. Hosting code injects objects
implementing these protocols; :class:`warden.github.client.GitHubItemContext`
is the production implementation and the test suite uses in-memory fakes.

Reads raise :class:`~warden.moderation.errors.FetchError` (or its
``ContentNotFoundError`` subclass) and writes raise
:class:`~warden.moderation.errors.MutationError`. Implementations are
responsible for their own timeouts.
"""

from __future__ import annotations

import dataclasses
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from .models import DirectoryEntry


@typ.runtime_checkable
class UserDirectory(typ.Protocol):
    """Look up account metadata for GitHub users."""

    async def fetch_user_created_at(self, login: str) -> dt.datetime:
        """Return the aware UTC creation time of ``login``'s account."""
        ...


@typ.runtime_checkable
class RepositoryContents(typ.Protocol):
    """Read files and directory listings from the event's repository."""

    async def fetch_file_content(self, path: str) -> str:
        """Return the decoded text of the file at ``path``."""
        ...

    async def list_directory(self, path: str) -> cabc.Sequence[DirectoryEntry]:
        """Return the entries of the directory at ``path``."""
        ...


@typ.runtime_checkable
class ItemMutator(typ.Protocol):
    """Apply changes to the issue or pull request an event belongs to."""

    async def add_labels(self, labels: cabc.Sequence[str]) -> None:
        """Add ``labels`` to the item."""
        ...

    async def close_item(self) -> None:
        """Close the item; closing an already-closed item is a no-op."""
        ...

    async def post_comment(self, text: str) -> None:
        """Post ``text`` as a new comment on the item."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class ModerationCapabilities:
    """Bundle of the capabilities one pipeline run may use."""

    users: UserDirectory
    contents: RepositoryContents
    mutator: ItemMutator
