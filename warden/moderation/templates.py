"""Resolve the repository templates a submission is compared against.

Pull requests use the first pull request template found in a fixed list of
conventional locations. Issues use every Markdown file in the issue
template directory, falling back to a single-file issue template when the
directory does not exist.

Only ``ContentNotFoundError`` moves the probe on to the next candidate. Any
other read failure ends resolution with an empty template set, which the
pipeline treats as "cannot compare".
"""

from __future__ import annotations

import typing as typ

from .errors import ContentNotFoundError, FetchError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import TemplateSet
    from .protocol import RepositoryContents

PULL_REQUEST_TEMPLATE_PATHS: typ.Final[tuple[str, ...]] = (
    ".github/pull_request_template.md",
    ".github/PULL_REQUEST_TEMPLATE.md",
    "pull_request_template.md",
    "PULL_REQUEST_TEMPLATE.md",
)
ISSUE_TEMPLATE_DIRECTORY: typ.Final = ".github/ISSUE_TEMPLATE"
ISSUE_TEMPLATE_PATHS: typ.Final[tuple[str, ...]] = (
    ".github/ISSUE_TEMPLATE.md",
    "ISSUE_TEMPLATE.md",
)
TEMPLATE_EXTENSION: typ.Final = ".md"


async def _first_existing(
    contents: RepositoryContents,
    paths: cabc.Iterable[str],
) -> str | None:
    """Return the content of the first path that exists, else ``None``."""
    for path in paths:
        try:
            return await contents.fetch_file_content(path)
        except ContentNotFoundError:
            continue
    return None


async def _issue_directory_templates(
    contents: RepositoryContents,
) -> list[str]:
    """Return every Markdown template under the issue template directory.

    Raises
    ------
    ContentNotFoundError
        If the directory does not exist.

    """
    entries = await contents.list_directory(ISSUE_TEMPLATE_DIRECTORY)
    templates: list[str] = []
    for entry in entries:
        if not (entry.is_file and entry.name.endswith(TEMPLATE_EXTENSION)):
            continue
        try:
            templates.append(await contents.fetch_file_content(entry.path))
        except ContentNotFoundError:
            continue
    # Same content listed twice counts once.
    return list(dict.fromkeys(templates))


async def _resolve(
    contents: RepositoryContents,
    *,
    is_pull_request: bool,
) -> TemplateSet:
    if is_pull_request:
        template = await _first_existing(contents, PULL_REQUEST_TEMPLATE_PATHS)
        return () if template is None else (template,)

    try:
        return tuple(await _issue_directory_templates(contents))
    except ContentNotFoundError:
        template = await _first_existing(contents, ISSUE_TEMPLATE_PATHS)
        return () if template is None else (template,)


async def fetch_templates(
    contents: RepositoryContents,
    *,
    is_pull_request: bool,
    on_failure: cabc.Callable[[FetchError], None] | None = None,
) -> TemplateSet:
    """Return the templates relevant to an issue or pull request.

    Parameters
    ----------
    contents
        Content-read capability for the event's repository.
    is_pull_request
        Selects pull request templates instead of issue templates.
    on_failure
        Optional callback receiving the read error before the empty set is
        returned.

    Returns
    -------
    TemplateSet
        Possibly empty tuple of template texts. Read failures never
        propagate; they yield an empty set.

    """
    try:
        return await _resolve(contents, is_pull_request=is_pull_request)
    except FetchError as exc:
        if on_failure is not None:
            on_failure(exc)
        return ()
