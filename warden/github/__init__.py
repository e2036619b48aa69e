"""GitHub REST client and webhook payload decoding."""

from __future__ import annotations

from .client import GitHubItemContext, GitHubRestClient, GitHubRestConfig
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .payloads import PayloadError, event_from_payload

__all__ = [
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubItemContext",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "PayloadError",
    "event_from_payload",
]
