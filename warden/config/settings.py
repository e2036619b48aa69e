"""Service settings for the Warden webhook runtime.

Usage
-----
Create settings explicitly:

>>> settings = WardenSettings(github_token="ghp_example")
>>> settings.github_api_url
'https://api.github.com'

Or load them from environment variables:

>>> import os
>>> os.environ["WARDEN_GITHUB_TOKEN"] = "ghp_example"
>>> WardenSettings.from_env().github_timeout_s
20.0

"""

from __future__ import annotations

import dataclasses as dc
import os

from warden.github.errors import GitHubConfigError

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITHUB_TIMEOUT_S = 20.0


@dc.dataclass(frozen=True, slots=True)
class WardenSettings:
    """Process-wide settings shared by every webhook delivery.

    Attributes
    ----------
    github_token
        Token used for all GitHub REST calls.
    webhook_secret
        Shared secret for ``X-Hub-Signature-256`` verification. When
        ``None``, signatures are not checked.
    github_api_url
        Base URL of the GitHub REST API.
    github_timeout_s
        Per-request timeout for GitHub calls, in seconds.

    """

    github_token: str
    webhook_secret: str | None = None
    github_api_url: str = DEFAULT_GITHUB_API_URL
    github_timeout_s: float = DEFAULT_GITHUB_TIMEOUT_S

    @staticmethod
    def _parse_timeout(env_var: str, default: float) -> float:
        """Read a positive float env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ValueError(msg) from exc
        if value <= 0:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls) -> WardenSettings:
        """Create settings from environment variables.

        Reads ``WARDEN_GITHUB_TOKEN`` (required), ``WARDEN_WEBHOOK_SECRET``,
        ``WARDEN_GITHUB_API_URL`` and ``WARDEN_GITHUB_TIMEOUT_S``.

        Raises
        ------
        GitHubConfigError
            If no GitHub token is configured.
        ValueError
            If the timeout is not a positive number.

        """
        token = os.environ.get("WARDEN_GITHUB_TOKEN", "").strip()
        if not token:
            raise GitHubConfigError.missing_token()

        secret = os.environ.get("WARDEN_WEBHOOK_SECRET", "").strip() or None
        api_url = (
            os.environ.get("WARDEN_GITHUB_API_URL", "").strip()
            or DEFAULT_GITHUB_API_URL
        )
        return cls(
            github_token=token,
            webhook_secret=secret,
            github_api_url=api_url.rstrip("/"),
            github_timeout_s=cls._parse_timeout(
                "WARDEN_GITHUB_TIMEOUT_S", DEFAULT_GITHUB_TIMEOUT_S
            ),
        )
