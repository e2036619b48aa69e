"""GitHub transport errors."""

from __future__ import annotations

_HTTP_NOT_FOUND = 404


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        """Return True for HTTP 404 responses."""
        return self.status_code == _HTTP_NOT_FOUND

    @classmethod
    def http_error(cls, method: str, path: str, status_code: int) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(
            f"GitHub {method} {path} HTTP {status_code}", status_code=status_code
        )

    @classmethod
    def transport_error(cls, method: str, path: str, exc: Exception) -> GitHubAPIError:
        """Return an error for requests that never produced a response."""
        return cls(f"GitHub {method} {path} failed: {exc}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub responses are missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"GitHub response missing expected field: {field}")

    @classmethod
    def unexpected(cls, path: str, expected: str) -> GitHubResponseShapeError:
        """Return an error when a contents response has the wrong kind."""
        return cls(f"GitHub contents response for {path} is not a {expected}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def missing_token(cls) -> GitHubConfigError:
        """Return an error when no GitHub token is configured."""
        return cls("WARDEN_GITHUB_TOKEN is required for GitHub API")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")
