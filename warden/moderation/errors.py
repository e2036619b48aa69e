"""Errors raised by moderation capabilities and the remediation stage."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class ModerationError(Exception):
    """Base exception for all moderation errors.

    This provides a single catch point for callers hosting the pipeline.
    """


class FetchError(ModerationError):
    """Raised when repository content or user data cannot be read.

    Attributes
    ----------
    target
        Path, login or other identifier that was being read.

    """

    def __init__(self, message: str, *, target: str | None = None) -> None:
        """Initialise with a message and the identifier being read."""
        self.target = target
        super().__init__(message)

    @classmethod
    def for_target(cls, target: str, detail: object) -> FetchError:
        """Return an error describing a failed read of ``target``."""
        return cls(f"failed to read {target}: {detail}", target=target)


class ContentNotFoundError(FetchError):
    """Raised when the requested path or user does not exist."""

    @classmethod
    def missing(cls, target: str) -> ContentNotFoundError:
        """Return an error for a target that resolved to nothing."""
        return cls(f"{target} not found", target=target)


class MutationError(ModerationError):
    """Raised when a label, close or comment action fails."""

    def __init__(self, message: str, *, action: str) -> None:
        """Initialise with a message and the action that failed."""
        self.action = action
        super().__init__(message)

    @classmethod
    def failed(cls, action: str, detail: object) -> MutationError:
        """Return an error for a failed mutation ``action``."""
        return cls(f"{action} failed: {detail}", action=action)


class RemediationError(ModerationError):
    """Raised when a required remediation action (close, comment) fails.

    The originating :class:`MutationError` is chained as ``__cause__``.
    """

    def __init__(self, action: str, reason: str) -> None:
        """Initialise with the failed action and the spam reason being applied."""
        self.action = action
        self.reason = reason
        super().__init__(f"remediation action {action!r} failed for: {reason}")


class ConfigurationError(ValueError):
    """Raised when moderation configuration values are malformed."""

    def __init__(self, issues: cabc.Sequence[str]) -> None:
        """Capture validation issues whilst preserving the aggregated message."""
        self.issues = list(issues)
        super().__init__("\n".join(self.issues))
