"""Warden runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`warden.api.app.create_app` for application
construction while keeping the ``warden.runtime:create_app`` entrypoint
stable.

When ``WARDEN_GITHUB_TOKEN`` is set, the runtime builds a GitHub REST
client and an :class:`~warden.dispatch.EventDispatcher` so the app
includes the webhook endpoint. Otherwise it starts in health-only mode.

Configuration is driven by environment variables:

- ``WARDEN_HOST``: Bind address (default ``0.0.0.0``)
- ``WARDEN_PORT``: Listen port (default ``8080``)
- ``WARDEN_LOG_LEVEL``: Log level (default ``INFO``)
- ``WARDEN_GITHUB_TOKEN``: GitHub token (optional; enables the webhook
  endpoint when set)
- ``WARDEN_WEBHOOK_SECRET``: Webhook secret (optional; enables signature
  verification when set)
- ``WARDEN_GITHUB_API_URL`` and ``WARDEN_GITHUB_TIMEOUT_S``: GitHub client
  overrides

Run the service directly with ``python -m warden.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from warden.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

    from warden.config.settings import WardenSettings
    from warden.dispatch import EventDispatcher

__all__ = ["build_dispatcher", "create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid WARDEN_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def build_dispatcher(settings: WardenSettings) -> EventDispatcher:
    """Wire a GitHub REST client into an :class:`EventDispatcher`."""
    from warden.dispatch import EventDispatcher
    from warden.github.client import GitHubRestClient, GitHubRestConfig

    client = GitHubRestClient(
        GitHubRestConfig(
            token=settings.github_token,
            api_url=settings.github_api_url,
            timeout_s=settings.github_timeout_s,
        )
    )
    return EventDispatcher(
        lambda event: client.for_item(
            event.repository, event.number, is_pull_request=event.is_pull_request
        )
    )


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    When ``WARDEN_GITHUB_TOKEN`` is set, the app includes the
    ``POST /webhooks/github`` endpoint. Otherwise only ``/health`` and
    ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    from warden.api.app import AppDependencies
    from warden.api.app import create_app as _create_api_app
    from warden.config.settings import WardenSettings
    from warden.github.errors import GitHubConfigError

    try:
        settings = WardenSettings.from_env()
    except GitHubConfigError as exc:
        log_warning(logger, "Starting in health-only mode: %s", exc)
        return _create_api_app()

    if settings.webhook_secret is None:
        log_warning(
            logger, "WARDEN_WEBHOOK_SECRET is not set; signatures are not verified"
        )

    deps = AppDependencies(
        dispatcher=build_dispatcher(settings),
        webhook_secret=settings.webhook_secret,
    )
    return _create_api_app(deps)


def main() -> None:
    """Start the Warden runtime server using Granian.

    Reads ``WARDEN_HOST``, ``WARDEN_PORT``, and ``WARDEN_LOG_LEVEL`` from
    the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("WARDEN_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port_str = os.environ.get("WARDEN_PORT", "8080")
    port = _parse_port(port_str)
    log_level_str = os.environ.get("WARDEN_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid WARDEN_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting Warden runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "warden.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
