"""Application factory for the Warden Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when an event dispatcher is
available, the GitHub webhook endpoint.

Usage
-----
Create a health-only app (no GitHub token)::

    app = create_app()

Create a full app with the webhook endpoint::

    from warden.api.app import AppDependencies, create_app

    deps = AppDependencies(dispatcher=dispatcher, webhook_secret=secret)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from warden.api.errors import (
    InvalidPayloadError,
    InvalidSignatureError,
    handle_invalid_payload,
    handle_invalid_signature,
)
from warden.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from warden.dispatch import EventDispatcher

__all__ = ["WEBHOOK_ROUTE", "AppDependencies", "create_app"]

WEBHOOK_ROUTE = "/webhooks/github"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    dispatcher
        Handles decoded webhook events. The webhook endpoint is only
        registered when it is provided.
    webhook_secret
        Secret used to verify ``X-Hub-Signature-256``; ``None`` disables
        verification.

    """

    dispatcher: EventDispatcher | None = None
    webhook_secret: str | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or missing a
        dispatcher, only ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    dispatcher = dependencies.dispatcher if dependencies is not None else None

    app = falcon.asgi.App()  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(webhooks_enabled=dispatcher is not None))

    if dispatcher is not None and dependencies is not None:
        from warden.api.webhooks.resources import WebhookResource

        app.add_route(
            WEBHOOK_ROUTE,
            WebhookResource(dispatcher, secret=dependencies.webhook_secret),
        )

    app.add_error_handler(InvalidSignatureError, handle_invalid_signature)
    app.add_error_handler(InvalidPayloadError, handle_invalid_payload)

    return app
