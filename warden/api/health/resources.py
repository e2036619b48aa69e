"""Health probe resources for liveness and readiness checks.

These resources are stateless and never call GitHub. They are always
registered, including when the service starts without a GitHub token.

Usage
-----
Register health endpoints on the Falcon app::

    from warden.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(webhooks_enabled=True))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource returning ``{"status": "ready"}``.

    The response also reports whether the webhook endpoint is mounted, so
    a deployment missing its GitHub token is visible from the probe.

    """

    def __init__(self, *, webhooks_enabled: bool = False) -> None:
        """Record whether the webhook endpoint is registered."""
        self._webhooks_enabled = webhooks_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status.

        """
        resp.media = {"status": "ready", "webhooks": self._webhooks_enabled}
        resp.status = HTTPStatus.OK
