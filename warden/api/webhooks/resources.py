"""Falcon resource receiving GitHub webhook deliveries.

``POST /webhooks/github`` verifies the delivery signature (when a secret is
configured), decodes the payload into an :class:`~warden.moderation.Event`
and hands it to the :class:`~warden.dispatch.EventDispatcher`.

Responses
---------
- ``202`` with the dispatch summary for events Warden acts on.
- ``204`` for ``ping`` and for event/action pairs Warden ignores.
- ``400`` for undecodable bodies and malformed payloads.
- ``401`` for missing or mismatched signatures.

Usage
-----
Register the resource on the Falcon app::

    app.add_route("/webhooks/github", WebhookResource(dispatcher, secret=secret))

"""

from __future__ import annotations

import hashlib
import hmac
import typing as typ

import falcon
import msgspec

from warden.api.errors import InvalidPayloadError, InvalidSignatureError
from warden.github.payloads import PayloadError, event_from_payload
from warden.logging import get_logger, log_debug, log_info

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from warden.dispatch import EventDispatcher

__all__ = [
    "SIGNATURE_HEADER",
    "WebhookResource",
    "signature_for",
    "verify_signature",
]

logger = get_logger(__name__)

EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"
SIGNATURE_HEADER = "X-Hub-Signature-256"
_SIGNATURE_PREFIX = "sha256="


def signature_for(secret: str, body: bytes) -> str:
    """Return the ``X-Hub-Signature-256`` value GitHub sends for ``body``."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{_SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str, body: bytes, header: str | None) -> None:
    """Raise :class:`InvalidSignatureError` unless ``header`` signs ``body``."""
    if not header:
        raise InvalidSignatureError(f"missing {SIGNATURE_HEADER} header")
    if not header.startswith(_SIGNATURE_PREFIX):
        raise InvalidSignatureError("unsupported signature algorithm")
    if not hmac.compare_digest(signature_for(secret, body), header):
        raise InvalidSignatureError


class WebhookResource:
    """Receive GitHub deliveries and dispatch the ones Warden handles."""

    def __init__(
        self, dispatcher: EventDispatcher, *, secret: str | None = None
    ) -> None:
        """Configure the resource.

        Parameters
        ----------
        dispatcher
            Handles decoded events.
        secret
            Webhook secret shared with GitHub. Signature checks are skipped
            when it is ``None``.

        """
        self._dispatcher = dispatcher
        self._secret = secret

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /webhooks/github deliveries."""
        body = await req.stream.read()
        if self._secret is not None:
            verify_signature(self._secret, body, req.get_header(SIGNATURE_HEADER))

        event_name = req.get_header(EVENT_HEADER)
        if not event_name:
            raise InvalidPayloadError(f"missing {EVENT_HEADER} header")
        if event_name == "ping":
            resp.status = falcon.HTTP_204
            return

        payload = _decode_body(body, event_name)
        try:
            event = event_from_payload(event_name, payload)
        except PayloadError as exc:
            raise InvalidPayloadError(str(exc), event_name=event_name) from exc

        if event is None:
            log_debug(
                logger,
                "Ignoring %s delivery %s (action=%r)",
                event_name,
                req.get_header(DELIVERY_HEADER),
                payload.get("action"),
            )
            resp.status = falcon.HTTP_204
            return

        log_info(
            logger,
            "Received %s for %s#%d",
            event.kind,
            event.repository,
            event.number,
        )
        outcome = await self._dispatcher.handle(event)
        resp.media = outcome.as_dict()
        resp.status = falcon.HTTP_202


def _decode_body(body: bytes, event_name: str) -> dict[str, typ.Any]:
    try:
        payload = msgspec.json.decode(body)
    except msgspec.DecodeError as exc:
        msg = "body is not valid JSON"
        raise InvalidPayloadError(msg, event_name=event_name) from exc
    if not isinstance(payload, dict):
        msg = "body must be a JSON object"
        raise InvalidPayloadError(msg, event_name=event_name)
    return payload
