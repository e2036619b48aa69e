"""Webhook exceptions and Falcon error handlers for the API layer.

Resources raise these exceptions for deliveries that must be rejected;
the handlers registered by :func:`warden.api.app.create_app` translate
them into JSON error responses.

Usage
-----
Register error handlers on the Falcon app::

    from warden.api.errors import (
        InvalidPayloadError,
        InvalidSignatureError,
        handle_invalid_payload,
        handle_invalid_signature,
    )

    app.add_error_handler(InvalidSignatureError, handle_invalid_signature)
    app.add_error_handler(InvalidPayloadError, handle_invalid_payload)

"""

from __future__ import annotations

import typing as typ

import falcon

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = [
    "InvalidPayloadError",
    "InvalidSignatureError",
    "handle_invalid_payload",
    "handle_invalid_signature",
]


class InvalidSignatureError(Exception):
    """Raised when a delivery's ``X-Hub-Signature-256`` does not verify."""

    def __init__(self, reason: str = "signature mismatch") -> None:
        """Initialize with a short description of what failed."""
        self.reason = reason
        super().__init__(reason)


class InvalidPayloadError(Exception):
    """Raised for deliveries that cannot be decoded into an event.

    Attributes
    ----------
    reason
        Human-readable description of the decoding failure.
    event_name
        Value of the ``X-GitHub-Event`` header, when present.

    """

    def __init__(self, reason: str, *, event_name: str | None = None) -> None:
        """Initialize with a decoding reason and optional event name."""
        self.reason = reason
        self.event_name = event_name
        message = f"{event_name}: {reason}" if event_name is not None else reason
        super().__init__(message)


async def handle_invalid_signature(
    _req: Request,
    resp: Response,
    ex: InvalidSignatureError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidSignatureError`` to an HTTP 401 JSON response."""
    resp.status = falcon.HTTP_401
    resp.media = {
        "title": "Invalid signature",
        "description": ex.reason,
    }


async def handle_invalid_payload(
    _req: Request,
    resp: Response,
    ex: InvalidPayloadError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidPayloadError`` to an HTTP 400 JSON response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The decoding exception containing the reason and event name.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid payload",
        "description": ex.reason,
    }
    if ex.event_name is not None:
        media["event"] = ex.event_name
    resp.media = media
