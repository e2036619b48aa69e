"""Warden HTTP API layer.

This package provides the Falcon ASGI application that receives GitHub
webhook deliveries and exposes liveness and readiness probes.

Usage
-----
Create and run the application::

    from warden.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full mode with the webhook endpoint

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with health
    endpoints and, when a dispatcher is provided, the webhook endpoint.
"""

from warden.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
