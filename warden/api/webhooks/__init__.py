"""GitHub webhook receiver.

Usage
-----
Import the resource for route registration::

    from warden.api.webhooks.resources import WebhookResource
"""
