"""Warden: spam moderation and community automation for GitHub repositories."""

from __future__ import annotations

__version__ = "0.1.0"
