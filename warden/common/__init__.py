"""Shared helpers used across Warden packages."""
