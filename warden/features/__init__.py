"""Follow-on features that run after a clean moderation verdict."""

from __future__ import annotations

from .community import CommunityFeature, CommunityOutcome, matching_labels
from .formatting import FormatCheckOutcome, WorkflowDispatcher, trigger_format_check

__all__ = [
    "CommunityFeature",
    "CommunityOutcome",
    "FormatCheckOutcome",
    "WorkflowDispatcher",
    "matching_labels",
    "trigger_format_check",
]
