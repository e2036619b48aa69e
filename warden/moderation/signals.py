"""Pure signal extractors used by the moderation stages."""

from __future__ import annotations

import datetime as dt
import math
import re
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_SECONDS_PER_DAY = 86_400
_LINK_PATTERN = re.compile(r"https?://\S+")


def account_age_days(created_at: dt.datetime, *, now: dt.datetime) -> int:
    """Return the whole number of days between ``created_at`` and ``now``.

    The difference is taken as an absolute value and rounded up, so a
    creation time in the future (clock skew between GitHub and this host)
    still yields a non-negative age instead of failing the event.

    Raises
    ------
    ValueError
        If either timestamp is naive.

    """
    if created_at.tzinfo is None or now.tzinfo is None:
        msg = "account_age_days requires timezone-aware datetimes"
        raise ValueError(msg)
    elapsed = abs((now - created_at).total_seconds())
    return math.ceil(elapsed / _SECONDS_PER_DAY)


def contains_any_keyword(text: str, keywords: cabc.Iterable[str]) -> bool:
    """Return True when any keyword occurs in ``text``, ignoring case.

    Keywords are literal substrings; ``"spam"`` matches ``"spammer"``.
    """
    lowered = text.lower()
    return any(keyword.lower() in lowered for keyword in keywords if keyword)


def count_links(text: str) -> int:
    """Count ``http://``/``https://`` links, including trailing punctuation."""
    return len(_LINK_PATTERN.findall(text))
