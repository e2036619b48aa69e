"""Edit-distance similarity between submitted content and templates.

Similarity is ``1 - distance / longest`` expressed as a whole percentage.
Only leading and trailing whitespace is ignored; case, punctuation and
interior whitespace all count as edits. Strings are compared by Unicode
code point.

The distance itself comes from the native Levenshtein implementation in
:mod:`rapidfuzz`.

Examples
--------
>>> similarity_pct("kitten", "sitting")
57
>>> similarity_pct("  same  ", "same")
100

"""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(left: str, right: str) -> int:
    """Return the Levenshtein edit distance between two strings."""
    return Levenshtein.distance(left, right)


def _rounded_pct(numerator: int, denominator: int) -> int:
    # round(numerator * 100 / denominator), half-up.
    return (numerator * 200 + denominator) // (2 * denominator)


def similarity_pct(first: str, second: str) -> int:
    """Return how similar two strings are as an integer in ``[0, 100]``.

    Identical strings (after trimming, including two empty strings) score
    100. A blank string against a non-blank one scores 0. The percentage is
    rounded half-up using integer arithmetic so results do not depend on
    float rounding.
    """
    left = first.strip()
    right = second.strip()
    if left == right:
        return 100
    if not left or not right:
        return 0

    longest = max(len(left), len(right))
    return _rounded_pct(longest - levenshtein_distance(left, right), longest)


def similarity_upper_bound(first: str, second: str) -> int:
    """Return the highest score :func:`similarity_pct` could give the pair.

    The edit distance is at least the difference in trimmed lengths, so the
    score never exceeds ``shortest / longest`` as a rounded percentage. The
    bound costs two ``strip`` calls and no distance computation.

    >>> similarity_upper_bound("ab", "abcd")
    50
    """
    left = len(first.strip())
    right = len(second.strip())
    longest = max(left, right)
    if longest == 0:
        return 100
    return _rounded_pct(min(left, right), longest)
