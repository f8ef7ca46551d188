"""Fuzzy matching for typo-tolerant keyword checks.

This module provides edit distance calculation and fuzzy containment used by
the ranking engine to rescue near-miss keyword hits.

Tolerance policy:
- Max edit distance of 1 for keywords up to 6 characters
- Max edit distance of 2 for longer keywords
- Exact substring matches always win
"""

from __future__ import annotations


SHORT_KEYWORD_MAX_LENGTH = 6


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Uses dynamic programming for O(m*n) time complexity, with optional
    early termination when distance exceeds max_distance.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 early when
            distance is guaranteed to exceed this threshold.

    Returns:
        The minimum number of single-character edits (insertions,
        deletions, substitutions) needed to change s1 into s2.
        If max_distance is set and exceeded, returns max_distance+1.

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("samsung", "samsnug")
        2
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        distance = len(s2)
    elif not s2:
        distance = len(s1)
    else:
        distance = _banded_distance(s1, s2, max_distance)

    if max_distance is not None and distance > max_distance:
        return max_distance + 1
    return distance


def _banded_distance(s1: str, s2: str, max_distance: int | None) -> int:
    # Use shorter string as columns for space efficiency
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    if max_distance is not None and n - m > max_distance:
        return max_distance + 1

    # Only need two rows at a time
    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = curr_row[0]
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            row_min = min(row_min, curr_row[i])

        # Row minimum never decreases, so the final distance is at least row_min
        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def get_max_edit_distance(term_length: int) -> int:
    """Get the maximum allowed edit distance for a keyword based on its length.

    Short keywords tolerate a single typo; longer ones tolerate two.
    """
    if term_length <= SHORT_KEYWORD_MAX_LENGTH:
        return 1
    return 2


def fuzzy_contains(text: str, keyword: str, max_edits: int | None = None) -> bool:
    """Return True if ``keyword`` occurs in ``text`` exactly or within ``max_edits``.

    An exact substring match is checked first. Otherwise every
    whitespace-delimited word of ``text`` whose length is within ``max_edits``
    of the keyword's length is compared by edit distance.

    Args:
        text: Text to search, typically already normalized.
        keyword: Keyword to look for.
        max_edits: Allowed edit distance. If None, uses the length policy
            from get_max_edit_distance().
    """
    if keyword in text:
        return True

    if max_edits is None:
        max_edits = get_max_edit_distance(len(keyword))

    keyword_length = len(keyword)
    for word in text.split():
        if abs(len(word) - keyword_length) > max_edits:
            continue
        if levenshtein_distance(word, keyword, max_edits) <= max_edits:
            return True
    return False
