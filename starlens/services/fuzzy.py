"""Subsequence matching used to narrow the topic picker."""

from __future__ import annotations


def fuzzy_matches(query: str, target: str) -> bool:
    """True when every character of `query` appears in `target` in order, ignoring case.

    A blank query matches everything. This is looser than
    substring containment: "rst" matches "rust", "ab" does not match "ba".
    """
    if not query.strip():
        return True

    position = 0
    needed = len(query)
    for char in target:
        if char.lower() == query[position].lower():
            position += 1
            if position == needed:
                return True
    return False
