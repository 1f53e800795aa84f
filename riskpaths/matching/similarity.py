from __future__ import annotations
from typing import List


def normalize(s: str) -> str:
    return s.lower()


def _words(s: str) -> List[str]:
    return s.split()


def keyword_overlap(target: str, search: str) -> int:
    """Count words of ``target`` that contain, or are contained in, some word of ``search``.

    Both inputs are expected to be normalized already.
    """
    search_words = _words(search)
    return sum(
        1
        for word in _words(target)
        if any(word in sw or sw in word for sw in search_words)
    )


def is_similar(target: str, search: str) -> bool:
    """Tiered similarity between a taxonomy field and an entry field.

    The tiers are one OR condition, not a priority cascade:
    - exact: equal after lower-casing
    - substring: either contains the other
    - keyword overlap: >= min(2, fewest words on either side)
    """
    t = normalize(target)
    s = normalize(search)

    if t == s:
        return True
    if s in t or t in s:
        return True

    threshold = min(2, len(_words(t)), len(_words(s)))
    return keyword_overlap(t, s) >= threshold
