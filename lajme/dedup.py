from __future__ import annotations

import re
from typing import Iterable, List, Set

from .fields import normalize_field
from .models import RawFeedItem

TITLE_KEY_LENGTH = 100
OVERLAP_THRESHOLD = 0.6
MIN_SIMILAR_TITLE_LENGTH = 20
MIN_SIGNIFICANT_WORD_LENGTH = 4

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Lowercase, drop punctuation, collapse whitespace, cap at TITLE_KEY_LENGTH chars."""
    text = _PUNCTUATION_RE.sub("", title.lower())
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text[:TITLE_KEY_LENGTH]


def _significant_words(normalized: str) -> Set[str]:
    return {w for w in normalized.split() if len(w) >= MIN_SIGNIFICANT_WORD_LENGTH}


def word_overlap(a: str, b: str) -> float:
    """Shared significant words over the larger of the two word sets."""
    wa = _significant_words(a)
    wb = _significant_words(b)
    larger = max(len(wa), len(wb))
    if not larger:
        return 0.0
    return len(wa & wb) / larger


def is_similar_title(a: str, b: str) -> bool:
    """Compare two already-normalized titles."""
    if a == b:
        return True
    if min(len(a), len(b)) < MIN_SIMILAR_TITLE_LENGTH:
        return False
    return word_overlap(a, b) > OVERLAP_THRESHOLD


def deduplicate(items: Iterable[RawFeedItem]) -> List[RawFeedItem]:
    """
    Remove duplicates by priority: exact link -> normalized title -> title word overlap.
    Keeps the first occurrence and preserves original order, so earlier feeds win.
    Items with an empty link or title skip that particular check.
    """
    seen_links: Set[str] = set()
    seen_titles: List[str] = []
    out: List[RawFeedItem] = []

    for it in items:
        link = normalize_field(it.link).strip()
        if link and link in seen_links:
            continue

        key = normalize_title(normalize_field(it.title))
        if key and any(is_similar_title(key, prev) for prev in seen_titles):
            continue

        if link:
            seen_links.add(link)
        if key:
            seen_titles.append(key)
        out.append(it)
    return out
