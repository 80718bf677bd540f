from __future__ import annotations

from typing import Iterable, Sequence

from .config import UNCATEGORIZED, CategoryRule
from .fields import category_labels
from .models import CanonicalArticle, RawFeedItem
from .sanitizer import html_to_text

KEYWORD_WEIGHT = 2
TITLE_KEYWORD_WEIGHT = 3
CATEGORY_KEYWORD_WEIGHT = 4
PATTERN_WEIGHT = 5
LINK_KEYWORD_WEIGHT = 3


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    t = text.lower()
    return any(k.lower() in t for k in keywords)


def is_excluded_category(item: RawFeedItem, excluded: Sequence[str]) -> bool:
    """
    True when any RSS category of `item` overlaps the exclusion vocabulary.

    Overlap is a case-insensitive substring match in either direction. Items without
    categories are never excluded.
    """
    for label in category_labels(item.categories):
        category = label.lower().strip()
        if not category:
            continue
        for term in excluded:
            term = term.lower()
            if category == term or term in category or category in term:
                return True
    return False


def is_social_post(article: CanonicalArticle, phrases: Sequence[str]) -> bool:
    """True when the title or preview reads like a relayed social-media post."""
    return _contains_any(article.title, phrases) or _contains_any(article.description, phrases)


def _search_text(article: CanonicalArticle) -> str:
    parts = [
        article.title,
        article.description,
        html_to_text(article.full_content),
        article.link,
        " ".join(article.categories),
    ]
    return " ".join(parts).lower()


def score_rule(article: CanonicalArticle, rule: CategoryRule) -> int:
    """
    Weighted match score of `article` against one topic rule.

    Keyword anywhere +2, also in the title +3, also in an RSS category +4; every
    matching pattern +5; every link keyword found in the link +3.
    """
    text = _search_text(article)
    title = article.title.lower()
    categories = [c.lower() for c in article.categories]
    link = article.link.lower()

    score = 0
    for _, pattern in rule.compiled_keywords:
        if not pattern.search(text):
            continue
        score += KEYWORD_WEIGHT
        if pattern.search(title):
            score += TITLE_KEYWORD_WEIGHT
        if any(pattern.search(c) for c in categories):
            score += CATEGORY_KEYWORD_WEIGHT

    for pattern in rule.compiled_patterns:
        if pattern.search(text):
            score += PATTERN_WEIGHT

    for pattern in rule.compiled_link_keywords:
        if pattern.search(link):
            score += LINK_KEYWORD_WEIGHT
    return score


def classify(article: CanonicalArticle, rules: Sequence[CategoryRule]) -> str:
    """
    Best-scoring topic id, or UNCATEGORIZED when the winner misses its min_score.

    Ties go to the rule declared first.
    """
    best_rule = None
    best_score = 0
    for rule in rules:
        score = score_rule(article, rule)
        if score > best_score:
            best_rule, best_score = rule, score
    if best_rule is None or best_score < best_rule.min_score:
        return UNCATEGORIZED
    return best_rule.id
