from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import UNCATEGORIZED, UNKNOWN_SOURCE


@dataclass(frozen=True)
class RawFeedItem:
    """
    One entry of one source feed, as parsed.

    Fields keep whatever shape the feed delivered them in: a plain string, a node
    (mapping with text and attributes), a list of nodes, or None. Use the helpers in
    `lajme.fields` to read them.
    """
    title: Any = None
    link: Any = None
    description: Any = None
    content: Any = None
    content_snippet: Any = None
    pub_date: Any = None
    creator: Any = None
    categories: Any = None
    media_content: Any = None
    enclosures: Any = None
    thumbnail: Any = None
    content_encoded: Any = None
    guid: Any = None
    source: str = UNKNOWN_SOURCE


@dataclass(frozen=True)
class CanonicalArticle:
    """
    Stable public model representing one aggregated article.

    WARNING: Do not change fields lightly. `to_dict()` is the client's contract.
    """
    title: str
    link: str
    description: str
    full_content: str
    pub_date: str
    creator: str
    categories: Tuple[str, ...]
    image_url: Optional[str]
    guid: str
    source: str
    topic: str = UNCATEGORIZED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "fullContent": self.full_content,
            "pubDate": self.pub_date,
            "creator": self.creator,
            "categories": list(self.categories),
            "imageUrl": self.image_url,
            "guid": self.guid,
            "source": self.source,
            "detectedCategory": self.topic,
        }


@dataclass(frozen=True)
class NewsFeed:
    title: str
    link: str
    description: str
    items: List[CanonicalArticle] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "items": [a.to_dict() for a in self.items],
        }
