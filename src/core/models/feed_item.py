#!/usr/bin/env python3
"""
Feed item data model.

Represents a raw syndicated-feed entry before classification.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any

# Placeholder used by feed ingestion when an entry carries no description
NO_DESCRIPTION_PLACEHOLDER = "אין פרטים נוספים"


@dataclass(frozen=True)
class FeedItem:
    """
    A single RSS item as produced by feed ingestion.

    Immutable once created. ``link`` is the practical identity of the item;
    ``pub_date`` is already normalized to ISO-8601 by the ingestion layer.
    """
    title: str
    link: str
    description: str = NO_DESCRIPTION_PLACEHOLDER
    pub_date: str = ""
    guid: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging and JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeedItem':
        """Create FeedItem from dictionary (accepts the ``pubDate`` spelling too)."""
        return cls(
            title=data.get('title', '') or '',
            link=data.get('link', '') or '',
            description=data.get('description') or NO_DESCRIPTION_PLACEHOLDER,
            pub_date=data.get('pub_date') or data.get('pubDate') or '',
            guid=data.get('guid', '') or ''
        )

    def __repr__(self):
        return f"FeedItem(title='{self.title[:50]}...', link='{self.link}')"
