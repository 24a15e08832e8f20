#!/usr/bin/env python3
"""
RSS source model (a row of the ``rss_sources`` table).
"""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass(frozen=True)
class FeedSource:
    """A configured RSS feed."""
    name: str
    url: str
    is_default: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeedSource':
        url = data.get('url', '') or ''
        return cls(
            name=data.get('name') or url,
            url=url,
            is_default=bool(data.get('is_default', True))
        )
