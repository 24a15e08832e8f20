#!/usr/bin/env python3
"""
Alert data model.

An alert is a classified, persisted security-relevant event derived from a
feed item.
"""

import uuid
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from core.location.gazetteer import LOCATION_UNKNOWN


@dataclass
class Alert:
    """
    Represents a classified alert.

    ``location`` is either a specific place name or ``LOCATION_UNKNOWN``.
    Alerts with an unknown location are never relevant to any user.
    """
    title: str
    description: str
    location: str
    timestamp: str
    source: str
    link: str
    is_security_event: bool = False
    image_url: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        """Clean data after initialization."""
        self.title = (self.title or "").strip()
        self.description = (self.description or "").strip()
        self.location = (self.location or "").strip() or LOCATION_UNKNOWN
        self.link = (self.link or "").strip()

    @property
    def has_known_location(self) -> bool:
        return self.location != LOCATION_UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the row shape stored in the ``alerts`` table."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location': self.location,
            'timestamp': self.timestamp,
            'source': self.source,
            'link': self.link,
            'is_security_event': self.is_security_event,
            'image_url': self.image_url
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Alert':
        """Create Alert from a database row or dictionary."""
        kwargs = dict(
            title=data.get('title', ''),
            description=data.get('description', ''),
            location=data.get('location') or LOCATION_UNKNOWN,
            timestamp=data.get('timestamp', ''),
            source=data.get('source', ''),
            link=data.get('link', ''),
            is_security_event=bool(data.get('is_security_event', False)),
            image_url=data.get('image_url')
        )
        if data.get('id'):
            kwargs['id'] = str(data['id'])
        return cls(**kwargs)

    def __repr__(self):
        return f"Alert(title='{self.title[:50]}...', location='{self.location}', source='{self.source}')"
