#!/usr/bin/env python3
"""
Classification result model.

Tags which path produced an alert so callers can report on fallbacks while
the relevance matcher stays agnostic of it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .alert import Alert
from .feed_item import FeedItem


class ClassificationMethod(Enum):
    """How a feed item was classified."""
    AI = "ai"
    KEYWORD = "keyword"
    FAILED = "failed"


@dataclass
class ClassificationResult:
    """Outcome of classifying a single feed item."""
    item: FeedItem
    method: ClassificationMethod
    alert: Optional[Alert] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.method is not ClassificationMethod.FAILED and self.alert is not None

    @property
    def is_security_event(self) -> bool:
        return self.succeeded and self.alert.is_security_event

    @classmethod
    def from_ai(cls, item: FeedItem, alert: Alert) -> 'ClassificationResult':
        return cls(item=item, method=ClassificationMethod.AI, alert=alert)

    @classmethod
    def from_keywords(cls, item: FeedItem, alert: Alert, error: Optional[str] = None) -> 'ClassificationResult':
        return cls(item=item, method=ClassificationMethod.KEYWORD, alert=alert, error=error)

    @classmethod
    def failed(cls, item: FeedItem, error: str) -> 'ClassificationResult':
        return cls(item=item, method=ClassificationMethod.FAILED, error=error)
