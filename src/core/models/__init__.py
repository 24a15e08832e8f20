#!/usr/bin/env python3
"""
Core data models for alert processing.

Contains all data structures used throughout the application.
"""

from .feed_item import FeedItem, NO_DESCRIPTION_PLACEHOLDER
from .feed_source import FeedSource
from .alert import Alert, LOCATION_UNKNOWN
from .user import UserLocationProfile
from .classification import ClassificationMethod, ClassificationResult
from .metrics import DispatchReport, ProcessingReport

__all__ = [
    'FeedItem', 'NO_DESCRIPTION_PLACEHOLDER', 'FeedSource', 'Alert', 'LOCATION_UNKNOWN',
    'UserLocationProfile', 'ClassificationMethod', 'ClassificationResult',
    'DispatchReport', 'ProcessingReport'
]
