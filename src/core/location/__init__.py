#!/usr/bin/env python3
"""
Location normalization and relevance matching for notification fan-out.
"""

from .gazetteer import (
    LOCATION_UNKNOWN,
    Gazetteer,
    MetroAlias,
    ISRAEL_GAZETTEER,
)
from .normalizer import normalize_location
from .relevance import LocationMatcher, get_default_matcher, is_location_relevant

__all__ = [
    'LOCATION_UNKNOWN',
    'Gazetteer',
    'MetroAlias',
    'ISRAEL_GAZETTEER',
    'normalize_location',
    'LocationMatcher',
    'get_default_matcher',
    'is_location_relevant',
]
