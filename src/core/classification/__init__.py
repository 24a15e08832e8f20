"""Security-event classification for feed items."""

from .keywords import KeywordClassifier, SECURITY_KEYWORDS, CITY_NAMES
from .sources import extract_source_from_link
from .classifier import AlertClassifier

__all__ = [
    'KeywordClassifier',
    'SECURITY_KEYWORDS',
    'CITY_NAMES',
    'extract_source_from_link',
    'AlertClassifier',
]
