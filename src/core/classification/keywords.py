#!/usr/bin/env python3
"""
Keyword-based security classification.

Used whenever AI classification is unavailable or fails. Keyword and city
lists are injected so other region sets can be plugged in.
"""

import logging
from typing import Optional, Sequence, Tuple

from core.location.gazetteer import LOCATION_UNKNOWN
from core.text_sanitizer import normalize_hebrew_quotes

logger = logging.getLogger(__name__)

SECURITY_KEYWORDS: Tuple[str, ...] = (
    "אזעקה", "פיגוע", "ירי", "טיל", "רקטה", "פצועים", "הרוגים", "טרור",
    "חמאס", "חיזבאללה", "ג'יהאד", "דאעש", "חדירה", "צבע אדום", 'צה"ל',
)

CITY_NAMES: Tuple[str, ...] = (
    "תל אביב", "ירושלים", "חיפה", "באר שבע", "אשדוד", "אשקלון",
    "רמת גן", "חדרה", "נתניה", "אילת", "עזה", "לבנון", "הגליל", "הנגב",
)


def _prepare(text: Optional[str]) -> str:
    return (normalize_hebrew_quotes(text) or "").lower()


class KeywordClassifier:
    """Flags security events by keyword and picks the first mentioned city."""

    def __init__(self,
                 security_keywords: Sequence[str] = SECURITY_KEYWORDS,
                 city_names: Sequence[str] = CITY_NAMES,
                 unknown_location: str = LOCATION_UNKNOWN):
        self.security_keywords = tuple(_prepare(k) for k in security_keywords if k)
        self.city_names = tuple(city_names)
        self.unknown_location = unknown_location

    def is_security_event(self, text: str) -> bool:
        prepared = _prepare(text)
        return any(keyword in prepared for keyword in self.security_keywords)

    def find_location(self, text: str) -> str:
        """First city from the list that the text mentions, in list order."""
        prepared = _prepare(text)
        for city in self.city_names:
            if _prepare(city) in prepared:
                return city
        return self.unknown_location

    def classify_text(self, text: str) -> Tuple[bool, str]:
        """
        Classify free text.

        Returns:
            Tuple of (is_security_event, location)
        """
        is_security_event = self.is_security_event(text)
        location = self.find_location(text)
        logger.debug(f"Keyword classification: security={is_security_event}, location={location}")
        return is_security_event, location
