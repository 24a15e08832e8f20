#!/usr/bin/env python3
"""
Location relevance matching.

Decides whether an alert's location is relevant to a user's stored location.
Rules are evaluated in priority order and the first match wins:

1. exact match after normalization
2. national scope term mentioned in the alert location
3. adjacency table (user lives in a metro anchor, alert names a nearby place)
4. alert location contains the user location, only for user locations
   longer than the minimum length

Containment is one-directional: a user location that contains the alert
location does not match.
"""

import logging
from typing import Dict, Optional, Tuple

from .gazetteer import Gazetteer, ISRAEL_GAZETTEER
from .normalizer import normalize_location

logger = logging.getLogger(__name__)


class LocationMatcher:
    """Relevance matcher over an injected gazetteer."""

    def __init__(self, gazetteer: Gazetteer = ISRAEL_GAZETTEER):
        """
        Initialize matcher.

        Args:
            gazetteer: Region tables (national scope, adjacency, aliases)
        """
        self.gazetteer = gazetteer
        aliases = gazetteer.metro_aliases

        self._unknown_location = normalize_location(gazetteer.unknown_location, aliases)
        # Tables are normalized once so checks never re-normalize constants
        self._national_scope: Tuple[str, ...] = tuple(
            term for term in (normalize_location(t, aliases) for t in gazetteer.national_scope) if term
        )
        self._adjacency: Dict[str, Tuple[str, ...]] = {
            normalize_location(area, aliases): tuple(
                place for place in (normalize_location(p, aliases) for p in nearby) if place
            )
            for area, nearby in gazetteer.adjacency.items()
        }

    def normalize(self, raw: Optional[str]) -> str:
        """Normalize using this matcher's alias table."""
        return normalize_location(raw, self.gazetteer.metro_aliases)

    def is_relevant(self, alert_location: Optional[str], user_location: Optional[str]) -> bool:
        """
        Check whether an alert location is relevant to a user location.

        Args:
            alert_location: Alert.location (may be the unknown sentinel)
            user_location: User's raw stored location

        Returns:
            True if the user should be notified about the alert
        """
        if not alert_location or not user_location:
            return False

        normalized_alert = self.normalize(alert_location)
        normalized_user = self.normalize(user_location)
        if not normalized_alert or not normalized_user:
            return False
        if normalized_alert == self._unknown_location:
            return False

        logger.debug(f"Checking relevance: alert '{normalized_alert}' vs user '{normalized_user}'")

        if normalized_alert == normalized_user:
            logger.debug("Direct match found")
            return True

        if any(term in normalized_alert for term in self._national_scope):
            logger.debug("National location match")
            return True

        nearby = self._adjacency.get(normalized_user)
        if nearby and any(place in normalized_alert for place in nearby):
            logger.debug(f"Nearby location match: {normalized_user} includes {normalized_alert}")
            return True

        if (len(normalized_user) > self.gazetteer.min_substring_length
                and normalized_user in normalized_alert):
            logger.debug("Substring match found")
            return True

        logger.debug("No location match found")
        return False

    def nearby_places(self, user_location: Optional[str]) -> Tuple[str, ...]:
        """Get normalized nearby places for a user location (empty if not an anchor)."""
        return self._adjacency.get(self.normalize(user_location), ())


_default_matcher: Optional[LocationMatcher] = None


def get_default_matcher() -> LocationMatcher:
    """Get matcher over the built-in Israeli gazetteer."""
    global _default_matcher
    if _default_matcher is None:
        _default_matcher = LocationMatcher()
    return _default_matcher


def is_location_relevant(alert_location: Optional[str], user_location: Optional[str]) -> bool:
    """Check relevance using the default gazetteer."""
    return get_default_matcher().is_relevant(alert_location, user_location)
