#!/usr/bin/env python3
"""
Static location tables used for notification fan-out.

The tables are immutable configuration data injected into the matcher and
the keyword classifier, so alternate region sets can be swapped in.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

# Sentinel meaning no location could be determined ("unknown")
LOCATION_UNKNOWN = "לא ידוע"


@dataclass(frozen=True)
class MetroAlias:
    """Interchangeable renderings of one metropolitan area's name."""
    canonical: str
    variants: Tuple[str, ...]


@dataclass(frozen=True)
class Gazetteer:
    """
    Region tables for location relevance.

    Attributes:
        national_scope: Terms relevant to every user when the alert location mentions them
        adjacency: Metro anchor -> nearby places relevant to users living in the anchor
        metro_aliases: Alias folding applied by the normalizer
        unknown_location: Sentinel value for undetermined locations
        min_substring_length: User locations must be longer than this for substring matches
    """
    national_scope: Tuple[str, ...]
    adjacency: Mapping[str, Tuple[str, ...]]
    metro_aliases: Tuple[MetroAlias, ...] = ()
    unknown_location: str = LOCATION_UNKNOWN
    min_substring_length: int = 3


TEL_AVIV = MetroAlias(
    canonical="תל אביב-יפו",
    variants=("תל אביב", 'ת"א', "ת״א", "תל-אביב"),
)

NATIONAL_SCOPE: Tuple[str, ...] = (
    "ישראל",
    "כל הארץ",
    "המרכז",
    "הדרום",
    "הצפון",
    "גוש דן",
)

ADJACENCY: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "תל אביב-יפו": ("רמת גן", "גבעתיים", "בני ברק", "חולון", "בת ים"),
    "ירושלים": ("מעלה אדומים", "גבעת זאב"),
    "חיפה": ("קריות", "טירת הכרמל"),
    "באר שבע": ("אופקים", "נתיבות"),
})

ISRAEL_GAZETTEER = Gazetteer(
    national_scope=NATIONAL_SCOPE,
    adjacency=ADJACENCY,
    metro_aliases=(TEL_AVIV,),
)
