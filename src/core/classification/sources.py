#!/usr/bin/env python3
"""
Source display names for alert links.
"""

from urllib.parse import urlparse

from core.location.gazetteer import LOCATION_UNKNOWN

# Hostname fragment -> display name
KNOWN_SOURCES = (
    ("ynet", "ynet"),
    ("walla", "וואלה"),
    ("maariv", "מעריב"),
    ("israelhayom", "ישראל היום"),
    ("haaretz", "הארץ"),
)


def extract_source_from_link(link: str) -> str:
    """
    Derive a source name from an article link.

    Known Israeli outlets map to their display names; otherwise the second
    hostname label is used (www.example.co.il -> example), falling back to
    the whole hostname. Unparsable links give the unknown marker.
    """
    try:
        hostname = urlparse(link or "").hostname
    except ValueError:
        return LOCATION_UNKNOWN

    if not hostname:
        return LOCATION_UNKNOWN

    for fragment, name in KNOWN_SOURCES:
        if fragment in hostname:
            return name

    labels = hostname.split('.')
    if len(labels) > 1 and labels[1]:
        return labels[1]
    return hostname
