#!/usr/bin/env python3
"""
Location normalization.

Canonicalizes free-text location strings into a comparable form. Pure and
total: never raises, returns "" for empty input.
"""

import re
from typing import Optional, Sequence

from .gazetteer import MetroAlias, TEL_AVIV

# Hyphen, non-breaking hyphen, figure/en/em dashes, horizontal bar, minus,
# horizontal line extension, small em dash, fullwidth hyphen-minus, maqaf
DASH_PATTERN = re.compile(r'[\u2010-\u2015\u2212\u23AF\uFE58\uFF0D\u05BE\-]')
WHITESPACE_PATTERN = re.compile(r'\s+')

DEFAULT_ALIASES: Sequence[MetroAlias] = (TEL_AVIV,)


def normalize_location(raw: Optional[str], aliases: Sequence[MetroAlias] = DEFAULT_ALIASES) -> str:
    """
    Normalize a location string for comparison.

    Lowercases, maps every dash variant to ASCII '-', collapses whitespace and
    folds the known metro aliases into their canonical compound name. When a
    variant appears anywhere in the string the whole result is replaced.

    Args:
        raw: Free-text location (may be None)
        aliases: Metro alias folding table

    Returns:
        Normalized location, "" for empty input
    """
    if not raw or not isinstance(raw, str):
        return ""

    normalized = raw.strip().lower()
    normalized = DASH_PATTERN.sub('-', normalized)
    normalized = WHITESPACE_PATTERN.sub(' ', normalized).strip()

    for alias in aliases:
        if any(variant in normalized for variant in alias.variants):
            return alias.canonical

    return normalized
