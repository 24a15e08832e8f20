#!/usr/bin/env python3
"""
Text sanitization utilities for Hebrew content processing.

Normalizes Hebrew punctuation for keyword matching and cleans wrappers
and markup out of LLM responses and feed descriptions.
"""

import html
import re
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Hebrew and typographic quotation marks mapped to ASCII
HEBREW_QUOTES_MAP = {
    "״": '"',  # Gershayim
    "׳": "'",  # Geresh
    "“": '"',  # Left double quotation mark
    "”": '"',  # Right double quotation mark
    "‘": "'",  # Left single quotation mark
    "’": "'",  # Right single quotation mark
}

HEBREW_QUOTES_TRANSLATION = str.maketrans(HEBREW_QUOTES_MAP)

_HTML_TAG_PATTERN = re.compile(r'</?[^>]+(>|$)')
_CODE_FENCE_PATTERN = re.compile(r'^```(?:json)?\s*|\s*```$', re.IGNORECASE)


def normalize_hebrew_quotes(text: Optional[str]) -> Optional[str]:
    """
    Normalize Hebrew quotation marks to ASCII equivalents.

    Keeps abbreviations such as צה״ל comparable with their ASCII spelling
    (צה"ל).

    Args:
        text: Input text that may contain Hebrew quotes

    Returns:
        Text with normalized ASCII quotes
    """
    if not text:
        return text

    return text.translate(HEBREW_QUOTES_TRANSLATION)


def strip_html(text: Optional[str]) -> str:
    """Remove HTML tags and unescape entities from feed text."""
    if not text:
        return ""

    return html.unescape(_HTML_TAG_PATTERN.sub('', text)).strip()


def preprocess_llm_response(raw_response: Optional[str]) -> Optional[str]:
    """
    Preprocess LLM response before JSON parsing.

    Strips Markdown code fences. Hebrew quote marks are left alone: inside a
    JSON string a gershayim is valid, while its ASCII replacement would
    terminate the string.

    Args:
        raw_response: Raw response from LLM

    Returns:
        Preprocessed response ready for JSON parsing
    """
    if not raw_response:
        return raw_response

    processed = _CODE_FENCE_PATTERN.sub('', raw_response.strip())

    if processed != raw_response:
        logger.info("Normalized LLM response before parsing")
        logger.debug(
            "Original length: %d, processed length: %d",
            len(raw_response),
            len(processed),
        )

    return processed
