#!/usr/bin/env python3
"""
Title and content similarity.

Word-overlap (Jaccard) similarity used to spot re-reports of the same event.
Text is normalized once into a ``PreparedText`` so batch comparisons never
re-normalize inside their inner loops.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

# Tokens must be longer than these lengths to count
TITLE_MIN_TOKEN_LENGTH = 1
CONTENT_MIN_TOKEN_LENGTH = 2

# Anything that is not a word character, whitespace or a Hebrew letter
_STRIP_PATTERN = re.compile(r'[^\w\s\u05D0-\u05EA]')
_WHITESPACE_PATTERN = re.compile(r'\s+')


def normalize_text(text: Optional[str]) -> str:
    """
    Normalize text for comparison.

    Lowercases, trims, drops punctuation (keeping word characters and Hebrew
    letters) and collapses whitespace.
    """
    if not text:
        return ""

    text = text.lower().strip()
    text = _STRIP_PATTERN.sub('', text)
    return _WHITESPACE_PATTERN.sub(' ', text).strip()


def tokenize(normalized: str, min_token_length: int) -> FrozenSet[str]:
    """Split normalized text into distinct words longer than ``min_token_length``."""
    return frozenset(word for word in normalized.split() if len(word) > min_token_length)


def jaccard(tokens1: Iterable[str], tokens2: Iterable[str]) -> float:
    """Jaccard index of two token collections (0.0 when either is empty)."""
    set1, set2 = set(tokens1), set(tokens2)
    if not set1 or not set2:
        return 0.0
    return len(set1 & set2) / len(set1 | set2)


@dataclass(frozen=True)
class PreparedText:
    """Normalized text with its filtered token set."""
    normalized: str
    tokens: FrozenSet[str]

    @classmethod
    def from_text(cls, text: Optional[str], min_token_length: int = TITLE_MIN_TOKEN_LENGTH) -> 'PreparedText':
        normalized = normalize_text(text)
        return cls(normalized=normalized, tokens=tokenize(normalized, min_token_length))

    def similarity(self, other: 'PreparedText') -> float:
        """Score in [0.0, 1.0]; identical normalized text scores 1.0."""
        if self.normalized == other.normalized:
            return 1.0
        if not self.normalized or not other.normalized:
            return 0.0
        return jaccard(self.tokens, other.tokens)


def title_similarity(title1: Optional[str], title2: Optional[str]) -> float:
    """Similarity of two titles (tokens longer than one character)."""
    return PreparedText.from_text(title1, TITLE_MIN_TOKEN_LENGTH).similarity(
        PreparedText.from_text(title2, TITLE_MIN_TOKEN_LENGTH)
    )


def content_similarity(text1: Optional[str], text2: Optional[str]) -> float:
    """Similarity of two longer texts (tokens longer than two characters)."""
    return PreparedText.from_text(text1, CONTENT_MIN_TOKEN_LENGTH).similarity(
        PreparedText.from_text(text2, CONTENT_MIN_TOKEN_LENGTH)
    )


similarity = title_similarity
