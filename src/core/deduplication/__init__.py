#!/usr/bin/env python3
"""
Deduplication package with strategy pattern implementation.

Provides the similarity scorer and the rule-based deduplication engine for
incoming feed items.
"""

from .similarity import (
    PreparedText,
    normalize_text,
    tokenize,
    jaccard,
    similarity,
    title_similarity,
    content_similarity,
    TITLE_MIN_TOKEN_LENGTH,
    CONTENT_MIN_TOKEN_LENGTH,
)
from .strategies import (
    BatchState,
    Candidate,
    DeduplicationStrategy,
    ExactLinkStrategy,
    ExactTitleStrategy,
    KnownTitleSimilarityStrategy,
    BatchSimilarityStrategy,
    CompositeDeduplicationStrategy,
    TITLE_DUPLICATE_THRESHOLD,
    CONTENT_DUPLICATE_THRESHOLD,
)
from .deduplicator import AlertDeduplicator, DeduplicationResult, filter_duplicates

__all__ = [
    'PreparedText',
    'normalize_text',
    'tokenize',
    'jaccard',
    'similarity',
    'title_similarity',
    'content_similarity',
    'TITLE_MIN_TOKEN_LENGTH',
    'CONTENT_MIN_TOKEN_LENGTH',
    'BatchState',
    'Candidate',
    'DeduplicationStrategy',
    'ExactLinkStrategy',
    'ExactTitleStrategy',
    'KnownTitleSimilarityStrategy',
    'BatchSimilarityStrategy',
    'CompositeDeduplicationStrategy',
    'TITLE_DUPLICATE_THRESHOLD',
    'CONTENT_DUPLICATE_THRESHOLD',
    'AlertDeduplicator',
    'DeduplicationResult',
    'filter_duplicates',
]
