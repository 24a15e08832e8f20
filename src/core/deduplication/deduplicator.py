#!/usr/bin/env python3
"""
Strategy-Based Deduplicator

Filters a batch of incoming feed items against already stored alerts and
against earlier items of the same batch. The filter is stable: survivors
keep their input order and the first occurrence wins.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from core.models.feed_item import FeedItem
from .strategies import (
    BatchState,
    BatchSimilarityStrategy,
    Candidate,
    CompositeDeduplicationStrategy,
    DeduplicationStrategy,
    ExactLinkStrategy,
    ExactTitleStrategy,
    KnownTitleSimilarityStrategy,
    TITLE_DUPLICATE_THRESHOLD,
    CONTENT_DUPLICATE_THRESHOLD,
)

logger = logging.getLogger(__name__)


class DeduplicationResult:
    """Results from deduplication process with detailed metrics."""

    def __init__(self):
        """Initialize empty deduplication result."""
        self.original_count = 0
        self.unique_count = 0
        self.duplicates_found = 0
        self.strategy_stats = {}  # strategy_name -> count
        self.processing_time = 0.0
        self.dropped = []  # List of (item, strategy_name) tuples

    @property
    def duplicate_rate(self) -> float:
        """Calculate duplicate rate as percentage."""
        if self.original_count == 0:
            return 0.0
        return (self.duplicates_found / self.original_count) * 100

    def add_duplicate(self, item: FeedItem, strategy_name: str):
        """Record a dropped item."""
        self.duplicates_found += 1
        self.strategy_stats[strategy_name] = self.strategy_stats.get(strategy_name, 0) + 1
        self.dropped.append((item, strategy_name))

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            'original_count': self.original_count,
            'unique_count': self.unique_count,
            'duplicates_found': self.duplicates_found,
            'duplicate_rate': self.duplicate_rate,
            'strategy_stats': self.strategy_stats,
            'processing_time': self.processing_time
        }


class AlertDeduplicator:
    """
    Deduplication engine for incoming feed items.

    Per item, the first matching rule drops it:

    1. link already stored or accepted earlier in the batch
    2. normalized title identical to one accepted earlier in the batch
    3. title similarity to a stored title exceeds the title threshold
    4. against any accepted item, title similarity exceeds the title threshold,
       or both title and content similarity exceed the content threshold
    """

    def __init__(self,
                 title_threshold: float = TITLE_DUPLICATE_THRESHOLD,
                 content_threshold: float = CONTENT_DUPLICATE_THRESHOLD,
                 strategies: Optional[List[DeduplicationStrategy]] = None):
        """
        Initialize deduplicator.

        Args:
            title_threshold: Title similarity above which items are re-reports
            content_threshold: Title and content similarity above which items are re-reports
            strategies: Custom strategies. If None, builds the four default rules.
        """
        self.title_threshold = title_threshold
        self.content_threshold = content_threshold

        if strategies is None:
            strategies = [
                ExactLinkStrategy(),
                ExactTitleStrategy(),
                KnownTitleSimilarityStrategy(title_threshold),
                BatchSimilarityStrategy(title_threshold, content_threshold)
            ]
        self.composite_strategy = CompositeDeduplicationStrategy(strategies)

    def deduplicate(self,
                    items: Iterable[FeedItem],
                    existing_links: Optional[Iterable[str]] = None,
                    existing_titles: Optional[Iterable[str]] = None) -> Tuple[List[FeedItem], DeduplicationResult]:
        """
        Remove duplicate items using configured strategies.

        Args:
            items: Incoming items in feed order
            existing_links: Links of already stored alerts
            existing_titles: Normalized titles of already stored alerts

        Returns:
            Tuple of (unique_items, deduplication_result)
        """
        start_time = datetime.now()
        items = list(items)
        result = DeduplicationResult()
        result.original_count = len(items)

        if not items:
            return [], result

        state = BatchState.create(existing_links, existing_titles)
        logger.info(f"Deduplicating {len(items)} items against {len(state.existing_links)} stored links "
                    f"and {len(state.existing_titles)} stored titles")

        for item in items:
            candidate = Candidate.prepare(item)
            strategy_name = self.composite_strategy.find_duplicate(candidate, state)

            if strategy_name:
                result.add_duplicate(item, strategy_name)
                logger.debug(f"Skipping duplicate ({strategy_name}): {item.title[:50]}")
                continue

            state.accept(candidate)

        unique_items = [candidate.item for candidate in state.accepted]
        result.unique_count = len(unique_items)
        result.processing_time = (datetime.now() - start_time).total_seconds()

        logger.info(f"Deduplication completed: {result.original_count} → {result.unique_count} "
                    f"({result.duplicate_rate:.1f}% duplicates)")
        for strategy_name, count in result.strategy_stats.items():
            logger.info(f"  {strategy_name}: {count} duplicates found")

        return unique_items, result

    def filter_duplicates(self,
                          items: Iterable[FeedItem],
                          existing_links: Optional[Iterable[str]] = None,
                          existing_titles: Optional[Iterable[str]] = None) -> List[FeedItem]:
        """Return only the surviving items, in input order."""
        unique_items, _ = self.deduplicate(items, existing_links, existing_titles)
        return unique_items

    def get_strategy_names(self) -> List[str]:
        """Get names of all active strategies."""
        return self.composite_strategy.get_strategy_names()


def filter_duplicates(items: Iterable[FeedItem],
                      existing_links: Optional[Iterable[str]] = None,
                      existing_normalized_titles: Optional[Iterable[str]] = None) -> List[FeedItem]:
    """Filter duplicates with the default thresholds."""
    return AlertDeduplicator().filter_duplicates(items, existing_links, existing_normalized_titles)
