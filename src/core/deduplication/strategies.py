#!/usr/bin/env python3
"""
Deduplication Strategies

Each strategy implements one duplicate rule for incoming feed items. A
candidate is checked against the state of the current batch: links and
titles already known from storage, plus the items accepted so far.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Set, Tuple

from core.models.feed_item import FeedItem
from .similarity import PreparedText, TITLE_MIN_TOKEN_LENGTH, CONTENT_MIN_TOKEN_LENGTH

logger = logging.getLogger(__name__)

TITLE_DUPLICATE_THRESHOLD = 0.85
CONTENT_DUPLICATE_THRESHOLD = 0.6


@dataclass(frozen=True)
class Candidate:
    """A feed item with its title and content normalized once."""
    item: FeedItem
    title: PreparedText
    content: PreparedText

    @classmethod
    def prepare(cls, item: FeedItem) -> 'Candidate':
        return cls(
            item=item,
            title=PreparedText.from_text(item.title, TITLE_MIN_TOKEN_LENGTH),
            content=PreparedText.from_text(f"{item.title} {item.description}", CONTENT_MIN_TOKEN_LENGTH)
        )


@dataclass
class BatchState:
    """
    Transient per-run deduplication state.

    Created for one batch and discarded afterwards. The caller's link and
    title collections are copied in, never mutated.
    """
    existing_links: FrozenSet[str] = frozenset()
    existing_titles: Tuple[PreparedText, ...] = ()
    seen_links: Set[str] = field(default_factory=set)
    seen_titles: Set[str] = field(default_factory=set)
    accepted: List[Candidate] = field(default_factory=list)

    @classmethod
    def create(cls, existing_links=None, existing_titles=None) -> 'BatchState':
        titles = sorted(set(existing_titles or ()))
        return cls(
            existing_links=frozenset(existing_links or ()),
            existing_titles=tuple(PreparedText.from_text(t, TITLE_MIN_TOKEN_LENGTH) for t in titles)
        )

    def accept(self, candidate: Candidate) -> None:
        self.seen_links.add(candidate.item.link)
        self.seen_titles.add(candidate.title.normalized)
        self.accepted.append(candidate)


class DeduplicationStrategy(ABC):
    """Abstract base class for deduplication strategies."""

    @abstractmethod
    def is_duplicate(self, candidate: Candidate, state: BatchState) -> bool:
        """
        Check if a candidate duplicates something already known.

        Args:
            candidate: Prepared incoming item
            state: Current batch state

        Returns:
            True if the candidate should be dropped
        """
        pass

    @abstractmethod
    def get_priority(self) -> int:
        """
        Get priority of this strategy (lower number = evaluated first).

        Returns:
            Priority value (0-100, where 0 is highest priority)
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get human-readable name of this strategy."""
        pass


class ExactLinkStrategy(DeduplicationStrategy):
    """Link already stored, or already accepted earlier in this batch."""

    def is_duplicate(self, candidate: Candidate, state: BatchState) -> bool:
        link = candidate.item.link
        return link in state.existing_links or link in state.seen_links

    def get_priority(self) -> int:
        return 0

    def get_name(self) -> str:
        return "Exact Link"


class ExactTitleStrategy(DeduplicationStrategy):
    """Normalized title identical to one accepted earlier in this batch."""

    def is_duplicate(self, candidate: Candidate, state: BatchState) -> bool:
        return candidate.title.normalized in state.seen_titles

    def get_priority(self) -> int:
        return 10

    def get_name(self) -> str:
        return "Exact Title"


class KnownTitleSimilarityStrategy(DeduplicationStrategy):
    """Title nearly identical to a title already stored (re-report via another link)."""

    def __init__(self, similarity_threshold: float = TITLE_DUPLICATE_THRESHOLD):
        """
        Initialize known title strategy.

        Args:
            similarity_threshold: Similarity that must be exceeded to count as duplicate
        """
        self.similarity_threshold = similarity_threshold

    def is_duplicate(self, candidate: Candidate, state: BatchState) -> bool:
        for existing in state.existing_titles:
            score = candidate.title.similarity(existing)
            if score > self.similarity_threshold:
                logger.debug(f"Similar to stored title '{existing.normalized}' ({score:.2f})")
                return True
        return False

    def get_priority(self) -> int:
        return 20

    def get_name(self) -> str:
        return "Known Title Similarity"


class BatchSimilarityStrategy(DeduplicationStrategy):
    """
    Near-duplicate of an item accepted earlier in this batch.

    Matches when the titles alone are very close, or when both titles and
    bodies are moderately close (same event, differently phrased headline).
    """

    def __init__(self,
                 title_threshold: float = TITLE_DUPLICATE_THRESHOLD,
                 content_threshold: float = CONTENT_DUPLICATE_THRESHOLD):
        """
        Initialize batch similarity strategy.

        Args:
            title_threshold: Title similarity that alone marks a duplicate
            content_threshold: Title and content similarity that together mark a duplicate
        """
        self.title_threshold = title_threshold
        self.content_threshold = content_threshold

    def is_duplicate(self, candidate: Candidate, state: BatchState) -> bool:
        for accepted in state.accepted:
            title_score = candidate.title.similarity(accepted.title)
            if title_score > self.title_threshold:
                logger.debug(f"Similar to batch title '{accepted.item.title}' ({title_score:.2f})")
                return True
            if title_score > self.content_threshold:
                content_score = candidate.content.similarity(accepted.content)
                if content_score > self.content_threshold:
                    logger.debug(
                        f"Similar to batch item '{accepted.item.title}' "
                        f"(title {title_score:.2f}, content {content_score:.2f})"
                    )
                    return True
        return False

    def get_priority(self) -> int:
        return 30

    def get_name(self) -> str:
        return "Batch Similarity"


class CompositeDeduplicationStrategy:
    """
    Composite strategy that combines multiple deduplication strategies.

    Strategies are applied in priority order (lowest number first).
    """

    def __init__(self, strategies: Optional[List[DeduplicationStrategy]] = None):
        """
        Initialize composite strategy.

        Args:
            strategies: List of strategies to use. If None, uses default set.
        """
        if strategies is None:
            strategies = self._get_default_strategies()

        self.strategies = sorted(strategies, key=lambda s: s.get_priority())

        logger.debug(f"Initialized deduplication with {len(self.strategies)} strategies: "
                     f"{[s.get_name() for s in self.strategies]}")

    def _get_default_strategies(self) -> List[DeduplicationStrategy]:
        """Get default set of deduplication strategies."""
        return [
            ExactLinkStrategy(),
            ExactTitleStrategy(),
            KnownTitleSimilarityStrategy(),
            BatchSimilarityStrategy()
        ]

    def find_duplicate(self, candidate: Candidate, state: BatchState) -> Optional[str]:
        """
        Run strategies in priority order.

        Returns:
            Name of the first strategy that matched, or None
        """
        for strategy in self.strategies:
            if strategy.is_duplicate(candidate, state):
                return strategy.get_name()
        return None

    def add_strategy(self, strategy: DeduplicationStrategy) -> None:
        """Add a new strategy to the composite."""
        self.strategies.append(strategy)
        self.strategies.sort(key=lambda s: s.get_priority())
        logger.info(f"Added strategy: {strategy.get_name()}")

    def remove_strategy(self, strategy_name: str) -> bool:
        """
        Remove a strategy by name.

        Args:
            strategy_name: Name of strategy to remove

        Returns:
            True if strategy was removed, False if not found
        """
        for i, strategy in enumerate(self.strategies):
            if strategy.get_name() == strategy_name:
                del self.strategies[i]
                logger.info(f"Removed strategy: {strategy_name}")
                return True
        return False

    def get_strategy_names(self) -> List[str]:
        """Get names of all registered strategies in priority order."""
        return [strategy.get_name() for strategy in self.strategies]
