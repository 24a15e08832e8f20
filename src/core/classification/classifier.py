#!/usr/bin/env python3
"""
Alert classifier: AI classification with keyword fallback.

Every feed item yields a ClassificationResult tagged with the path that
produced it. Items are classified in small concurrent batches with a pause
between batches to stay inside provider rate limits.
"""

import time
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from core.exceptions import ErrorRecovery
from core.location.gazetteer import LOCATION_UNKNOWN
from core.models import Alert, ClassificationResult, FeedItem
from .keywords import KeywordClassifier
from .sources import extract_source_from_link

logger = logging.getLogger(__name__)


def _ai_location(value: Any) -> str:
    if value is None:
        return LOCATION_UNKNOWN
    location = str(value).strip()
    if not location or location.lower() == "null":
        return LOCATION_UNKNOWN
    return location


class AlertClassifier:
    """Turns feed items into alerts."""

    def __init__(self,
                 ai_client=None,
                 keyword_classifier: Optional[KeywordClassifier] = None,
                 batch_size: int = 5,
                 batch_delay: float = 1.0,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize classifier.

        Args:
            ai_client: Object exposing ``classify_security_event(text) -> dict``.
                When None, every item goes through keyword classification.
            keyword_classifier: Fallback classifier
            batch_size: Items classified concurrently per batch
            batch_delay: Seconds to wait between batches
            sleep: Sleep function (injected by tests)
        """
        self.ai_client = ai_client
        self.keyword_classifier = keyword_classifier or KeywordClassifier()
        self.batch_size = max(1, batch_size)
        self.batch_delay = batch_delay
        self._sleep = sleep

    def _build_alert(self, item: FeedItem, is_security_event: bool, location: str) -> Alert:
        return Alert(
            title=item.title,
            description=item.description,
            location=location,
            timestamp=item.pub_date or datetime.now(timezone.utc).isoformat(),
            source=extract_source_from_link(item.link),
            link=item.link,
            is_security_event=is_security_event
        )

    def _classify_with_keywords(self, item: FeedItem, error: Optional[str] = None) -> ClassificationResult:
        is_security_event, location = self.keyword_classifier.classify_text(f"{item.title} {item.description}")
        return ClassificationResult.from_keywords(item, self._build_alert(item, is_security_event, location), error)

    def classify(self, item: FeedItem) -> ClassificationResult:
        """Classify one item, falling back to keywords when the AI path fails."""
        if self.ai_client is None:
            return self._classify_with_keywords(item)

        text = f"{item.title} {item.description}"
        try:
            response: Dict[str, Any] = self.ai_client.classify_security_event(text)
        except Exception as e:
            if not ErrorRecovery.should_fallback(e):
                raise
            logger.error(f"AI classification failed for {item.link}, using keywords: {e}")
            return self._classify_with_keywords(item, error=str(e))

        alert = self._build_alert(
            item,
            response.get("is_security_event") is True,
            _ai_location(response.get("location"))
        )
        return ClassificationResult.from_ai(item, alert)

    def _classify_safely(self, item: FeedItem) -> ClassificationResult:
        try:
            return self.classify(item)
        except Exception as e:
            logger.error(f"Classification failed for {item.link}: {e}")
            return ClassificationResult.failed(item, str(e))

    def classify_batch(self, items: List[FeedItem]) -> List[ClassificationResult]:
        """
        Classify items in batches, preserving input order.

        A failure on one item never affects its batch siblings; it is
        reported as a FAILED result.
        """
        results: List[ClassificationResult] = []
        batches = [items[i:i + self.batch_size] for i in range(0, len(items), self.batch_size)]

        for index, batch in enumerate(batches):
            logger.debug(f"Classifying batch {index + 1}/{len(batches)} ({len(batch)} items)")
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                results.extend(executor.map(self._classify_safely, batch))

            if index < len(batches) - 1 and self.batch_delay > 0:
                self._sleep(self.batch_delay)

        fallbacks = sum(1 for r in results if r.error and r.succeeded)
        failures = sum(1 for r in results if not r.succeeded)
        logger.info(f"Classified {len(results)} items ({fallbacks} keyword fallbacks, {failures} failures)")
        return results
