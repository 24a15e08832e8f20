#!/usr/bin/env python3
"""
Central alert processing run.

Fetches the default RSS sources, drops items already reported, classifies
the rest, stores security events and notifies the users they are relevant to.
"""

import logging
import time
from typing import Callable, Iterable, List, Optional, Tuple

from core.deduplication import AlertDeduplicator
from core.exceptions import DatabaseError
from core.models import Alert, FeedItem, FeedSource, ProcessingReport

logger = logging.getLogger(__name__)

AsyncFetcher = Callable[[Iterable[FeedSource]], Tuple[List[FeedItem], List[str]]]


class AlertProcessingPipeline:
    """One end-to-end processing run over all default sources."""

    def __init__(self,
                 store,
                 feed_parser,
                 classifier,
                 deduplicator: Optional[AlertDeduplicator] = None,
                 dispatcher=None,
                 existing_window_hours: int = 24,
                 async_fetcher: Optional[AsyncFetcher] = None):
        """
        Initialize pipeline.

        Args:
            store: SupabaseAlertStore-like persistence boundary
            feed_parser: Synchronous fetcher exposing ``fetch_all(sources)``
            classifier: AlertClassifier
            deduplicator: Deduplication engine
            dispatcher: Notification dispatcher; None disables notifications
            existing_window_hours: Trailing window of stored alerts used for dedup
            async_fetcher: Concurrent fetcher used when a run asks for it
        """
        self.store = store
        self.feed_parser = feed_parser
        self.classifier = classifier
        self.deduplicator = deduplicator or AlertDeduplicator()
        self.dispatcher = dispatcher
        self.existing_window_hours = existing_window_hours
        self.async_fetcher = async_fetcher

    def _fetch(self, sources: List[FeedSource], use_async: bool) -> Tuple[List[FeedItem], List[str]]:
        if use_async and self.async_fetcher is not None:
            return self.async_fetcher(sources)
        return self.feed_parser.fetch_all(sources)

    def run(self, hours: Optional[int] = None, notify: bool = True, use_async: bool = False) -> ProcessingReport:
        """
        Execute one processing run.

        Args:
            hours: Dedup window override (defaults to the configured window)
            notify: Send push notifications for new alerts
            use_async: Fetch sources concurrently

        Returns:
            ProcessingReport; database failures yield ``success=False``
        """
        start_time = time.time()
        report = ProcessingReport(success=True, message="")
        window = hours or self.existing_window_hours

        try:
            self._run(report, window, notify, use_async)
        except DatabaseError as e:
            logger.error(f"Error in central alert processing: {e.message}")
            report.success = False
            report.message = e.message
            report.error = e.message

        logger.info(f"Processing run finished in {time.time() - start_time:.2f}s: "
                    f"{report.message or report.error}")
        return report

    def _run(self, report: ProcessingReport, window: int, notify: bool, use_async: bool) -> None:
        sources = self.store.get_default_sources()
        items, report.failed_sources = self._fetch(sources, use_async)
        report.items_fetched = len(items)
        logger.info(f"Fetched {len(items)} RSS items from {len(sources)} sources "
                    f"({len(report.failed_sources)} failed)")

        existing_links, existing_titles = self.store.get_recent_alert_keys(window)
        new_items = self.deduplicator.filter_duplicates(items, existing_links, existing_titles)
        report.items_after_dedup = len(new_items)
        logger.info(f"Found {len(new_items)} new items after deduplication")

        if not new_items:
            report.message = "No new alerts to process"
            return

        results = self.classifier.classify_batch(new_items)
        report.keyword_fallbacks = sum(1 for r in results if r.succeeded and r.error)
        alerts: List[Alert] = [r.alert for r in results if r.is_security_event]
        logger.info(f"Found {len(alerts)} security alerts")

        if not alerts:
            report.message = "No security alerts found"
            return

        self.store.store_alerts(alerts)
        report.processed = len(alerts)
        report.message = f"Processed {len(alerts)} new security alerts"

        if notify and self.dispatcher is not None:
            self._notify(report, alerts)

    def _notify(self, report: ProcessingReport, alerts: List[Alert]) -> None:
        try:
            recipients = self.store.get_push_recipients()
        except DatabaseError as e:
            logger.error(f"Error fetching users for notifications: {e.message}")
            return

        if not recipients:
            logger.info("No users with push tokens")
            return

        try:
            report.dispatch = self.dispatcher.dispatch(alerts, recipients)
        except Exception as e:
            logger.error(f"Error dispatching notifications: {e}", exc_info=True)
