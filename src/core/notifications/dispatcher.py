#!/usr/bin/env python3
"""
Alert notification dispatcher.

Fans new alerts out to every user whose registered location the alert is
relevant to, one push notification per (alert, user) pair.
"""

import logging
from typing import Iterable, List, Optional

from core.exceptions import NotificationError
from core.location import LocationMatcher, get_default_matcher
from core.models import Alert, DispatchReport, UserLocationProfile

logger = logging.getLogger(__name__)


def notification_title(alert: Alert) -> str:
    return f"התראה ב{alert.location}"


class AlertNotificationDispatcher:
    """Sends push notifications for alerts to location-relevant users."""

    def __init__(self, push_client, matcher: Optional[LocationMatcher] = None):
        """
        Initialize dispatcher.

        Args:
            push_client: Object exposing ``send(recipient, title, body, data) -> bool``
            matcher: Relevance matcher (defaults to the Israel gazetteer)
        """
        self.push_client = push_client
        self.matcher = matcher or get_default_matcher()

    def relevant_recipients(self, alert: Alert,
                            recipients: Iterable[UserLocationProfile]) -> List[UserLocationProfile]:
        """Recipients the alert's location is relevant to."""
        return [
            recipient for recipient in recipients
            if self.matcher.is_relevant(alert.location, recipient.raw_location)
        ]

    def dispatch(self, alerts: Iterable[Alert], recipients: Iterable[UserLocationProfile]) -> DispatchReport:
        """Send notifications for every alert; failures are counted, never raised."""
        alerts = list(alerts)
        recipients = list(recipients)
        report = DispatchReport(alerts_considered=len(alerts))

        for alert in alerts:
            matched = self.relevant_recipients(alert, recipients)
            report.per_alert[alert.id] = len(matched)
            report.recipients_matched += len(matched)

            if not matched:
                logger.debug(f"No relevant users for alert at {alert.location}")
                continue

            logger.info(f"Sending alert '{alert.title[:50]}' to {len(matched)} users near {alert.location}")
            for recipient in matched:
                try:
                    sent = self.push_client.send(
                        recipient,
                        notification_title(alert),
                        alert.title,
                        {"alert_id": alert.id}
                    )
                except NotificationError as e:
                    logger.error(f"Error sending notification to user {recipient.user_id}: {e.message}")
                    sent = False

                if sent:
                    report.notifications_sent += 1
                else:
                    report.notifications_failed += 1

        logger.info(f"Dispatch complete: {report.notifications_sent} sent, "
                    f"{report.notifications_failed} failed")
        return report
