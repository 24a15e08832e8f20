#!/usr/bin/env python3
"""
Run report data models.

Contains data structures describing the outcome of a processing run.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


@dataclass
class DispatchReport:
    """Outcome of notification fan-out for a set of alerts."""
    alerts_considered: int = 0
    recipients_matched: int = 0
    notifications_sent: int = 0
    notifications_failed: int = 0
    per_alert: Dict[str, int] = field(default_factory=dict)  # alert_id -> relevant users

    def to_dict(self) -> Dict[str, Any]:
        return {
            'alerts_considered': self.alerts_considered,
            'recipients_matched': self.recipients_matched,
            'notifications_sent': self.notifications_sent,
            'notifications_failed': self.notifications_failed
        }


@dataclass
class ProcessingReport:
    """Represents the outcome of a single central processing run."""
    success: bool
    message: str
    processed: int = 0
    items_fetched: int = 0
    items_after_dedup: int = 0
    failed_sources: List[str] = field(default_factory=list)
    keyword_fallbacks: int = 0
    dispatch: Optional[DispatchReport] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON response shape of a processing run."""
        result = {
            'success': self.success,
            'processed': self.processed,
            'items_fetched': self.items_fetched,
            'items_after_dedup': self.items_after_dedup,
            'failed_sources': list(self.failed_sources),
            'keyword_fallbacks': self.keyword_fallbacks
        }
        if self.success:
            result['message'] = self.message
        else:
            result['error'] = self.error or self.message
        if self.dispatch:
            result['dispatch'] = self.dispatch.to_dict()
        return result
