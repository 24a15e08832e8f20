#!/usr/bin/env python3
"""
Supabase REST API storage adapter.

Persistence boundary of the alert pipeline: RSS sources, stored alerts and
user push recipients all live in Supabase tables accessed over HTTPS.
"""

import logging
from datetime import datetime, timezone, timedelta
from typing import List, Dict, Any, Optional, Tuple, Set

from supabase import create_client, Client

from core.deduplication import normalize_text
from core.env_loader import get_env_var
from core.exceptions import DatabaseOperationError
from core.models import Alert, FeedSource, UserLocationProfile

logger = logging.getLogger(__name__)


def _window_start(hours: int) -> str:
    return (datetime.now(timezone.utc).replace(microsecond=0) - timedelta(hours=hours)).isoformat()


class SupabaseAlertStore:
    """Alert storage using the Supabase REST API."""

    def __init__(self,
                 client: Optional[Client] = None,
                 alerts_table: str = 'alerts',
                 profiles_table: str = 'profiles',
                 sources_table: str = 'rss_sources'):
        """
        Initialize store.

        Args:
            client: Supabase client. If None, one is created from SUPABASE_URL
                and SUPABASE_SERVICE_KEY.
        """
        self.client = client or self._create_client()
        self.alerts_table = alerts_table
        self.profiles_table = profiles_table
        self.sources_table = sources_table
        logger.debug("Supabase alert store initialized")

    @staticmethod
    def _create_client() -> Client:
        supabase_url = get_env_var('SUPABASE_URL', required=True)
        supabase_key = get_env_var('SUPABASE_SERVICE_KEY', required=True)
        return create_client(supabase_url, supabase_key)

    # Sources

    def get_default_sources(self) -> List[FeedSource]:
        """RSS sources flagged ``is_default``."""
        try:
            result = (self.client.table(self.sources_table)
                      .select('*')
                      .eq('is_default', True)
                      .execute())
        except Exception as e:
            logger.error(f"Failed to load RSS sources: {e}")
            raise DatabaseOperationError('select', self.sources_table, e) from e

        sources = [FeedSource.from_dict(row) for row in result.data or []]
        sources = [source for source in sources if source.url]
        logger.info(f"Loaded {len(sources)} default RSS sources")
        return sources

    # Alerts

    def get_recent_alert_keys(self, hours: int = 24) -> Tuple[Set[str], List[str]]:
        """
        Links and normalized titles of alerts created in the trailing window.

        Returns:
            Tuple of (links, normalized_titles)
        """
        try:
            result = (self.client.table(self.alerts_table)
                      .select('link, title')
                      .gte('created_at', _window_start(hours))
                      .execute())
        except Exception as e:
            logger.error(f"Failed to load existing alerts: {e}")
            raise DatabaseOperationError('select', self.alerts_table, e) from e

        rows = result.data or []
        links = {row['link'] for row in rows if row.get('link')}
        titles = [normalize_text(row.get('title')) for row in rows if row.get('title')]
        logger.info(f"Loaded {len(rows)} alerts from the last {hours} hours for deduplication")
        return links, titles

    def store_alerts(self, alerts: List[Alert]) -> int:
        """
        Insert alerts.

        Returns:
            Number of rows inserted
        """
        if not alerts:
            return 0

        try:
            result = (self.client.table(self.alerts_table)
                      .insert([alert.to_dict() for alert in alerts])
                      .execute())
        except Exception as e:
            logger.error(f"Failed to insert alerts: {e}")
            raise DatabaseOperationError('insert', self.alerts_table, e) from e

        stored = len(result.data) if result.data is not None else len(alerts)
        logger.info(f"Stored {stored} alerts")
        return stored

    def get_recent_alerts(self, hours: int = 24, limit: int = 100) -> List[Alert]:
        """Alerts created in the trailing window, newest first."""
        try:
            result = (self.client.table(self.alerts_table)
                      .select('*')
                      .gte('created_at', _window_start(hours))
                      .order('timestamp', desc=True)
                      .limit(limit)
                      .execute())
        except Exception as e:
            logger.error(f"Failed to get recent alerts: {e}")
            raise DatabaseOperationError('select', self.alerts_table, e) from e

        return [Alert.from_dict(row) for row in result.data or []]

    # Recipients

    def get_push_recipients(self) -> List[UserLocationProfile]:
        """Profiles that registered a push token."""
        try:
            result = (self.client.table(self.profiles_table)
                      .select('id, fcm_token, location')
                      .not_.is_('fcm_token', 'null')
                      .execute())
        except Exception as e:
            logger.error(f"Failed to load push recipients: {e}")
            raise DatabaseOperationError('select', self.profiles_table, e) from e

        recipients = [UserLocationProfile.from_dict(row) for row in result.data or []]
        logger.info(f"Loaded {len(recipients)} push recipients")
        return recipients

    def get_stats(self) -> Dict[str, Any]:
        """Row counts for the health check."""
        stats: Dict[str, Any] = {}
        for table in (self.alerts_table, self.profiles_table, self.sources_table):
            try:
                result = self.client.table(table).select('id', count='exact').limit(1).execute()
            except Exception as e:
                raise DatabaseOperationError('count', table, e) from e
            stats[table] = result.count or 0
        return stats
