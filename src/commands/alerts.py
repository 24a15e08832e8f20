#!/usr/bin/env python3
"""
Alert command endpoints: run the processing pipeline and inspect stored alerts.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.formatters import format_alert, filter_recent_alerts

logger = logging.getLogger(__name__)


class AlertsCommand(BaseCommand):
    """Handle alert processing and listing."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute alerts subcommand."""
        try:
            if subcommand == "process":
                return self.process(args)
            elif subcommand == "recent":
                return self.recent(args)
            else:
                return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"alerts {subcommand}")

    def process(self, args: Namespace) -> int:
        """Run one central processing pass over all default RSS sources."""
        pipeline = self.create_pipeline()
        if getattr(args, 'verbose', False):
            logging.getLogger().setLevel(logging.DEBUG)

        report = pipeline.run(
            hours=getattr(args, 'hours', None),
            notify=not getattr(args, 'no_notify', False),
            use_async=getattr(args, 'async_fetch', False)
        )

        self.print_json(report.to_dict())
        return 0 if report.success else 1

    def recent(self, args: Namespace) -> int:
        """Show alerts stored in the last N hours."""
        hours = getattr(args, 'hours', 24) or 24
        alerts = filter_recent_alerts(self.alert_store.get_recent_alerts(hours=hours), hours)

        if not alerts:
            print(f"No alerts in the last {hours} hours.")
            return 0

        print(f"🚨 {len(alerts)} alerts in the last {hours} hours\n")
        for alert in alerts:
            print(format_alert(alert))
        return 0
