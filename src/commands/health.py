#!/usr/bin/env python3
"""
Health check command for monitoring system status.

Checks configuration, database reachability and integration setup.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.config import get_config_manager
from core.exceptions import ConfigurationError, DatabaseError

logger = logging.getLogger(__name__)


class HealthCommand(BaseCommand):
    """Handle system health monitoring and diagnostics."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute health subcommand."""
        try:
            if subcommand == "check":
                return self.check(args)
            else:
                return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"health {subcommand}")

    def check(self, args: Namespace) -> int:
        """Run comprehensive health check."""
        print("🏥 System Health Check")
        print("=" * 50)

        overall_healthy = True

        print("\n⚙️  Configuration:")
        try:
            config = self.config
            print(f"  ✅ Configuration: OK ({config.environment})")
        except ConfigurationError as e:
            print(f"  ❌ Configuration: {e}")
            return 1

        print("\n📊 Database Status:")
        try:
            for table, count in self.alert_store.get_stats().items():
                print(f"  📋 {table}: {count} records")
        except DatabaseError as e:
            print(f"  ❌ Database check failed: {e.message}")
            overall_healthy = False

        print("\n🔌 Integration Status:")
        for name, enabled in get_config_manager().get_integration_status().items():
            print(f"  {'✅' if enabled else '⚪'} {name}")

        print("\n" + "=" * 50)
        print("✅ System healthy" if overall_healthy else "❌ System unhealthy")
        return 0 if overall_healthy else 1
