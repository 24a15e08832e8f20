#!/usr/bin/env python3
"""
CLI Router for the alert relay.

Modular command architecture: ``run.py <command> <subcommand> [options]``.
"""

import argparse
import logging
import sys
from typing import Optional, List

# Load environment variables first
import core.env_loader  # noqa: F401  Auto-loads .env file

from commands import get_command, COMMANDS

logger = logging.getLogger(__name__)


class CLIRouter:
    """
    CLI router for alert relay commands.

    Command structure:
    - python run.py alerts process --hours 24 --async
    - python run.py alerts recent --hours 6
    - python run.py locations check --alert-location "רמת גן" --user-location "תל אביב"
    - python run.py dedup similarity "כותרת א" "כותרת ב"
    """

    def __init__(self):
        """Initialize CLI router."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description="Location-aware security alert relay for Israeli news feeds",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{command}'
        )
        self._command_parsers = subparsers.choices

        self._add_alerts_parser(subparsers)
        self._add_locations_parser(subparsers)
        self._add_dedup_parser(subparsers)
        self._add_health_parser(subparsers)

        return parser

    def _add_alerts_parser(self, subparsers):
        """Add alerts command parser."""
        alerts_parser = subparsers.add_parser(
            'alerts',
            help='Alert processing and listing'
        )

        alerts_subparsers = alerts_parser.add_subparsers(
            dest='subcommand',
            help='Alert operations',
            metavar='{process,recent}'
        )

        process_parser = alerts_subparsers.add_parser('process', help='Fetch, deduplicate, classify, store and notify')
        process_parser.add_argument('--hours', type=int, default=None, help='Dedup window of stored alerts (default: from config, 24)')
        process_parser.add_argument('--no-notify', action='store_true', help='Skip push notifications')
        process_parser.add_argument('--async', dest='async_fetch', action='store_true', help='Fetch RSS sources concurrently')
        process_parser.add_argument('--verbose', action='store_true', help='Verbose output')

        recent_parser = alerts_subparsers.add_parser('recent', help='Show recently stored alerts')
        recent_parser.add_argument('--hours', type=int, default=24, help='Hours to look back (default: 24)')

    def _add_locations_parser(self, subparsers):
        """Add locations command parser."""
        locations_parser = subparsers.add_parser(
            'locations',
            help='Location normalization and relevance'
        )

        locations_subparsers = locations_parser.add_subparsers(
            dest='subcommand',
            help='Location operations',
            metavar='{check,normalize}'
        )

        check_parser = locations_subparsers.add_parser('check', help='Is an alert location relevant to a user location?')
        check_parser.add_argument('--alert-location', required=True, help='Location extracted from the alert')
        check_parser.add_argument('--user-location', required=True, help='Location registered by the user')

        normalize_parser = locations_subparsers.add_parser('normalize', help='Show the canonical form of a location')
        normalize_parser.add_argument('text', help='Location text')

    def _add_dedup_parser(self, subparsers):
        """Add dedup command parser."""
        dedup_parser = subparsers.add_parser(
            'dedup',
            help='Deduplication diagnostics'
        )

        dedup_subparsers = dedup_parser.add_subparsers(
            dest='subcommand',
            help='Dedup operations',
            metavar='{similarity}'
        )

        similarity_parser = dedup_subparsers.add_parser('similarity', help='Score two texts')
        similarity_parser.add_argument('text_a', help='First text')
        similarity_parser.add_argument('text_b', help='Second text')
        similarity_parser.add_argument('--content', action='store_true', help='Use content tokenization (tokens longer than 2)')

    def _add_health_parser(self, subparsers):
        """Add health command parser."""
        health_parser = subparsers.add_parser(
            'health',
            help='System health monitoring and diagnostics'
        )

        health_subparsers = health_parser.add_subparsers(
            dest='subcommand',
            help='Health operations',
            metavar='{check}'
        )

        health_subparsers.add_parser('check', help='Run comprehensive health check')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        return """
Examples:
  # Scheduled run (all default sources, notifications on)
  python run.py alerts process
  python run.py alerts process --async --verbose

  # Manual runs
  python run.py alerts process --no-notify        # Store only
  python run.py alerts recent --hours 6

  # Diagnostics
  python run.py locations check --alert-location "רמת גן" --user-location "תל אביב"
  python run.py locations normalize "ת״א"
  python run.py dedup similarity "אזעקה בתל אביב" "אזעקות בתל אביב" --content
  python run.py health check

"""

    def route_command(self, args: Optional[List[str]] = None) -> int:
        """
        Route command to appropriate handler.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        try:
            if args is None:
                args = sys.argv[1:]

            parsed_args = self.parser.parse_args(args)

            if not parsed_args.command:
                self.parser.print_help()
                return 1

            return self._handle_command(parsed_args)

        except SystemExit as e:
            # argparse calls sys.exit() on error or help
            return e.code if e.code is not None else 0
        except Exception as e:
            logger.error(f"CLI routing error: {e}", exc_info=True)
            return 1

    def _handle_command(self, args: argparse.Namespace) -> int:
        """Handle command structure."""
        logger.debug(f"Handling command: {args.command}")

        if args.command not in COMMANDS:
            available = ', '.join(COMMANDS.keys())
            logger.error(f"Unknown command '{args.command}'. Available: {available}")
            return 1

        subcommand = getattr(args, 'subcommand', None)
        if not subcommand:
            logger.error(f"No subcommand specified for '{args.command}'")
            self._command_parsers[args.command].print_help()
            return 1

        try:
            command = get_command(args.command)
            return command.execute(subcommand, args)
        except Exception as e:
            logger.error(f"Error executing {args.command} {subcommand}: {e}", exc_info=True)
            return 1


def main(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    router = CLIRouter()
    return router.route_command(args)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
