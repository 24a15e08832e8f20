#!/usr/bin/env python3
"""
Location command endpoints for checking alert relevance by hand.
"""

from argparse import Namespace

from .base import BaseCommand


class LocationsCommand(BaseCommand):
    """Inspect location normalization and relevance decisions."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute locations subcommand."""
        try:
            if subcommand == "check":
                return self.check(args)
            elif subcommand == "normalize":
                return self.normalize(args)
            else:
                return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"locations {subcommand}")

    def check(self, args: Namespace) -> int:
        """Decide whether an alert location is relevant to a user location."""
        matcher = self.location_matcher
        relevant = matcher.is_relevant(args.alert_location, args.user_location)

        self.print_json({
            'alert_location': args.alert_location,
            'user_location': args.user_location,
            'normalized_alert_location': matcher.normalize(args.alert_location),
            'normalized_user_location': matcher.normalize(args.user_location),
            'relevant': relevant
        })
        return 0

    def normalize(self, args: Namespace) -> int:
        """Print the canonical form of a location string and its nearby places."""
        matcher = self.location_matcher
        self.print_json({
            'input': args.text,
            'normalized': matcher.normalize(args.text),
            'nearby': list(matcher.nearby_places(args.text))
        })
        return 0
