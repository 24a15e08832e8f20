#!/usr/bin/env python3
"""
Deduplication command endpoints.
"""

from argparse import Namespace

from .base import BaseCommand
from core.deduplication import (
    content_similarity,
    normalize_text,
    title_similarity,
)


class DedupCommand(BaseCommand):
    """Inspect similarity scores used by deduplication."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute dedup subcommand."""
        try:
            if subcommand == "similarity":
                return self.similarity(args)
            else:
                return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"dedup {subcommand}")

    def similarity(self, args: Namespace) -> int:
        """Score two texts with the title (or content) similarity measure."""
        scorer = content_similarity if getattr(args, 'content', False) else title_similarity
        score = scorer(args.text_a, args.text_b)

        result = {
            'mode': 'content' if getattr(args, 'content', False) else 'title',
            'normalized_a': normalize_text(args.text_a),
            'normalized_b': normalize_text(args.text_b),
            'similarity': round(score, 4)
        }
        self.print_json(result)
        return 0
