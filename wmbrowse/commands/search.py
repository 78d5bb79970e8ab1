"""
SearchCommand — Find Identifiers by regular expression

Each argument is searched separately; matches are listed one per line
with the Identifier marker.
"""

from typing import List

from . import Keyword
from ..commands.base import BaseCommand
from ..core.errors import UsageError
from ..presentation.formatters import render_identifiers


KEYWORD = Keyword.SEARCH
USAGE = "search ID_REGEX [ID_REGEX...]"


class SearchCommand(BaseCommand):
    """Command for Identifier search on the observation link."""

    USAGE = USAGE

    def search(self, patterns: List[str]):
        """
        Search Identifiers.

        Args:
            patterns: One or more regular expressions
        """
        self.require_args(patterns, 1)
        for regex in patterns:
            if not regex:
                raise UsageError("Empty regular expression. Unable to search.")

        for regex in patterns:
            self.write(f"Searching Identifiers for \"{regex}\"...")
            matched = self.observation.search_ids(regex)
            self.write_lines(render_identifiers(matched or []))


def handle(cli, args):
    """Handle search command dispatch."""
    cli._search_cmd.search(args)
