"""
StatusCommand — Current state of matching Identifiers

Fetches the current snapshot for each Identifier expression and prints
every Identifier with its live Attributes.
"""

from typing import List

from . import Keyword
from ..commands.base import BaseCommand
from ..presentation.formatters import render_snapshot


KEYWORD = Keyword.STATUS
USAGE = "status ID_REGEX [ID_REGEX...]"


class StatusCommand(BaseCommand):

    USAGE = USAGE

    def status(self, patterns: List[str]):
        self.require_args(patterns, 1)
        for regex in patterns:
            self.write(f"Current status of \"{regex}\":")
            state = self.fetch_snapshot(regex)
            self.write_lines(render_snapshot(state, self.registry))


def handle(cli, args):
    """Handle status command dispatch."""
    cli._status_cmd.status(args)
