"""
TouchCommand — Create Identifiers
"""

from typing import List

from . import Keyword
from ..commands.base import BaseCommand


KEYWORD = Keyword.TOUCH
USAGE = "touch ID [ID...]"


class TouchCommand(BaseCommand):

    USAGE = USAGE

    def touch(self, identifiers: List[str]):
        self.require_args(identifiers, 1)
        mutation = self.mutation
        for identifier in identifiers:
            self.check_sent(mutation.create_identifier(identifier), f"creation of \"{identifier}\"")
            self.write(f"Created \"{identifier}\".")


def handle(cli, args):
    """Handle touch command dispatch."""
    cli._touch_cmd.touch(args)
