"""
RemoveCommand — Delete an Identifier or one of its Attributes
"""

from typing import List

from . import Keyword
from ..commands.base import BaseCommand


KEYWORD = Keyword.RM
USAGE = "rm ID [ATTR]"


class RemoveCommand(BaseCommand):

    USAGE = USAGE

    def remove(self, args: List[str]):
        self.require_args(args, 1, 2)
        identifier = args[0]
        attribute = args[1] if len(args) == 2 else None

        target = f"\"{attribute}\" of \"{identifier}\"" if attribute else f"\"{identifier}\""
        self.check_sent(self.mutation.delete(identifier, attribute), f"deletion of {target}")
        self.write(f"Deleted {target}.")


def handle(cli, args):
    """Handle rm command dispatch."""
    cli._remove_cmd.remove(args)
