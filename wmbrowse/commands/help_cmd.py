"""
HelpCommand — Command reference
"""

from . import Keyword
from ..commands.base import BaseCommand
from ..content import HELP_TEXT


KEYWORD = Keyword.HELP
USAGE = "help"


class HelpCommand(BaseCommand):

    def help(self):
        self.write(HELP_TEXT.strip("\n"))
        if self._cli.links.read_only:
            self.write("")
            self.write("(Read-only session: touch, update, expire, rm and cp are disabled.)")


def handle(cli, args):
    """Handle help command dispatch."""
    cli._help_cmd.help()
