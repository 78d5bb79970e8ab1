"""
QuitCommand — End the session

Only sets the stop flag; the session loop disconnects both links on its
way out.
"""

from . import Keyword
from ..commands.base import BaseCommand


KEYWORD = Keyword.QUIT
USAGE = "quit | exit"


class QuitCommand(BaseCommand):

    def quit(self):
        self._cli.stop()


def handle(cli, args):
    """Handle quit/exit command dispatch."""
    cli._quit_cmd.quit()
