"""
HistoryCommand — Full attribute history of matching Identifiers

Requests the range [0, now] as a stream and prints each snapshot the
moment it is pulled, separated by a line of '='. Long histories display
incrementally; a stream fault ends the command after whatever was
already shown.
"""

from typing import List

from loguru import logger

from . import Keyword
from ..commands.base import BaseCommand
from ..core.model import WorldState, now_ms
from ..core.stream import drain
from ..presentation.formatters import render_snapshot
from ..presentation.symbols import NO_DATA, SNAPSHOT_SEPARATOR


KEYWORD = Keyword.HISTORY
USAGE = "history ID_REGEX [ID_REGEX...]"


class HistoryCommand(BaseCommand):

    USAGE = USAGE

    def history(self, patterns: List[str]):
        """
        Stream and display history for each expression.

        Raises:
            StreamError: If a stream reports an error mid-drain
        """
        self.require_args(patterns, 1)
        for regex in patterns:
            self.write(f"History of \"{regex}\":")
            self._show_range(regex, 0, now_ms())

    def _show_range(self, regex: str, from_ts: int, to_ts: int) -> int:
        stream = self.observation.get_range_stream(regex, from_ts, to_ts)
        shown = 0

        def show(snapshot: WorldState):
            nonlocal shown
            if shown:
                self.write(SNAPSHOT_SEPARATOR)
            self.write_lines(render_snapshot(snapshot, self.registry))
            shown += 1

        result = drain(stream, show)
        if not result.ok:
            raise result.error
        if shown == 0:
            self.write(NO_DATA)
        logger.debug("History of {} displayed {} snapshot(s)", regex, shown)
        return shown


def handle(cli, args):
    """Handle history command dispatch."""
    cli._history_cmd.history(args)
