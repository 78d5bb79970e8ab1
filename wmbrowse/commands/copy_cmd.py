"""
CopyCommand — Copy an Identifier's Attributes to another Identifier

    cp SRC DST      current Attributes of SRC
    cp -r SRC DST   every recorded Attribute of SRC, streamed over [0, now]

Copies keep each Attribute's creation time, payload and origin. When an
Attribute was written by someone else, the mutation link's origin is
switched to match it for that send and restored to the session origin
when the batch ends, whether it succeeded or not.

The first rejected send aborts the whole copy (including any unread part
of a history stream). Attributes already sent stay in the world model;
the error reports how many that was.
"""

import re
from typing import List

from loguru import logger

from . import Keyword
from ..commands.base import BaseCommand
from ..core.errors import LinkError, UsageError
from ..core.model import Attribute, WorldState, now_ms
from ..core.stream import drain


KEYWORD = Keyword.CP
USAGE = "cp [-r] SRC_ID DST_ID"

RECURSIVE_FLAG = "-r"


class CopyFailed(LinkError):
    """A send was rejected partway through a copy."""

    def __init__(self, attribute: Attribute, copied: int, cause: Exception = None):
        self.attribute = attribute
        self.copied = copied
        detail = f": {cause}" if cause else ""
        super().__init__(
            f"Copy failed at \"{attribute.name}\" after {copied} attribute(s) copied{detail}. "
            f"Copied attributes were not rolled back."
        )


class CopyCommand(BaseCommand):

    USAGE = USAGE

    def copy(self, args: List[str]) -> int:
        """
        Returns:
            Number of Attributes copied

        Raises:
            UsageError: Bad arguments or read-only session
            CopyFailed: A send was rejected
            StreamError: History stream failed (recursive copy)
        """
        recursive = bool(args) and args[0] == RECURSIVE_FLAG
        if recursive:
            args = args[1:]
        self.require_args(args, 2, 2)
        source, destination = args
        if source == destination:
            raise UsageError("Source and destination are the same Identifier.")
        self.require_writable()

        if recursive:
            copied = self.copy_history(source, destination)
        else:
            copied = self.copy_current(source, destination)

        if copied == 0:
            self.write(f"Nothing copied: source is empty (\"{source}\").")
        else:
            self.write(f"Copied {copied} attribute(s) from \"{source}\" to \"{destination}\".")
        return copied

    def copy_current(self, source: str, destination: str) -> int:
        state = self.fetch_snapshot(re.escape(source))
        attributes = state.attributes(source)
        if not attributes:
            return 0
        return self.send_batch(attributes, destination)

    def copy_history(self, source: str, destination: str) -> int:
        stream = self.observation.get_range_stream(re.escape(source), 0, now_ms())
        total = 0

        def copy_snapshot(snapshot: WorldState):
            nonlocal total
            attributes = snapshot.attributes(source)
            if attributes:
                total += self.send_batch(attributes, destination, already_copied=total)

        result = drain(stream, copy_snapshot)
        if not result.ok:
            if total:
                self.write(f"{total} attribute(s) were copied before the stream failed.")
            raise result.error
        return total

    def send_batch(self, attributes: List[Attribute], destination: str, already_copied: int = 0) -> int:
        """
        Send retargeted copies of attributes, in order.

        Returns:
            Number sent (always len(attributes) on return)

        Raises:
            CopyFailed: On the first rejected or faulted send
        """
        mutation = self.mutation
        own_origin = self.origin
        sent = 0
        try:
            for attribute in attributes:
                self._cli.ensure_attribute_spec(attribute.name)
                wanted = attribute.origin or own_origin
                if mutation.origin != wanted:
                    logger.info("Origin switched to {} for {}", wanted, attribute.name)
                    mutation.set_origin(wanted)

                copy = attribute.retarget(destination)
                try:
                    accepted = mutation.update_attribute(copy)
                except OSError as e:
                    raise CopyFailed(copy, already_copied + sent, e) from e
                if not accepted:
                    raise CopyFailed(copy, already_copied + sent)
                sent += 1
        finally:
            if mutation.origin != own_origin:
                mutation.set_origin(own_origin)
                logger.info("Origin restored to {}", own_origin)
        return sent


def handle(cli, args):
    """Handle cp command dispatch."""
    cli._copy_cmd.copy(args)
